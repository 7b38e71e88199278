"""Key-file settings package.

This package provides a small store and iterator API over a single
group of an INI-style key-file.
"""

from kfsettings.config.settings import Settings
from kfsettings.config.iterator import SettingsIterator
from kfsettings.core.errors import (
    SettingsError,
    InvalidArgumentError,
    LoadError,
    GroupNotFoundError,
    SerializeError,
    WriteError,
)

__all__ = [
    "Settings",
    "SettingsIterator",
    "SettingsError",
    "InvalidArgumentError",
    "LoadError",
    "GroupNotFoundError",
    "SerializeError",
    "WriteError",
]

__version__ = "1.0.0"
