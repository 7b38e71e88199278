"""Key-file format and error types."""

from kfsettings.core.errors import (
    SettingsError,
    InvalidArgumentError,
    LoadError,
    GroupNotFoundError,
    SerializeError,
    WriteError,
)
from kfsettings.core.keyfile import KeyFile

__all__ = [
    "KeyFile",
    "SettingsError",
    "InvalidArgumentError",
    "LoadError",
    "GroupNotFoundError",
    "SerializeError",
    "WriteError",
]
