"""Settings store and iterator."""

from kfsettings.config.settings import Settings
from kfsettings.config.iterator import SettingsIterator

__all__ = ["Settings", "SettingsIterator"]
