"""Exceptions raised by the settings store and iterator."""


class SettingsError(Exception):
    """Base class for all settings errors."""


class InvalidArgumentError(SettingsError, ValueError):
    """A path, group or value argument was missing or of the wrong type."""


class LoadError(SettingsError):
    """The configuration file could not be read or parsed."""


class GroupNotFoundError(SettingsError, KeyError):
    """The requested group does not exist or holds no keys."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class SerializeError(SettingsError):
    """The in-memory configuration could not be turned into text."""


class WriteError(SettingsError):
    """The serialized configuration could not be written to disk."""
