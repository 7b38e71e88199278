"""Settings store for a single group of a key-file.

A ``Settings`` object loads a key-file, remembers which group it works on
and where the file lives, lets callers change values in memory and writes
the whole file back on ``save()``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from kfsettings.utils.logging import log
from kfsettings.core.errors import (
    InvalidArgumentError,
    LoadError,
    SerializeError,
    WriteError,
)
from kfsettings.core.keyfile import KeyFile, PathLike


def _require_path(path: Optional[PathLike]) -> Path:
    if path is None or not os.fspath(path):
        raise InvalidArgumentError("A configuration file path is required")
    return Path(path)


def _require_group(group: Optional[str]) -> str:
    if not group:
        raise InvalidArgumentError("A group name is required")
    return str(group)


class Settings:
    """Name/value settings of one group in a key-file.

    Changes made with ``set`` stay in memory until ``save`` is called.
    ``save`` writes every group of the file, not only this one.
    """

    def __init__(self, path: PathLike, group: str) -> None:
        """Load the configuration file.

        Args:
            path: Complete name of the configuration file.
            group: Name of the group in the file.

        Raises:
            InvalidArgumentError: If path or group is missing or empty.
            LoadError: If the file cannot be read or parsed.
        """
        file_path = _require_path(path)
        group_name = _require_group(group)

        self.key_file: Optional[KeyFile] = self._load(file_path)
        self.group_name: str = group_name
        self.file_path: Path = file_path

    @staticmethod
    def _load(path: Path) -> KeyFile:
        try:
            key_file = KeyFile.load(path)
        except LoadError as e:
            log(f"[Settings] Failed to load configuration from {path}: {e}", level="WARNING")
            raise
        log(f"[Settings] Loaded configuration from {path}")
        return key_file

    def _loaded(self) -> KeyFile:
        if self.key_file is None:
            raise RuntimeError("Settings have been cleaned up")
        return self.key_file

    def set(self, name: str, value: str) -> None:
        """Set a setting in memory.

        Args:
            name: Name of setting.
            value: Value of setting.

        Raises:
            InvalidArgumentError: If value is not a string.
        """
        if not isinstance(value, str):
            raise InvalidArgumentError(
                f"Setting values must be strings, got {type(value).__name__}"
            )
        self._loaded().set_value(self.group_name, name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a setting from memory.

        Args:
            name: Name of setting.
            default: Returned if the setting is not present.

        Returns:
            The current value or default.
        """
        value = self._loaded().get_value(self.group_name, name)
        return default if value is None else value

    def save(self) -> None:
        """Write all groups back to the configuration file.

        Raises:
            SerializeError: If the configuration cannot be serialized.
            WriteError: If the file cannot be written.
        """
        key_file = self._loaded()
        try:
            key_file.write(self.file_path)
        except SerializeError as e:
            log(f"[Settings] save: failed to serialize configuration: {e}", level="WARNING")
            raise
        except WriteError as e:
            log(f"[Settings] save: failed to write {self.file_path}: {e}", level="WARNING")
            raise
        log(f"[Settings] Saved configuration to {self.file_path}")

    def reload(self) -> None:
        """Discard unsaved changes and re-read the file.

        Raises:
            LoadError: If the file cannot be read; current values are kept.
        """
        self._loaded()
        self.key_file = self._load(self.file_path)

    def cleanup(self) -> None:
        """Release the loaded configuration. Safe to call more than once."""
        self.key_file = None

    def __enter__(self) -> "Settings":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return f"Settings(path={str(self.file_path)!r}, group={self.group_name!r})"
