"""Forward-only iterator over the keys of a settings group."""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from kfsettings.utils.logging import log
from kfsettings.core.errors import GroupNotFoundError
from kfsettings.core.keyfile import PathLike
from kfsettings.config.settings import Settings


class SettingsIterator:
    """Cursor over the keys of one group.

    The key list is read once when the iterator is created. The cursor starts
    before the first key; ``next()`` moves it forward and returns False once
    the last key has been reached.

    Iterating the object directly yields ``(name, value)`` pairs:

        with SettingsIterator("cfg.ini", "server") as it:
            for name, value in it:
                ...
    """

    def __init__(self, path: PathLike, group: str) -> None:
        """Load the file and fetch the key names of ``group``.

        Args:
            path: Complete name of the configuration file.
            group: Name of the group in the file.

        Raises:
            InvalidArgumentError: If path or group is missing or empty.
            LoadError: If the file cannot be read or parsed.
            GroupNotFoundError: If the group is absent or has no keys.
        """
        self.settings: Settings = Settings(path, group)

        keys = self.settings.key_file.keys(self.settings.group_name)
        if not keys:
            message = (
                f"Failed to retrieve keys of group {self.settings.group_name} "
                f"from {self.settings.file_path}"
            )
            log(f"[SettingsIterator] {message}", level="WARNING")
            self.settings.cleanup()
            raise GroupNotFoundError(message)

        self.key_names: Optional[Tuple[str, ...]] = tuple(keys)
        self.position: int = -1

    def _key_list(self) -> Tuple[str, ...]:
        if self.key_names is None:
            raise RuntimeError("Settings iterator has been cleaned up")
        return self.key_names

    def next(self) -> bool:
        """Advance to the next key.

        Returns:
            True if there was a next key, else False.
        """
        if self.position == len(self._key_list()) - 1:
            return False
        self.position += 1
        return True

    def current_name(self) -> str:
        """Name of the key at the cursor.

        Raises:
            RuntimeError: If ``next()`` has not yet returned True.
        """
        keys = self._key_list()
        if self.position < 0:
            raise RuntimeError("Settings iterator is before the first key; call next() first")
        return keys[self.position]

    def current_value(self) -> Optional[str]:
        """Value of the key at the cursor, or None if it no longer exists."""
        return self.settings.get(self.current_name())

    def __iter__(self) -> Iterator[Tuple[str, Optional[str]]]:
        while self.next():
            yield self.current_name(), self.current_value()

    def cleanup(self) -> None:
        """Release the key list and the underlying settings."""
        self.key_names = None
        self.settings.cleanup()

    def __enter__(self) -> "SettingsIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
