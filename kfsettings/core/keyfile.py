"""Key-file format handling.

A key-file is an INI-style text file made of ``[group]`` headers followed by
``key=value`` entries. Entries are parsed by ``configparser``, configured so
that keys keep their case, values are never interpolated and ``[DEFAULT]`` is
an ordinary group. Before parsing, leading whitespace is removed from every
line and comment lines are set aside so they can be written back above the
group or entry that follows them.

Values are stored on disk with backslash escapes: ``\\s`` for a space at
either end, ``\\n``, ``\\t``, ``\\r`` and ``\\\\``. A value therefore always
fits on one line and reads back exactly as it was set.
"""

from __future__ import annotations

import configparser
import io
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from kfsettings.core.errors import LoadError, SerializeError, WriteError

PathLike = Union[str, "os.PathLike[str]"]

# Header lines cannot contain a NUL, so no group in a file can collide with it.
NO_DEFAULT_SECTION = "\0"

DELIMITERS = ("=",)
COMMENT_PREFIXES = ("#", ";")
ENCODING = "utf-8"

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}
_UNESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(.)")


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        delimiters=DELIMITERS,
        comment_prefixes=COMMENT_PREFIXES,
        strict=False,
        interpolation=None,
        default_section=NO_DEFAULT_SECTION,
    )
    parser.optionxform = str  # keys are case-sensitive
    return parser


def _unescape_value(raw: str) -> str:
    # Unknown escapes are kept as written.
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), raw)


def _escape_value(group: str, key: str, value: str) -> str:
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in value)
    if escaped.startswith(" "):
        escaped = "\\s" + escaped[1:]
    if escaped.endswith(" "):
        escaped = escaped[:-1] + "\\s"
    if escaped != escaped.strip():
        raise SerializeError(
            f"Value of {key!r} in group {group!r} has surrounding whitespace "
            "that cannot be escaped"
        )
    return escaped


def _check_group(group: str) -> None:
    if not group:
        raise SerializeError("Group name is empty")
    if "\n" in group or "\r" in group:
        raise SerializeError(f"Group name {group!r} contains a line break")
    if "[" in group or "]" in group:
        raise SerializeError(f"Group name {group!r} contains a bracket")


def _check_key(group: str, key: str) -> None:
    if not key:
        raise SerializeError(f"Empty key in group {group!r}")
    if key != key.strip():
        raise SerializeError(f"Key {key!r} in group {group!r} has surrounding whitespace")
    if "\n" in key or "\r" in key:
        raise SerializeError(f"Key {key!r} in group {group!r} contains a line break")
    if "=" in key:
        raise SerializeError(f"Key {key!r} in group {group!r} contains '='")
    if key[0] in "[#;":
        raise SerializeError(f"Key {key!r} in group {group!r} starts with {key[0]!r}")


def _trim_blank(comments: List[str]) -> List[str]:
    while comments and not comments[-1]:
        comments.pop()
    return comments


class KeyFile:
    """In-memory key-file: an ordered group -> key -> value mapping.

    Groups and keys keep the order in which they were read or added.
    Localised entries such as ``Name[de]`` are plain keys and survive a
    load/save cycle unchanged, as do comment lines.
    """

    def __init__(self) -> None:
        """Create an empty key-file."""
        self._parser = _new_parser()
        # (group, None) holds the comments above a group header.
        self._comments: Dict[Tuple[str, Optional[str]], List[str]] = {}
        self._trailing: List[str] = []

    @classmethod
    def load(cls, path: PathLike) -> "KeyFile":
        """Parse the file at ``path``.

        Args:
            path: File to read.

        Returns:
            The loaded key-file.

        Raises:
            LoadError: If the file cannot be read, decoded or parsed.
        """
        keyfile = cls()
        try:
            with open(path, "r", encoding=ENCODING) as f:
                keyfile._parse(f, os.fspath(path))
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and NUL in the path.
            raise LoadError(str(e)) from e
        return keyfile

    @classmethod
    def from_data(cls, data: str) -> "KeyFile":
        """Parse key-file text held in memory.

        Raises:
            LoadError: If the text is malformed.
        """
        keyfile = cls()
        keyfile._parse(io.StringIO(data), "<string>")
        return keyfile

    def _parse(self, lines: Iterable[str], source: str) -> None:
        entries: List[str] = []
        pending: List[str] = []
        group: Optional[str] = None

        for raw in lines:
            line = raw.rstrip("\r\n").lstrip()
            if line.startswith(COMMENT_PREFIXES):
                pending.append(line)
                entries.append("")  # keeps line numbers in parse errors
                continue
            if not line:
                if pending:
                    pending.append("")
                entries.append("")
                continue

            header = self._parser.SECTCRE.match(line.rstrip())
            if header:
                group = header.group("header")
                self._attach(group, None, pending)
            elif group is not None and "=" in line:
                self._attach(group, line.split("=", 1)[0].strip(), pending)
            pending = []
            entries.append(line)

        self._trailing = _trim_blank(pending)

        try:
            self._parser.read_string("\n".join(entries), source=source)
        except configparser.Error as e:
            raise LoadError(str(e)) from e

        for name in self._parser.sections():
            for key, value in self._parser.items(name):
                self._parser.set(name, key, _unescape_value(value))

    def _attach(self, group: str, key: Optional[str], comments: List[str]) -> None:
        if _trim_blank(comments):
            self._comments.setdefault((group, key), []).extend(comments)

    def groups(self) -> List[str]:
        return self._parser.sections()

    def has_group(self, group: str) -> bool:
        return self._parser.has_section(group)

    def keys(self, group: str) -> Optional[List[str]]:
        """Return the ordered key names of ``group``, or None if it is absent."""
        if not self._parser.has_section(group):
            return None
        return list(self._parser[group])

    def get_value(self, group: str, key: str) -> Optional[str]:
        """Return the value of ``key`` in ``group``, or None if absent."""
        return self._parser.get(group, key, fallback=None)

    def set_value(self, group: str, key: str, value: str) -> None:
        """Set ``key`` in ``group``, creating the group if needed."""
        if not self._parser.has_section(group):
            self._parser.add_section(group)
        self._parser.set(group, key, value)

    def comments(self, group: str, key: Optional[str] = None) -> List[str]:
        """Return the comment lines above ``key``, or above the group header."""
        return list(self._comments.get((group, key), ()))

    def to_data(self) -> str:
        """Serialize every group, with its comments, to key-file text.

        Raises:
            SerializeError: If a group name, key or value cannot be written
                in a form that reads back unchanged.
        """
        lines: List[str] = []
        for group in self._parser.sections():
            _check_group(group)
            lines.extend(self._comments.get((group, None), ()))
            lines.append(f"[{group}]")
            for key, value in self._parser.items(group):
                _check_key(group, key)
                lines.extend(self._comments.get((group, key), ()))
                lines.append(f"{key}={_escape_value(group, key, value)}")
            lines.append("")
        lines.extend(self._trailing)
        return "".join(line + "\n" for line in lines)

    def write(self, path: PathLike) -> None:
        """Serialize and replace the file at ``path``.

        The text goes to a uniquely named temporary file next to ``path``
        which is then renamed over it, so the target is either fully
        replaced or untouched. An existing target keeps its permissions.

        Raises:
            SerializeError: See ``to_data``.
            WriteError: If the file cannot be written.
        """
        data = self.to_data()
        target = Path(path)
        tmp_name: Optional[str] = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding=ENCODING,
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(data)
            if target.is_file():
                os.chmod(tmp_name, stat.S_IMODE(target.stat().st_mode))
            os.replace(tmp_name, target)
        except (OSError, ValueError) as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise WriteError(str(e)) from e
