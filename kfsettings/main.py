"""Command-line entry point for kfsettings.

Usage:
    python -m kfsettings.main list FILE GROUP
    python -m kfsettings.main get FILE GROUP NAME
    python -m kfsettings.main set FILE GROUP NAME VALUE

Example:
    python -m kfsettings.main set cfg.ini server port 9090
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from kfsettings.config.settings import Settings
from kfsettings.config.iterator import SettingsIterator
from kfsettings.core.errors import SettingsError


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.
    
    Args:
        args: Command line arguments (default: sys.argv[1:]).
        
    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="kfsettings",
        description="Read and change settings of a key-file group"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Print every name=value of a group")
    list_cmd.add_argument("file", type=Path, help="Configuration file")
    list_cmd.add_argument("group", help="Group name")

    get_cmd = commands.add_parser("get", help="Print the value of one setting")
    get_cmd.add_argument("file", type=Path, help="Configuration file")
    get_cmd.add_argument("group", help="Group name")
    get_cmd.add_argument("name", help="Setting name")

    set_cmd = commands.add_parser("set", help="Change one setting and save the file")
    set_cmd.add_argument("file", type=Path, help="Configuration file")
    set_cmd.add_argument("group", help="Group name")
    set_cmd.add_argument("name", help="Setting name")
    set_cmd.add_argument("value", help="New value")

    return parser.parse_args(args)


def _list(parsed: argparse.Namespace) -> int:
    with SettingsIterator(parsed.file, parsed.group) as iterator:
        for name, value in iterator:
            print(f"{name}={value if value is not None else ''}")
    return 0


def _get(parsed: argparse.Namespace) -> int:
    with Settings(parsed.file, parsed.group) as settings:
        value = settings.get(parsed.name)
    if value is None:
        print(f"Error: {parsed.name} not set in group {parsed.group}", file=sys.stderr)
        return 1
    print(value)
    return 0


def _set(parsed: argparse.Namespace) -> int:
    with Settings(parsed.file, parsed.group) as settings:
        settings.set(parsed.name, parsed.value)
        settings.save()
    return 0


COMMANDS = {
    "list": _list,
    "get": _get,
    "set": _set,
}


def main(args: list[str] | None = None) -> int:
    """Main entry point.
    
    Args:
        args: Command line arguments (default: sys.argv[1:]).
        
    Returns:
        Exit code (0 for success).
    """
    parsed = parse_args(args)

    try:
        return COMMANDS[parsed.command](parsed)
    except SettingsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
