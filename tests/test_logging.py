"""Tests for the logging utility."""

import re
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kfsettings.utils.logging import log


class TestLog:
    """Tests for the log function."""

    def test_format(self, capsys):
        """Messages should carry a timestamp and level."""
        log("[Settings] hello")
        err = capsys.readouterr().err
        assert re.match(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[INFO\] \[Settings\] hello\n$", err)

    def test_level(self, capsys):
        """The level tag should be configurable."""
        log("careful", level="WARNING")
        assert "[WARNING] careful" in capsys.readouterr().err

    def test_stdout_untouched(self, capsys):
        """Logging should not write to stdout."""
        log("quiet")
        assert capsys.readouterr().out == ""
