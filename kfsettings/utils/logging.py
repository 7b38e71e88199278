"""Logging utilities for the kfsettings package.

Provides a centralized logging function with timestamp and level prefix.
Messages go to stderr so that stdout stays free for command output.
"""

import sys
from datetime import datetime


def log(message: str, level: str = "INFO") -> None:
    """Print message with timestamp and level prefix.
    
    Args:
        message: The message to log.
        level: Severity tag, e.g. "INFO" or "WARNING".
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] [{level}] {message}", file=sys.stderr, flush=True)
