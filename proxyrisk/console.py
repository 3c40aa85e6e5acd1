"""Console logging with short status prefixes."""

from __future__ import annotations

import sys
from enum import Enum
from typing import TextIO


class LogType(Enum):
    """Kinds of console messages, each shown with its own prefix."""

    SUCCESS = "[+] "
    ERROR = "[-] "
    QUESTION = "[?] "
    INFO = "[*] "

    @property
    def prefix(self) -> str:
        return self.value


class ConsoleLogger:
    """Writes one prefixed line per message to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def log(self, log_type: LogType, message: str, *args: object) -> None:
        """Format ``message`` printf-style with ``args`` and print it."""
        text = message % args if args else message
        stream = self._stream if self._stream is not None else sys.stdout
        print(log_type.prefix + text, file=stream)