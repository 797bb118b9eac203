"""Plain-text console logger."""

from __future__ import annotations

import sys
from typing import TextIO


class Logger:
    """Writes log text to a stream, standard output by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def init(self) -> None:
        """Bind the logger to its output stream."""
        if self._stream is None:
            self._stream = sys.stdout

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def print(self, message: object) -> None:
        """Write a message without a trailing newline."""
        self.stream.write(str(message))
        self.stream.flush()

    def println(self, message: object = "") -> None:
        """Write a message followed by a newline."""
        self.stream.write(f"{message}\n")
        self.stream.flush()