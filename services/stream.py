"""Forward-only byte cursor over a chunked HTTP response body."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

_WHITESPACE = frozenset(b" \t\r\n")


class ByteStream:
    """Reads a live body one byte at a time while holding a single chunk.

    The cursor only moves forward. ``peek_byte`` looks at the next byte
    without consuming it, which is the only lookahead the decoder needs.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks: Iterator[bytes] = iter(chunks)
        self._chunk = b""
        self._pos = 0
        self._consumed = 0
        self._exhausted = False

    @property
    def bytes_consumed(self) -> int:
        return self._consumed

    def _fill(self) -> bool:
        while self._pos >= len(self._chunk):
            if self._exhausted:
                return False
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self._exhausted = True
                self._chunk = b""
                self._pos = 0
                return False
            self._chunk = chunk
            self._pos = 0
        return True

    def peek_byte(self) -> Optional[int]:
        if not self._fill():
            return None
        return self._chunk[self._pos]

    def read_byte(self) -> Optional[int]:
        if not self._fill():
            return None
        value = self._chunk[self._pos]
        self._pos += 1
        self._consumed += 1
        return value

    def skip_whitespace(self) -> Optional[int]:
        """Consume whitespace and return (without consuming) the next byte."""
        while True:
            value = self.peek_byte()
            if value is None or value not in _WHITESPACE:
                return value
            self.read_byte()
