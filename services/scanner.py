"""Linear forward scans used to position the cursor inside the response body."""

from __future__ import annotations

from enum import Enum

from services.stream import ByteStream

_COMMA = ord(",")
_CLOSE_BRACKET = ord("]")


class Separator(str, Enum):
    """What ``skip_to_next_element`` stopped on."""

    comma = "comma"
    array_end = "array_end"
    truncated = "truncated"


def locate_array(stream: ByteStream, marker: bytes) -> bool:
    """Discard bytes until ``marker`` has been consumed.

    Returns False if the stream ends first. The rolling window is only as
    large as the marker, so the scan never buffers the skipped body.
    """
    if not marker:
        raise ValueError("Array marker cannot be empty.")

    window = bytearray()
    size = len(marker)
    while True:
        value = stream.read_byte()
        if value is None:
            return False
        window.append(value)
        if len(window) > size:
            del window[0]
        if window == marker:
            return True


def skip_to_next_element(stream: ByteStream) -> Separator:
    """Discard bytes up to and including the next ``,`` or ``]``."""
    while True:
        value = stream.read_byte()
        if value is None:
            return Separator.truncated
        if value == _COMMA:
            return Separator.comma
        if value == _CLOSE_BRACKET:
            return Separator.array_end
