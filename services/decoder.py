"""Incremental decoding of array elements straight off the response stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import MutableSequence, Optional

from pydantic import ValidationError

from models.payloads import ObservationPayload
from models.records import WeatherRecord
from models.results import FetchErrorKind
from services.scanner import Separator, skip_to_next_element
from services.stream import ByteStream

logger = logging.getLogger(__name__)

DEFAULT_DECODE_BUFFER_SIZE = 2048

_OPEN_BRACE = ord("{")
_CLOSE_BRACE = ord("}")
_OPEN_BRACKET = ord("[")
_CLOSE_BRACKET = ord("]")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")


class RecordDecodeError(ValueError):
    """Base class for failures that stop the decode loop."""

    kind: FetchErrorKind


class MalformedRecordError(RecordDecodeError):
    kind = FetchErrorKind.malformed_record


class StreamTruncatedError(RecordDecodeError):
    kind = FetchErrorKind.stream_truncated


class DecodeBuffer:
    """Fixed-capacity scratch space reused for every object of one fetch."""

    def __init__(self, capacity: int = DEFAULT_DECODE_BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("Decode buffer capacity must be positive.")
        self._data = bytearray(capacity)
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return self._length

    def clear(self) -> None:
        self._length = 0

    def append(self, value: int) -> None:
        if self._length >= len(self._data):
            raise MalformedRecordError(
                f"Object exceeds decode buffer capacity of {len(self._data)} bytes."
            )
        self._data[self._length] = value
        self._length += 1

    def getvalue(self) -> bytes:
        return bytes(self._data[: self._length])


def decode_one(stream: ByteStream, buffer: DecodeBuffer) -> WeatherRecord:
    """Decode exactly one JSON object at the cursor into a ``WeatherRecord``.

    Bytes are copied into ``buffer`` until the brace that closes the object,
    tracking string and escape state so braces inside strings do not count.
    Nothing past the closing brace is consumed.
    """
    buffer.clear()
    first = stream.skip_whitespace()
    if first is None:
        raise StreamTruncatedError("Stream ended before the next object started.")
    if first != _OPEN_BRACE:
        raise MalformedRecordError(f"Expected '{{' but found {chr(first)!r}.")

    depth = 0
    in_string = False
    escaped = False
    while True:
        value = stream.read_byte()
        if value is None:
            raise StreamTruncatedError(
                f"Stream ended inside an object after {len(buffer)} bytes."
            )
        buffer.append(value)

        if in_string:
            if escaped:
                escaped = False
            elif value == _BACKSLASH:
                escaped = True
            elif value == _QUOTE:
                in_string = False
            continue

        if value == _QUOTE:
            in_string = True
        elif value in (_OPEN_BRACE, _OPEN_BRACKET):
            depth += 1
        elif value in (_CLOSE_BRACE, _CLOSE_BRACKET):
            depth -= 1
            if depth == 0:
                break

    try:
        payload = ObservationPayload.model_validate_json(buffer.getvalue())
        return payload.to_record()
    except ValidationError as exc:
        raise MalformedRecordError(
            f"Object failed validation: {exc.error_count()} error(s)."
        ) from exc
    except (ValueError, OverflowError) as exc:
        raise MalformedRecordError(f"Object holds an unusable value: {exc}") from exc


@dataclass
class DecodeOutcome:
    """Result of the decode loop: records written and why it stopped."""

    count: int
    array_ended: bool = False
    error: Optional[RecordDecodeError] = None


def decode_records(
    stream: ByteStream,
    output: MutableSequence[WeatherRecord],
    max_data: int,
    buffer: DecodeBuffer,
) -> DecodeOutcome:
    """Decode up to ``max_data`` array elements into ``output[0:max_data]``.

    The cursor must sit just after the array's opening bracket. Decoding
    stops at capacity without reading further, at the closing bracket, or at
    the first element that fails; slots past the last success are untouched.
    """
    count = 0
    while count < max_data:
        if stream.skip_whitespace() == _CLOSE_BRACKET:
            stream.read_byte()
            return DecodeOutcome(count=count, array_ended=True)

        try:
            record = decode_one(stream, buffer)
        except RecordDecodeError as exc:
            logger.warning(
                "Failed to parse weather data",
                extra={"record_index": count, "error_kind": exc.kind.value, "reason": str(exc)},
            )
            return DecodeOutcome(count=count, error=exc)

        output[count] = record
        count += 1
        logger.debug("Decoded weather record", extra={"record_index": count - 1})

        if count >= max_data:
            break

        separator = skip_to_next_element(stream)
        if separator is Separator.array_end:
            return DecodeOutcome(count=count, array_ended=True)
        if separator is Separator.truncated:
            exc = StreamTruncatedError("Stream ended before the next separator.")
            logger.warning(
                "Stream ended between array elements",
                extra={"record_index": count, "error_kind": exc.kind.value},
            )
            return DecodeOutcome(count=count, error=exc)

    return DecodeOutcome(count=count)
