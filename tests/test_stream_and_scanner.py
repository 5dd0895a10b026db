from __future__ import annotations

import pytest

from services.scanner import Separator, locate_array, skip_to_next_element
from services.stream import ByteStream


def _stream(*chunks: bytes) -> ByteStream:
    return ByteStream(list(chunks))


def test_byte_stream_reads_across_chunks_and_skips_empty_ones() -> None:
    stream = _stream(b"ab", b"", b"c")

    assert stream.peek_byte() == ord("a")
    assert stream.read_byte() == ord("a")
    assert stream.read_byte() == ord("b")
    assert stream.read_byte() == ord("c")
    assert stream.read_byte() is None
    assert stream.peek_byte() is None
    assert stream.bytes_consumed == 3


def test_skip_whitespace_leaves_next_byte_unconsumed() -> None:
    stream = _stream(b" \r\n\t", b"  {")

    assert stream.skip_whitespace() == ord("{")
    assert stream.read_byte() == ord("{")
    assert stream.skip_whitespace() is None


def test_locate_array_finds_marker_split_across_chunks() -> None:
    stream = _stream(b'{"metadata":{"x":1},"summ', b'aries":[', b"{}")

    assert locate_array(stream, b'"summaries":[') is True
    assert stream.read_byte() == ord("{")


def test_locate_array_matches_overlapping_prefix() -> None:
    stream = _stream(b"xaaab!")

    assert locate_array(stream, b"aab") is True
    assert stream.read_byte() == ord("!")


def test_locate_array_returns_false_when_stream_ends() -> None:
    stream = _stream(b'{"observations":', b"[]")

    assert locate_array(stream, b'"summaries":[') is False
    assert stream.read_byte() is None


def test_locate_array_rejects_empty_marker() -> None:
    with pytest.raises(ValueError):
        locate_array(_stream(b"[]"), b"")


def test_skip_to_next_element_reports_comma() -> None:
    stream = _stream(b"  ,{")

    assert skip_to_next_element(stream) is Separator.comma
    assert stream.read_byte() == ord("{")


def test_skip_to_next_element_reports_array_end() -> None:
    stream = _stream(b"\n]}")

    assert skip_to_next_element(stream) is Separator.array_end
    assert stream.read_byte() == ord("}")


def test_skip_to_next_element_reports_truncation() -> None:
    assert skip_to_next_element(_stream(b"   ")) is Separator.truncated
