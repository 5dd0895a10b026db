"""Fetch-and-stream-decode pipeline for the WU PWS API."""

from __future__ import annotations

import logging
import time
from typing import Iterator, MutableSequence, Optional, Union

import httpx

from models.records import WeatherRecord
from models.results import (
    FetchError,
    FetchErrorKind,
    FetchResult,
    FetchState,
    FetchStatus,
)
from services.decoder import DEFAULT_DECODE_BUFFER_SIZE, DecodeBuffer, decode_records
from services.scanner import locate_array
from services.status import StatusLine
from services.stream import ByteStream
from settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_HOST = "api.weather.com"
DEFAULT_PORT = 443

_CONNECT_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
    httpx.ProxyError,
    httpx.UnsupportedProtocol,
)
_SEND_ERRORS = (httpx.WriteError, httpx.WriteTimeout, httpx.LocalProtocolError)


class _CallFailed(Exception):
    """Carries a pre-decode failure from a pipeline stage back to ``fetch``."""

    def __init__(self, state: FetchState, kind: FetchErrorKind, reason: str) -> None:
        super().__init__(reason)
        self.state = state
        self.kind = kind
        self.reason = reason


class WeatherFetcher:
    """Runs one request per call and decodes the record array off the wire.

    No connection, buffer, or other mutable state survives between calls, so
    a single instance can be reused as long as calls are not concurrent.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = 10.0,
        decode_buffer_size: int = DEFAULT_DECODE_BUFFER_SIZE,
        read_chunk_size: Optional[int] = 512,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.decode_buffer_size = decode_buffer_size
        self.read_chunk_size = read_chunk_size
        self._transport = transport

    @property
    def base_url(self) -> str:
        if self.port == DEFAULT_PORT:
            return f"https://{self.host}"
        return f"https://{self.host}:{self.port}"

    def fetch(
        self,
        endpoint_path: str,
        station_id: str,
        api_key: str,
        output: MutableSequence[WeatherRecord],
        array_marker: Union[str, bytes],
        max_data: int,
    ) -> FetchResult:
        """Fetch up to ``max_data`` records into ``output`` starting at index 0.

        Every I/O failure is reported through the returned ``FetchResult``;
        only a broken call contract raises ``ValueError``.
        """
        if max_data < 0:
            raise ValueError("max_data cannot be negative.")
        if len(output) < max_data:
            raise ValueError(
                f"Output holds {len(output)} records but max_data is {max_data}."
            )
        marker = array_marker.encode("utf-8") if isinstance(array_marker, str) else array_marker
        if not marker:
            raise ValueError("Array marker cannot be empty.")

        context = {"endpoint": endpoint_path, "station_id": station_id}
        start_time = time.perf_counter()
        status_line: Optional[str] = None

        def _elapsed_ms() -> int:
            return int((time.perf_counter() - start_time) * 1000)

        try:
            with httpx.Client(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = self._send(client, endpoint_path, station_id, api_key, context)
                try:
                    status = StatusLine.from_response(response)
                    status_line = str(status)
                    if not status.is_ok:
                        raise _CallFailed(
                            FetchState.awaiting_status,
                            FetchErrorKind.bad_status,
                            f"Unexpected HTTP status {status_line!r}.",
                        )
                    logger.info(
                        "HTTPS status OK from WU API server received",
                        extra={**context, "status_line": status_line},
                    )

                    stream = ByteStream(self._iter_body(response, context))
                    if not locate_array(stream, marker):
                        raise _CallFailed(
                            FetchState.locating_array,
                            FetchErrorKind.array_not_found,
                            f"Array marker {marker.decode('utf-8', 'replace')!r} not found.",
                        )
                    logger.info(
                        "Located record array",
                        extra={**context, "marker": marker.decode("utf-8", "replace")},
                    )

                    buffer = DecodeBuffer(self.decode_buffer_size)
                    outcome = decode_records(stream, output, max_data, buffer)
                finally:
                    response.close()
        except _CallFailed as failure:
            fetch_ms = _elapsed_ms()
            logger.warning(
                "WU fetch failed",
                extra={
                    **context,
                    "state": failure.state.value,
                    "status_line": status_line,
                    "error_kind": failure.kind.value,
                    "reason": failure.reason,
                    "fetch_ms": fetch_ms,
                },
            )
            return FetchResult(
                count=0,
                status=FetchStatus.failed,
                state=failure.state,
                error=FetchError(kind=failure.kind, reason=failure.reason),
                status_line=status_line,
                fetch_ms=fetch_ms,
            )

        fetch_ms = _elapsed_ms()
        if outcome.error is not None:
            result = FetchResult(
                count=outcome.count,
                status=FetchStatus.partial,
                state=FetchState.decoding,
                error=FetchError(kind=outcome.error.kind, reason=str(outcome.error)),
                status_line=status_line,
                fetch_ms=fetch_ms,
            )
        else:
            result = FetchResult(
                count=outcome.count,
                status=FetchStatus.exhausted if outcome.array_ended else FetchStatus.filled,
                state=FetchState.done,
                status_line=status_line,
                fetch_ms=fetch_ms,
            )

        logger.info(
            "WU fetch finished",
            extra={
                **context,
                "state": result.state.value,
                "record_count": result.count,
                "error_kind": result.error.kind.value if result.error else None,
                "fetch_ms": fetch_ms,
            },
        )
        return result

    def _send(
        self,
        client: httpx.Client,
        endpoint_path: str,
        station_id: str,
        api_key: str,
        context: dict,
    ) -> httpx.Response:
        request = client.build_request(
            "GET",
            "/" + endpoint_path.lstrip("/"),
            params={
                "stationId": station_id,
                "format": "json",
                "units": "e",
                "apiKey": api_key,
            },
            headers={"Connection": "close"},
        )
        try:
            response = client.send(request, stream=True)
        except _CONNECT_ERRORS as exc:
            raise _CallFailed(
                FetchState.connecting,
                FetchErrorKind.connection_failure,
                f"Failed to connect to {self.host}:{self.port}: {exc}",
            ) from exc
        except _SEND_ERRORS as exc:
            raise _CallFailed(
                FetchState.sending,
                FetchErrorKind.send_failure,
                f"Failed to send WU API request: {exc}",
            ) from exc
        except httpx.TransportError as exc:
            raise _CallFailed(
                FetchState.awaiting_status,
                FetchErrorKind.bad_status,
                f"No status received from WU API server: {exc}",
            ) from exc
        logger.info("HTTPS request to WU API server sent", extra=context)
        return response

    def _iter_body(self, response: httpx.Response, context: dict) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes(chunk_size=self.read_chunk_size)
        except (httpx.TransportError, httpx.DecodingError) as exc:
            # A broken body reads as end of stream; the caller reports what it lost.
            logger.warning("Response body ended early", extra={**context, "reason": str(exc)})


def build_fetcher(transport: Optional[httpx.BaseTransport] = None) -> WeatherFetcher:
    """Wire a fetcher from environment settings."""
    settings = get_settings()
    return WeatherFetcher(
        host=settings.api_host,
        port=settings.api_port,
        timeout=settings.timeout_seconds,
        decode_buffer_size=settings.decode_buffer_bytes,
        read_chunk_size=settings.read_chunk_bytes,
        transport=transport,
    )
