"""Pydantic schemas describing the outcome of a single fetch call."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FetchState(str, Enum):
    """States of the fetch pipeline, in the order a call moves through them."""

    connecting = "connecting"
    sending = "sending"
    awaiting_status = "awaiting_status"
    locating_array = "locating_array"
    decoding = "decoding"
    done = "done"


class FetchStatus(str, Enum):
    """How a call ended, as seen by the caller."""

    filled = "filled"
    exhausted = "exhausted"
    partial = "partial"
    failed = "failed"


class FetchErrorKind(str, Enum):
    connection_failure = "connection_failure"
    send_failure = "send_failure"
    bad_status = "bad_status"
    array_not_found = "array_not_found"
    malformed_record = "malformed_record"
    stream_truncated = "stream_truncated"


class FetchError(BaseModel):
    """The failure that stopped a call early."""

    kind: FetchErrorKind
    reason: str


class FetchResult(BaseModel):
    """Count of records written to the caller's output plus the terminal state."""

    count: int = Field(..., ge=0)
    status: FetchStatus
    state: FetchState
    error: Optional[FetchError] = None
    status_line: Optional[str] = Field(
        default=None, description="Response status as received, when one was read."
    )
    fetch_ms: Optional[int] = Field(
        default=None, description="Duration in milliseconds from connect to close."
    )

    @property
    def ok(self) -> bool:
        return self.error is None
