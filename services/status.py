"""Status-line classification for WU API responses."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

_OK_CODE = 200
_VERSION_PREFIX = "HTTP/"


@dataclass(frozen=True)
class StatusLine:
    """Tokenized response status: version, numeric code, reason phrase."""

    http_version: str
    status_code: int
    reason_phrase: str

    @classmethod
    def from_response(cls, response: httpx.Response) -> "StatusLine":
        return cls(
            http_version=response.http_version,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
        )

    @property
    def is_ok(self) -> bool:
        return self.http_version.startswith(_VERSION_PREFIX) and self.status_code == _OK_CODE

    def __str__(self) -> str:
        return f"{self.http_version} {self.status_code} {self.reason_phrase}".rstrip()
