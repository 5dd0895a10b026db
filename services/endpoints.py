"""Known WU PWS endpoints and the marker that introduces each one's record array."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Endpoint:
    name: str
    path: str
    array_marker: str
    description: str


_ENDPOINTS: Dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        Endpoint(
            name="daily-7day",
            path="v2/pws/dailysummary/7day",
            array_marker='"summaries":[',
            description="Daily summaries for the last seven days.",
        ),
        Endpoint(
            name="hourly-7day",
            path="v2/pws/observations/hourly/7day",
            array_marker='"observations":[',
            description="Hourly observations for the last seven days.",
        ),
        Endpoint(
            name="all-1day",
            path="v2/pws/observations/all/1day",
            array_marker='"observations":[',
            description="Every observation reported during the last day.",
        ),
    )
}


def list_endpoints() -> list[Endpoint]:
    return list(_ENDPOINTS.values())


def get_endpoint(name: str) -> Endpoint:
    try:
        return _ENDPOINTS[name]
    except KeyError:
        known = ", ".join(sorted(_ENDPOINTS))
        raise KeyError(f"Unknown endpoint {name!r}. Known endpoints: {known}.") from None
