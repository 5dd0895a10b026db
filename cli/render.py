from __future__ import annotations

from typing import Any, Iterable, Sequence

import typer

from models.records import WeatherRecord
from models.results import FetchResult, FetchStatus
from services.endpoints import Endpoint

_STATUS_COLORS = {
    FetchStatus.filled: typer.colors.GREEN,
    FetchStatus.exhausted: typer.colors.GREEN,
    FetchStatus.partial: typer.colors.YELLOW,
    FetchStatus.failed: typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_records(records: Sequence[WeatherRecord]) -> None:
    echo_heading("Records")
    if not records:
        typer.echo("No records decoded.")
        return
    typer.echo(
        f"{'obs_time_local':<24} {'humidity':>8} {'temp_avg':>9} {'precip_rate':>11} {'precip_total':>12}"
    )
    for record in records:
        typer.echo(
            f"{record.obs_time_local:<24} {record.humidity_avg:>8d} {record.temp_avg:>9.1f}"
            f" {record.precip_rate:>11.2f} {record.precip_total:>12.2f}"
        )


def render_result(result: FetchResult) -> None:
    echo_heading("Fetch Result")
    typer.secho(f"status: {result.status.value}", fg=_STATUS_COLORS[result.status])
    echo_key_values(
        [
            ("state", result.state.value),
            ("count", result.count),
            ("status_line", result.status_line),
            ("fetch_ms", result.fetch_ms),
        ]
    )
    if result.error is not None:
        typer.echo(f"error: {result.error.kind.value}: {result.error.reason}")


def render_endpoints(endpoints: Iterable[Endpoint]) -> None:
    echo_heading("Endpoints")
    for endpoint in endpoints:
        typer.echo(f"  - {endpoint.name}: {endpoint.path} ({endpoint.array_marker})")
        typer.echo(f"      {endpoint.description}")
