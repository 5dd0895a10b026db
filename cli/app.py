from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import render_endpoints, render_records, render_result
from logging_config import configure_logging
from models.records import allocate_records
from models.results import FetchStatus
from services.endpoints import Endpoint, get_endpoint, list_endpoints
from services.fetcher import WeatherFetcher, build_fetcher

DEFAULT_ENDPOINT = "daily-7day"


@dataclass
class CLIState:
    config: CLIConfig
    fetcher: WeatherFetcher


app = typer.Typer(
    help="Stream weather records from the Weather Underground PWS API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _resolve_endpoint(preset: Optional[str], path: Optional[str], marker: Optional[str]) -> Endpoint:
    if path:
        if not marker:
            raise typer.BadParameter("--marker is required together with --path.")
        return Endpoint(name="custom", path=path, array_marker=marker, description="")
    try:
        return get_endpoint(preset or DEFAULT_ENDPOINT)
    except KeyError as exc:
        raise typer.BadParameter(exc.args[0]) from exc


@app.callback()
def main(
    ctx: typer.Context,
    station_id: Optional[str] = typer.Option(
        None,
        "--station",
        "-s",
        help="PWS station identifier (defaults to WU_STATION_ID env).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        "-k",
        help="WU API key (defaults to WU_API_KEY env).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level for diagnostics written to stderr.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(station_id=station_id, api_key=api_key, log_level=log_level)
    configure_logging(config.log_level)
    ctx.obj = CLIState(config=config, fetcher=build_fetcher())


@app.command("fetch")
def fetch_command(
    ctx: typer.Context,
    preset: Optional[str] = typer.Argument(
        None, help=f"Endpoint preset name (default: {DEFAULT_ENDPOINT})."
    ),
    path: Optional[str] = typer.Option(None, "--path", help="Custom endpoint path."),
    marker: Optional[str] = typer.Option(
        None, "--marker", help='Literal that opens the record array, e.g. \'"summaries":[\'.'
    ),
    max_records: Optional[int] = typer.Option(
        None, "--max", "-n", min=0, help="Maximum number of records to decode."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print records and result as JSON."),
) -> None:
    """Fetch one batch of records and print them."""
    state = _get_state(ctx)
    endpoint = _resolve_endpoint(preset, path, marker)
    config = state.config
    if not config.station_id or not config.api_key:
        typer.secho(
            "A station id and an API key are required (--station/--api-key or WU_STATION_ID/WU_API_KEY).",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    capacity = max_records if max_records is not None else config.max_records
    records = allocate_records(capacity)
    result = state.fetcher.fetch(
        endpoint.path,
        config.station_id,
        config.api_key,
        records,
        endpoint.array_marker,
        capacity,
    )
    decoded = records[: result.count]

    if as_json:
        payload = {
            "result": result.model_dump(mode="json"),
            "records": [asdict(record) for record in decoded],
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        render_records(decoded)
        typer.echo()
        render_result(result)

    if result.status is FetchStatus.failed:
        raise typer.Exit(code=1)


@app.command("endpoints")
def endpoints_command() -> None:
    """List the endpoint presets understood by ``fetch``."""
    render_endpoints(list_endpoints())
