from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_latest, render_log


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Simulate the fingerprint scanner against the event logger service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Logger base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("write")
def write_command(
    ctx: typer.Context,
    reading_id: Optional[str] = typer.Option(None, "--id", help="Fingerprint template identifier."),
    image: Optional[str] = typer.Option(None, "--image", help="Image reference or index."),
    person: Optional[str] = typer.Option(None, "--person", help="Person label."),
    authorization: Optional[str] = typer.Option(
        None, "--authorization", help="Authorization label, e.g. Yes or No."
    ),
) -> None:
    """Log a reading, as the scanner does after each match attempt."""
    state = _get_state(ctx)
    supplied = {
        "id": reading_id,
        "image": image,
        "person": person,
        "authorization": authorization,
    }
    fields = {key: value for key, value in supplied.items() if value is not None}
    message = state.client.write(fields)
    color = typer.colors.GREEN if message.startswith("Ok") else typer.colors.YELLOW
    typer.secho(message, fg=color)


@app.command("read")
def read_command(ctx: typer.Context) -> None:
    """Show the latest reading stored by the service."""
    state = _get_state(ctx)
    render_latest(state.client.read())


@app.command("log")
def log_command(ctx: typer.Context) -> None:
    """Show the latest slot and the complete reading log."""
    state = _get_state(ctx)
    render_log(state.client.get_log())
