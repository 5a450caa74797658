from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer

_PAYLOAD_KEYS = ("id", "image", "person", "authorization")
_ROW_KEYS = ("date", "time") + _PAYLOAD_KEYS


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_latest(values: Sequence[str]) -> None:
    echo_heading("Latest Reading")
    echo_key_values(zip(_PAYLOAD_KEYS, values))


def render_log(payload: Dict[str, Any]) -> None:
    echo_heading(f"Sheet {payload.get('sheet')}")
    latest = payload.get("latest") or {}
    echo_key_values((key, latest.get(key, "")) for key in _ROW_KEYS)

    records = payload.get("records") or []
    typer.echo()
    echo_heading(f"Log ({payload.get('count', len(records))} records)")
    if not records:
        typer.echo("No readings logged yet.")
        return
    for row in records:
        typer.echo("  - " + " | ".join(str(row.get(key, "")) for key in _ROW_KEYS))
