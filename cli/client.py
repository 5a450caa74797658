from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Speaks to the logger the same way the scanner firmware does: plain GETs."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def write(self, fields: Mapping[str, str]) -> str:
        params = {"sts": "write", **fields}
        return self._get_text("/exec", params)

    def read(self) -> List[str]:
        body = self._get_text("/exec", {"sts": "read"})
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            typer.secho(body, fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when reading latest values.")
        return [str(item) for item in payload]

    def get_log(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/log")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def _get_text(self, path: str, params: Mapping[str, str]) -> str:
        try:
            response = self._client.get(path, params=dict(params))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.text

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except (ValueError, AttributeError):
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
