"""CLI entrypoint for Note Assistant."""

from __future__ import annotations

import json
import os
from typing import Optional

import requests
import typer

app = typer.Typer(name="nasst", help="Note Assistant command-line interface")

DEFAULT_HOST = "http://127.0.0.1:5173"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("NASST_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    try:
        resp = requests.request(method, url, timeout=600, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Could not reach {base}: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


@app.command()
def index(
    rebuild: bool = typer.Option(False, "--rebuild", help="Embed every note again from scratch"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Load new and changed notes into the assistant."""
    typer.echo("Loading data into model. This could take a while...", err=True)
    resp = _request("POST", "/index", host=host, json={"rebuild": rebuild})
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about your notes"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask the assistant a question."""
    resp = _request("POST", "/ask", host=host, json={"question": question})
    answer = resp.json()
    if answer.get("error"):
        typer.echo(answer.get("text", ""), err=True)
        raise typer.Exit(code=1)
    typer.echo(answer.get("text", ""))


@app.command()
def status(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show what the assistant currently has indexed."""
    resp = _request("GET", "/status", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
