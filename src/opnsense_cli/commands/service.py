"""Service commands: list and start/stop/restart system services."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from opnsense_cli.client.errors import error_handler
from opnsense_cli.commands._common import (
    FormatOpt,
    KeyOpt,
    ProfileOpt,
    SecretOpt,
    UrlOpt,
    call_service,
    yes_no,
)
from opnsense_cli.output.formatter import output

app = typer.Typer(name="service", help="System services.")
console = Console()

NameArg = Annotated[str, typer.Argument(help="Service name, e.g. unbound")]


@app.command("list")
@error_handler
def list_services(
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List services and whether they are running."""
    items = call_service(profile, url, api_key, api_secret, lambda svc: svc.fetch_services())
    rows = [
        [
            s.get("name", s.get("id", "")),
            s.get("description", ""),
            yes_no(str(s.get("running", "")) == "1"),
        ]
        for s in items
        if isinstance(s, dict)
    ]
    output(items, fmt, columns=["Name", "Description", "Running"], rows=rows, title="Services")


def _control(name: str, action: str, profile, url, api_key, api_secret) -> None:
    ok = call_service(
        profile, url, api_key, api_secret, lambda svc: svc.control_service(name, action),
    )
    if ok:
        console.print(f"[green]Service '{name}': {action} requested.[/]")
    else:
        console.print(f"[red]Service '{name}': {action} was not accepted.[/]")
        raise typer.Exit(1)


@app.command()
@error_handler
def start(
    name: NameArg,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Start a service."""
    _control(name, "start", profile, url, api_key, api_secret)


@app.command()
@error_handler
def stop(
    name: NameArg,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Stop a service."""
    _control(name, "stop", profile, url, api_key, api_secret)


@app.command()
@error_handler
def restart(
    name: NameArg,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Restart a service."""
    _control(name, "restart", profile, url, api_key, api_secret)
