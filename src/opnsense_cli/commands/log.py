"""Log commands: firewall live log."""

from __future__ import annotations

from typing import Annotated

import typer

from opnsense_cli.client.errors import error_handler
from opnsense_cli.commands._common import (
    FormatOpt,
    KeyOpt,
    ProfileOpt,
    SecretOpt,
    UrlOpt,
    call_service,
)
from opnsense_cli.output.formatter import output

app = typer.Typer(name="log", help="Firewall logs.")


@app.command()
@error_handler
def tail(
    lines: Annotated[int, typer.Option("--lines", "-n", help="Number of log entries")] = 100,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show the most recent firewall log entries."""
    items = call_service(profile, url, api_key, api_secret, lambda svc: svc.fetch_logs(lines))
    rows = [
        [
            e.get("__timestamp__", ""),
            e.get("action", ""),
            e.get("interface", ""),
            e.get("protoname", ""),
            e.get("src", ""),
            e.get("dst", ""),
            e.get("dstport", ""),
        ]
        for e in items
        if isinstance(e, dict)
    ]
    output(
        items, fmt,
        columns=["Time", "Action", "Interface", "Proto", "Source", "Destination", "Port"],
        rows=rows, title="Firewall Log",
    )
