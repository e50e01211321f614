"""Gateway commands: routing gateway status."""

from __future__ import annotations

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

app = typer.Typer(name="gateway", help="Routing gateways.")


@app.command("list")
@error_handler
def list_gateways(
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show gateway status, delay and loss."""
    items = call_service(profile, url, api_key, api_secret, lambda svc: svc.fetch_gateways())
    rows = [
        [
            g.get("name", ""),
            g.get("address", ""),
            g.get("status_translated", g.get("status", "")),
            g.get("delay", ""),
            g.get("loss", ""),
        ]
        for g in items
        if isinstance(g, dict)
    ]
    output(
        items, fmt,
        columns=["Name", "Address", "Status", "Delay", "Loss"], rows=rows, title="Gateways",
    )
