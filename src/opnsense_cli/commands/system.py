"""System commands: status snapshot, firmware info, reboot."""

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
from opnsense_cli.models.snapshot import Snapshot
from opnsense_cli.output.formatter import output
from opnsense_cli.output.humanize import format_percent, format_uptime, format_usage

app = typer.Typer(name="system", help="System status, firmware details and reboot.")
console = Console()


def _status_summary(snapshot: Snapshot) -> dict[str, str]:
    return {
        "Hostname": snapshot.hostname,
        "Version": snapshot.version,
        "Platform": snapshot.platform_label,
        "Uptime": format_uptime(snapshot.uptime_seconds),
        "CPU": format_percent(snapshot.cpu_usage_percent),
        "Memory": format_usage(snapshot.memory_used_bytes, snapshot.memory_total_bytes),
        "Disk": format_usage(snapshot.disk_used_bytes, snapshot.disk_total_bytes),
    }


@app.command()
@error_handler
def status(
    sources: Annotated[
        bool,
        typer.Option("--sources", help="Also show which endpoint answered for each source"),
    ] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show uptime, CPU, memory and disk usage."""
    report = call_service(
        profile, url, api_key, api_secret, lambda svc: svc.fetch_snapshot_report(),
    )
    if fmt != "table":
        output(report if sources else report.snapshot, fmt)
        return
    output(_status_summary(report.snapshot), fmt, kv=True, title="System Status")
    if sources:
        rows = [
            [name, yes_no(src.succeeded), src.path or "", ", ".join(src.tried)]
            for name, src in report.sources.items()
        ]
        output(
            report.sources, fmt,
            columns=["Source", "OK", "Endpoint", "Tried"], rows=rows, title="Sources",
        )


@app.command()
@error_handler
def info(
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show firmware, product and repository details."""
    snapshot = call_service(
        profile, url, api_key, api_secret, lambda svc: svc.fetch_snapshot(),
    )
    data = {
        "Type": snapshot.product_type,
        "Version": snapshot.version,
        "Architecture": snapshot.architecture,
        "Commit": snapshot.commit_hash,
        "Mirror": snapshot.mirror_url,
        "Repositories": snapshot.repository_label,
        "Updated on": snapshot.last_update,
    }
    output(data if fmt == "table" else snapshot, fmt, kv=True, title="Firmware")


@app.command()
@error_handler
def reboot(
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Reboot the firewall."""
    if not force:
        from rich.prompt import Confirm

        target = url or profile or "default"
        if not Confirm.ask(f"Reboot firewall '{target}'?"):
            console.print("Cancelled.")
            return
    call_service(profile, url, api_key, api_secret, lambda svc: svc.reboot())
    console.print("[green]Reboot initiated.[/]")
