"""Root Typer app: global options and command group registration."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from opnsense_cli import __version__
from opnsense_cli.commands import config_cmd, gateway, log, rule, service, system

app = typer.Typer(
    name="opnsense-cli",
    help="CLI tool for the OPNsense firewall REST API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"opnsense-cli {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Log to stderr through Rich; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """OPNsense CLI: system status, firewall rules, services and logs."""
    configure_logging(verbose)


# Register command groups
app.add_typer(config_cmd.app, name="config")
app.add_typer(system.app, name="system")
app.add_typer(rule.app, name="rule")
app.add_typer(service.app, name="service")
app.add_typer(gateway.app, name="gateway")
app.add_typer(log.app, name="log")


def main() -> None:
    app()
