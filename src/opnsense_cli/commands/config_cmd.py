"""Config commands: manage firewall profiles."""

from __future__ import annotations

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from opnsense_cli.client.errors import error_handler
from opnsense_cli.client.firewall import FirewallService
from opnsense_cli.client.transport import FirewallClient
from opnsense_cli.config.manager import ConfigManager
from opnsense_cli.config.models import FirewallProfile
from opnsense_cli.output.formatter import output

app = typer.Typer(name="config", help="Manage firewall profiles and CLI configuration.")
console = Console()


def _get_manager() -> ConfigManager:
    return ConfigManager()


def _mask(secret: str) -> str:
    return secret[:4] + "..." if len(secret) > 8 else "***"


@app.command()
@error_handler
def init() -> None:
    """Interactive setup wizard: create your first firewall profile."""
    mgr = _get_manager()
    console.print("[bold]OPNsense CLI Setup Wizard[/]\n")

    name = Prompt.ask("Profile name", default="default")
    url = Prompt.ask("Firewall URL (e.g. https://192.168.1.1)")
    api_key = Prompt.ask("API key")
    api_secret = Prompt.ask("API secret", password=True)
    verify_ssl = Confirm.ask("Verify SSL certificates?", default=True)

    profile = FirewallProfile(
        name=name,
        url=url.rstrip("/"),
        api_key=api_key or None,
        api_secret=api_secret or None,
        verify_ssl=verify_ssl,
    )
    mgr.add_profile(profile)
    console.print(f"\n[green]Profile '{name}' saved.[/]")
    console.print(f"Config file: {mgr.config_path}")


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Profile name")],
    url: Annotated[str, typer.Option("--url", "-u", help="Firewall URL")],
    api_key: Annotated[Optional[str], typer.Option("--api-key", "-k", help="API key")] = None,
    api_secret: Annotated[Optional[str], typer.Option("--api-secret", "-s", help="API secret")] = None,
    no_verify_ssl: Annotated[bool, typer.Option("--no-verify-ssl", help="Disable SSL verification")] = False,
    timeout: Annotated[float, typer.Option("--timeout", help="Request timeout in seconds")] = 30.0,
    set_default: Annotated[bool, typer.Option("--default", help="Set as default profile")] = False,
) -> None:
    """Add a firewall profile."""
    mgr = _get_manager()
    profile = FirewallProfile(
        name=name,
        url=url.rstrip("/"),
        api_key=api_key,
        api_secret=api_secret,
        verify_ssl=not no_verify_ssl,
        timeout=timeout,
    )
    mgr.add_profile(profile)
    if set_default:
        mgr.set_default(name)
    console.print(f"[green]Profile '{name}' added.[/]")


@app.command("list")
@error_handler
def list_profiles(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """List all configured profiles."""
    mgr = _get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No profiles configured. Run 'opnsense-cli config init' to get started.[/]")
        return

    default = mgr.config.default_profile
    rows = [
        [name, p.url, "key" if p.auth_configured else "none", "*" if name == default else ""]
        for name, p in profiles.items()
    ]
    output(
        {"profiles": [p.model_dump(exclude={"api_secret"}, exclude_none=True) for p in profiles.values()]},
        fmt,
        columns=["Name", "URL", "Auth", "Default"],
        rows=rows,
        title="Firewall Profiles",
    )


@app.command()
@error_handler
def show(
    name: Annotated[str, typer.Argument(help="Profile name")],
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show profile details."""
    mgr = _get_manager()
    profile = mgr.get_profile(name)
    if not profile:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    data = profile.model_dump(exclude_none=True)
    if "api_key" in data:
        data["api_key"] = _mask(data["api_key"])
    if "api_secret" in data:
        data["api_secret"] = "***"
    output(data, fmt, kv=True, title=f"Profile: {name}")


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default firewall profile."""
    mgr = _get_manager()
    if mgr.set_default(name):
        console.print(f"[green]Default profile set to '{name}'.[/]")
    else:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)


@app.command()
@error_handler
def test(
    name: Annotated[Optional[str], typer.Argument(help="Profile name (uses default if omitted)")] = None,
) -> None:
    """Test that the firewall is reachable."""
    mgr = _get_manager()
    profile = mgr.resolve_firewall(profile_name=name)
    console.print(f"Testing connection to [bold]{profile.url}[/]...")

    async def _probe() -> bool:
        async with FirewallClient(profile) as client:
            return await FirewallService(client).test_connection()

    if asyncio.run(_probe()):
        console.print("[green]Firewall reachable.[/]")
    else:
        console.print("[red]Firewall not reachable.[/]")
        raise typer.Exit(2)


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Profile name to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a firewall profile."""
    mgr = _get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Remove profile '{name}'?"):
            console.print("Cancelled.")
            return

    mgr.remove_profile(name)
    console.print(f"[green]Profile '{name}' removed.[/]")
