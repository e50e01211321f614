"""Firewall rule commands: list, show, add, update, toggle, delete, apply."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from opnsense_cli.client.errors import NotFoundError, error_handler
from opnsense_cli.client.firewall import FirewallService
from opnsense_cli.commands._common import (
    FormatOpt,
    KeyOpt,
    ProfileOpt,
    SecretOpt,
    UrlOpt,
    call_service,
    yes_no,
)
from opnsense_cli.models.rule import Rule, RuleEditRequest
from opnsense_cli.output.formatter import output

app = typer.Typer(name="rule", help="Manage firewall filter rules.")
console = Console()

_COLUMNS = ["#", "UUID", "Action", "Interface", "Proto", "Source", "Destination", "Port", "Enabled", "Description"]


def _row(rule: Rule) -> list[str]:
    port = rule.destination_port if rule.supports_ports else ""
    description = rule.description
    if rule.is_system_generated:
        description = f"{description} (system)".strip()
    return [
        str(rule.sequence),
        rule.uuid,
        rule.action,
        rule.interface,
        rule.protocol_label,
        rule.source,
        rule.destination,
        port,
        yes_no(rule.enabled),
        description,
    ]


def _interface_aliases(interface: str, names: dict[str, str]) -> set[str]:
    # Listed rules carry the label ("DMZ"), users often type the key ("opt1")
    wanted = {interface.lower()}
    for key, label in names.items():
        if interface.lower() in (key.lower(), label.lower()):
            wanted.update((key.lower(), label.lower()))
    return wanted


async def _find_rule(svc: FirewallService, uuid: str) -> Rule | None:
    for rule in await svc.fetch_rules():
        if rule.uuid == uuid:
            return rule
    return None


@app.command("list")
@error_handler
def list_rules(
    interface: Annotated[
        Optional[str],
        typer.Option("--interface", "-i", help="Only rules on this interface (key or name)"),
    ] = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List firewall rules ordered by sequence."""

    async def _list(svc: FirewallService) -> tuple[list[Rule], dict[str, str]]:
        rules = await svc.fetch_rules()
        names = await svc.fetch_available_interfaces() if interface else {}
        return rules, names

    rules, names = call_service(profile, url, api_key, api_secret, _list)
    if interface:
        wanted = _interface_aliases(interface, names)
        rules = [r for r in rules if r.interface.lower() in wanted]
    rules = sorted(rules, key=lambda r: r.sequence)
    output(rules, fmt, columns=_COLUMNS, rows=[_row(r) for r in rules], title="Firewall Rules")


@app.command()
@error_handler
def show(
    uuid: Annotated[str, typer.Argument(help="Rule UUID")],
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show a single rule."""
    rule = call_service(profile, url, api_key, api_secret, lambda svc: svc.fetch_rule(uuid))
    if rule is None:
        raise NotFoundError(f"Rule {uuid} not found")
    output(rule, fmt, kv=True, title=f"Rule {uuid}")


@app.command()
@error_handler
def interfaces(
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List interfaces rules can be attached to."""
    data = call_service(
        profile, url, api_key, api_secret, lambda svc: svc.fetch_available_interfaces(),
    )
    rows = [[key, label] for key, label in data.items()]
    output(data, fmt, columns=["Key", "Name"], rows=rows, title="Interfaces")


@app.command()
@error_handler
def add(
    interface: Annotated[str, typer.Option("--interface", "-i", help="Interface key, e.g. lan")],
    action: Annotated[str, typer.Option("--action", "-a", help="pass, block or reject")] = "pass",
    protocol: Annotated[str, typer.Option("--protocol", help="any, TCP, UDP, TCP/UDP, ICMP, ...")] = "any",
    source: Annotated[str, typer.Option("--source", help="Source network")] = "any",
    destination: Annotated[str, typer.Option("--destination", help="Destination network")] = "any",
    source_port: Annotated[str, typer.Option("--source-port", help="Source port or range")] = "",
    destination_port: Annotated[str, typer.Option("--destination-port", help="Destination port or range")] = "",
    description: Annotated[str, typer.Option("--description", "-d", help="Description")] = "",
    disabled: Annotated[bool, typer.Option("--disabled", help="Create the rule disabled")] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Create a rule and apply the filter configuration."""
    edit = RuleEditRequest(
        action=action.lower(),
        interface=interface,
        protocol=protocol,
        source=source,
        destination=destination,
        source_port=source_port,
        destination_port=destination_port,
        description=description,
        enabled=not disabled,
    )
    uuid = call_service(profile, url, api_key, api_secret, lambda svc: svc.submit_rule_edit(edit))
    console.print(f"[green]Rule created:[/] {uuid}")


@app.command()
@error_handler
def update(
    uuid: Annotated[str, typer.Argument(help="Rule UUID")],
    interface: Annotated[Optional[str], typer.Option("--interface", "-i")] = None,
    action: Annotated[Optional[str], typer.Option("--action", "-a")] = None,
    protocol: Annotated[Optional[str], typer.Option("--protocol")] = None,
    source: Annotated[Optional[str], typer.Option("--source")] = None,
    destination: Annotated[Optional[str], typer.Option("--destination")] = None,
    source_port: Annotated[Optional[str], typer.Option("--source-port")] = None,
    destination_port: Annotated[Optional[str], typer.Option("--destination-port")] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    enabled: Annotated[Optional[bool], typer.Option("--enabled/--disabled")] = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Change fields of an existing rule; unspecified fields are kept."""
    changes = {
        "interface": interface,
        "action": action.lower() if action else None,
        "protocol": protocol,
        "source": source,
        "destination": destination,
        "source_port": source_port,
        "destination_port": destination_port,
        "description": description,
        "enabled": enabled,
    }
    changes = {key: value for key, value in changes.items() if value is not None}

    async def _update(svc: FirewallService) -> str:
        current = await svc.fetch_rule(uuid)
        if current is None:
            raise NotFoundError(f"Rule {uuid} not found")
        listed = await _find_rule(svc, uuid)
        edit = RuleEditRequest(**{**RuleEditRequest.from_rule(current).model_dump(), **changes})
        return await svc.submit_rule_edit(edit, uuid, current=listed or current)

    call_service(profile, url, api_key, api_secret, _update)
    console.print(f"[green]Rule updated:[/] {uuid}")


@app.command()
@error_handler
def toggle(
    uuid: Annotated[str, typer.Argument(help="Rule UUID")],
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Enable a disabled rule or disable an enabled one."""

    async def _toggle(svc: FirewallService) -> None:
        await svc.toggle_rule(uuid, current=await _find_rule(svc, uuid))

    call_service(profile, url, api_key, api_secret, _toggle)
    console.print(f"[green]Rule toggled:[/] {uuid}")


@app.command()
@error_handler
def delete(
    uuid: Annotated[str, typer.Argument(help="Rule UUID")],
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Delete a rule and apply the filter configuration."""
    if not force:
        from rich.prompt import Confirm

        if not Confirm.ask(f"Delete rule '{uuid}'?"):
            console.print("Cancelled.")
            return

    async def _delete(svc: FirewallService) -> None:
        await svc.delete_rule(uuid, current=await _find_rule(svc, uuid))

    call_service(profile, url, api_key, api_secret, _delete)
    console.print(f"[green]Rule deleted:[/] {uuid}")


@app.command()
@error_handler
def apply(
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    api_key: KeyOpt = None,
    api_secret: SecretOpt = None,
) -> None:
    """Apply pending filter changes."""
    call_service(profile, url, api_key, api_secret, lambda svc: svc.apply_changes())
    console.print("[green]Filter changes applied.[/]")
