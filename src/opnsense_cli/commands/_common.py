"""Shared helpers for CLI commands: client factory, options, async runner."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import typer

from opnsense_cli.client.firewall import FirewallService
from opnsense_cli.client.transport import FirewallClient
from opnsense_cli.config.manager import ConfigManager

T = TypeVar("T")

# Shared Typer option type aliases
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Firewall profile"),
]
UrlOpt = Annotated[
    str | None,
    typer.Option("--url", help="Firewall URL override"),
]
KeyOpt = Annotated[
    str | None,
    typer.Option("--api-key", help="API key override"),
]
SecretOpt = Annotated[
    str | None,
    typer.Option("--api-secret", help="API secret override"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]


def make_client(
    profile: str | None,
    url: str | None,
    api_key: str | None,
    api_secret: str | None,
) -> FirewallClient:
    """Create a FirewallClient from CLI options, env vars, or config profile."""
    mgr = ConfigManager()
    resolved = mgr.resolve_firewall(
        profile_name=profile, url=url, api_key=api_key, api_secret=api_secret,
    )
    return FirewallClient(resolved)


def call_service(
    profile: str | None,
    url: str | None,
    api_key: str | None,
    api_secret: str | None,
    operation: Callable[[FirewallService], Awaitable[T]],
) -> T:
    """Run one service operation on a fresh client and event loop."""
    client = make_client(profile, url, api_key, api_secret)

    async def _runner() -> T:
        async with client:
            return await operation(FirewallService(client))

    return asyncio.run(_runner())


def yes_no(value: bool) -> str:
    return "yes" if value else "no"
