"""Authentication for the OPNsense API."""

from __future__ import annotations

import logging

import httpx

from opnsense_cli.config.models import FirewallProfile

logger = logging.getLogger(__name__)


class APIKeyAuth(httpx.BasicAuth):
    """OPNsense API key/secret pair, sent as HTTP Basic credentials."""

    def __init__(self, api_key: str, api_secret: str) -> None:
        super().__init__(api_key, api_secret)
        self.api_key = api_key


def resolve_auth(profile: FirewallProfile) -> httpx.Auth | None:
    """Resolve authentication from a firewall profile."""
    if profile.api_key and profile.api_secret:
        return APIKeyAuth(profile.api_key, profile.api_secret)
    if profile.api_key or profile.api_secret:
        logger.warning(
            "Profile '%s' has only half of an API key pair; sending no credentials",
            profile.name,
        )
    return None
