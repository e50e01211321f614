"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from opnsense_cli.config.constants import DEFAULT_TIMEOUT


class FirewallProfile(BaseModel):
    """A named firewall connection profile."""

    name: str
    url: str = Field(description="Firewall base URL, e.g. https://fw.lan:443")
    api_key: str | None = Field(default=None, description="API key")
    api_secret: str | None = Field(default=None, description="API secret")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth_configured(self) -> bool:
        return self.api_key is not None and self.api_secret is not None


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    default_format: str = "table"
    profiles: dict[str, FirewallProfile] = Field(default_factory=dict)
