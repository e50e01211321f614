"""Tests for config models."""

import pytest
from pydantic import ValidationError

from opnsense_cli.config.models import CLIConfig, FirewallProfile


class TestFirewallProfile:
    def test_create_with_key_pair(self):
        p = FirewallProfile(name="test", url="https://fw.lan", api_key="k", api_secret="s")
        assert p.name == "test"
        assert p.url == "https://fw.lan"
        assert p.auth_configured is True

    def test_half_pair_not_configured(self):
        p = FirewallProfile(name="test", url="https://fw.lan", api_key="k")
        assert p.auth_configured is False

    def test_defaults(self):
        p = FirewallProfile(name="test", url="https://fw.lan")
        assert p.verify_ssl is True
        assert p.timeout == 30.0
        assert p.api_key is None
        assert p.api_secret is None

    def test_url_must_start_with_http(self):
        with pytest.raises(ValidationError, match="URL must start with http"):
            FirewallProfile(name="test", url="ftp://fw.lan")

    def test_url_strips_trailing_slash(self):
        p = FirewallProfile(name="test", url="https://fw.lan/")
        assert p.url == "https://fw.lan"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            FirewallProfile(name="test", url="https://fw.lan", timeout=0)

    def test_timeout_max_600(self):
        with pytest.raises(ValidationError):
            FirewallProfile(name="test", url="https://fw.lan", timeout=601)


class TestCLIConfig:
    def test_empty_config(self):
        c = CLIConfig()
        assert c.default_profile is None
        assert c.default_format == "table"
        assert c.profiles == {}

    def test_config_with_profiles(self):
        p = FirewallProfile(name="home", url="https://fw.lan")
        c = CLIConfig(default_profile="home", profiles={"home": p})
        assert c.default_profile == "home"
        assert "home" in c.profiles
