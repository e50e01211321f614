"""Tests for config manager."""

import stat

import pytest

from opnsense_cli.client.errors import ConfigurationError
from opnsense_cli.config.manager import ConfigManager
from opnsense_cli.config.models import FirewallProfile


class TestConfigManager:
    def test_load_empty(self, config_manager: ConfigManager):
        assert config_manager.config.profiles == {}
        assert config_manager.config.default_profile is None

    def test_add_profile(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        assert "test-fw" in config_manager.config.profiles
        assert config_manager.config.default_profile == "test-fw"

    def test_add_sets_first_as_default(self, config_manager: ConfigManager):
        config_manager.add_profile(FirewallProfile(name="first", url="https://first"))
        config_manager.add_profile(FirewallProfile(name="second", url="https://second"))
        assert config_manager.config.default_profile == "first"

    def test_remove_profile(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        assert config_manager.remove_profile("test-fw") is True
        assert "test-fw" not in config_manager.config.profiles

    def test_remove_nonexistent(self, config_manager: ConfigManager):
        assert config_manager.remove_profile("nope") is False

    def test_remove_default_reassigns(self, config_manager: ConfigManager):
        config_manager.add_profile(FirewallProfile(name="a", url="https://a"))
        config_manager.add_profile(FirewallProfile(name="b", url="https://b"))
        config_manager.remove_profile("a")
        assert config_manager.config.default_profile == "b"

    def test_set_default(self, config_manager: ConfigManager):
        config_manager.add_profile(FirewallProfile(name="a", url="https://a"))
        config_manager.add_profile(FirewallProfile(name="b", url="https://b"))
        assert config_manager.set_default("b") is True
        assert config_manager.get_profile().name == "b"

    def test_set_default_nonexistent(self, config_manager: ConfigManager):
        assert config_manager.set_default("nope") is False

    def test_save_and_reload(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        reloaded = ConfigManager(config_path=config_manager.config_path)
        p = reloaded.get_profile("test-fw")
        assert p is not None
        assert p.url == "https://localhost:4443"
        assert p.api_key == "testkey"
        assert p.api_secret == "testsecret"

    def test_file_is_owner_only(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        mode = stat.S_IMODE(config_manager.config_path.stat().st_mode)
        assert mode == 0o600

    def test_resolve_from_profile(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        resolved = config_manager.resolve_firewall()
        assert resolved.url == "https://localhost:4443"
        assert resolved.api_key == "testkey"

    def test_resolve_cli_overrides(self, config_manager: ConfigManager, sample_profile: FirewallProfile):
        config_manager.add_profile(sample_profile)
        resolved = config_manager.resolve_firewall(url="https://other/", api_key="new")
        assert resolved.url == "https://other"
        assert resolved.api_key == "new"
        assert resolved.api_secret == "testsecret"

    def test_resolve_env_vars(self, config_manager: ConfigManager, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPNSENSE_URL", "https://env-fw")
        monkeypatch.setenv("OPNSENSE_API_KEY", "envkey")
        monkeypatch.setenv("OPNSENSE_API_SECRET", "envsecret")
        resolved = config_manager.resolve_firewall()
        assert resolved.name == "cli"
        assert resolved.url == "https://env-fw"
        assert resolved.auth_configured is True

    def test_resolve_env_profile(self, config_manager: ConfigManager, monkeypatch: pytest.MonkeyPatch):
        config_manager.add_profile(FirewallProfile(name="a", url="https://a"))
        config_manager.add_profile(FirewallProfile(name="b", url="https://b"))
        monkeypatch.setenv("OPNSENSE_PROFILE", "b")
        assert config_manager.resolve_firewall().url == "https://b"

    def test_resolve_no_url_raises(self, config_manager: ConfigManager):
        with pytest.raises(ConfigurationError, match="No firewall URL configured"):
            config_manager.resolve_firewall()
