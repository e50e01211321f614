"""Integration tests for config commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import httpx
import respx
from typer.testing import CliRunner

from opnsense_cli.app import app
from opnsense_cli.config.manager import ConfigManager

runner = CliRunner()


def _patch_manager(tmp_path: Path):
    """Patch ConfigManager to use a temp config file."""
    config_path = tmp_path / "config.toml"
    return patch(
        "opnsense_cli.commands.config_cmd._get_manager",
        return_value=ConfigManager(config_path=config_path),
    )


class TestConfigCommands:
    def test_list_empty(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "list"])
            assert result.exit_code == 0
            assert "No profiles configured" in result.output

    def test_add_and_list(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, [
                "config", "add", "home", "--url", "https://fw.lan", "-k", "key", "-s", "secret",
            ])
            assert result.exit_code == 0
            assert "added" in result.output

            result = runner.invoke(app, ["config", "list"])
            assert result.exit_code == 0
            assert "home" in result.output

    def test_show_masks_credentials(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, [
                "config", "add", "home", "--url", "https://fw.lan",
                "--api-key", "longapikey123", "--api-secret", "topsecret",
            ])
            result = runner.invoke(app, ["config", "show", "home"])
            assert result.exit_code == 0
            assert "long..." in result.output
            assert "longapikey123" not in result.output
            assert "topsecret" not in result.output

    def test_show_nonexistent(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show", "nope"])
            assert result.exit_code == 1

    def test_set_default(self, tmp_path: Path):
        with _patch_manager(tmp_path) as mock:
            runner.invoke(app, ["config", "add", "a", "--url", "https://a"])
            runner.invoke(app, ["config", "add", "b", "--url", "https://b"])
            result = runner.invoke(app, ["config", "set-default", "b"])
            assert result.exit_code == 0
            assert mock.return_value.config.default_profile == "b"

    def test_remove(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "a", "--url", "https://a"])
            result = runner.invoke(app, ["config", "remove", "a", "--force"])
            assert result.exit_code == 0
            assert "removed" in result.output

    def test_remove_nonexistent(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "remove", "nope", "--force"])
            assert result.exit_code == 1

    @respx.mock
    def test_connection_ok(self, tmp_path: Path):
        respx.get("https://fw.lan/api/core/system/status").mock(
            return_value=httpx.Response(200, json={})
        )
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "home", "--url", "https://fw.lan"])
            result = runner.invoke(app, ["config", "test", "home"])
            assert result.exit_code == 0
            assert "Firewall reachable." in result.output

    @respx.mock
    def test_connection_unreachable(self, tmp_path: Path):
        respx.get("https://fw.lan/api/core/system/status").mock(
            side_effect=httpx.ConnectError("refused")
        )
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "home", "--url", "https://fw.lan"])
            result = runner.invoke(app, ["config", "test"])
            assert result.exit_code == 2

    def test_test_without_profile(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "test"])
            assert result.exit_code == 6
