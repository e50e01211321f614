"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from opnsense_cli.config.manager import ConfigManager
from opnsense_cli.config.models import FirewallProfile

FW = "https://fw.test"


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> FirewallProfile:
    """Return a sample firewall profile for testing."""
    return FirewallProfile(
        name="test-fw",
        url="https://localhost:4443",
        api_key="testkey",
        api_secret="testsecret",
    )


@pytest.fixture
def fw_profile() -> FirewallProfile:
    return FirewallProfile(name="fw", url=FW, api_key="key", api_secret="secret")


@pytest.fixture
def mock_resources() -> dict:
    """Sample /diagnostics/system/systemResources response."""
    return {
        "memory": {
            "total": "8589934592",
            "total_frmt": "8192 MB",
            "used": 2147483648,
            "used_frmt": "2048 MB",
        },
    }


@pytest.fixture
def mock_firmware_info() -> dict:
    """Sample /core/firmware/info response."""
    return {
        "product": {
            "product_version": "24.7.5",
            "CORE_NAME": "opnsense",
            "product_arch": "amd64",
            "product_hash": "c2f076f30",
            "product_mirror": "https://pkg.opnsense.org/FreeBSD:14:amd64/24.7",
            "product_repos": "OPNsense (Priority: 11)",
            "product_time": "Mon Sep 30 10:00:00 UTC 2024",
        },
        "hostname": "fw01.lan",
        "os_version": "14.1-RELEASE-p5",
    }


@pytest.fixture
def mock_activity() -> dict:
    """Sample /diagnostics/activity/getActivity response."""
    return {
        "headers": [
            "last pid: 31779;  load averages:  0.86,  1.02,  0.89  up 0+07:16:41    19:59:35",
            "52 processes: 1 running, 51 sleeping",
            "CPU:  2.7% user,  0.0% nice,  1.5% system,  0.7% interrupt, 95.0% idle",
            "Mem: 120M Active, 1024M Inact, 512M Wired, 6G Free",
        ],
        "details": [],
    }


@pytest.fixture
def mock_disk() -> dict:
    """Sample /diagnostics/system/systemDisk response."""
    return {
        "devices": [
            {"device": "devfs", "type": "devfs", "blocks": "1.0K", "used": "1.0K", "mountpoint": "/dev"},
            {
                "device": "/dev/gpt/rootfs",
                "type": "ufs",
                "blocks": "40G",
                "used": "8.0G",
                "available": "29G",
                "used_pct": 22,
                "mountpoint": "/",
            },
        ],
    }


@pytest.fixture
def mock_filter_get() -> dict:
    """Sample /firewall/filter/get response with option-map fields."""
    return {
        "filter": {
            "rules": {
                "rule": {
                    "a1b2": {
                        "enabled": "1",
                        "sequence": "10",
                        "action": {
                            "pass": {"value": "Pass", "selected": 1},
                            "block": {"value": "Block", "selected": 0},
                            "reject": {"value": "Reject", "selected": 0},
                        },
                        "interface": {
                            "lan": {"value": "LAN", "selected": 1},
                            "wan": {"value": "WAN", "selected": 0},
                            "opt1": {"value": "DMZ", "selected": 0},
                        },
                        "protocol": {
                            "any": {"value": "any", "selected": 0},
                            "TCP": {"value": "TCP", "selected": 1},
                            "UDP": {"value": "UDP", "selected": 0},
                        },
                        "source_net": "any",
                        "source_port": "",
                        "destination_net": "10.0.0.5",
                        "destination_port": "443",
                        "description": "web",
                    },
                    "c3d4": {
                        "enabled": "0",
                        "sequence": "20",
                        "action": {
                            "pass": {"value": "Pass", "selected": 0},
                            "block": {"value": "Block", "selected": 1},
                        },
                        "interface": {
                            "lan": {"value": "LAN", "selected": 0},
                            "wan": {"value": "WAN", "selected": 1},
                        },
                        "protocol": {"any": {"value": "any", "selected": 1}},
                        "source_net": "",
                        "destination_net": "",
                        "descr": "block wan",
                        "origin": "",
                    },
                },
            },
        },
    }


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep connection env vars from the host out of every test."""
    for var in ("OPNSENSE_URL", "OPNSENSE_API_KEY", "OPNSENSE_API_SECRET", "OPNSENSE_PROFILE"):
        monkeypatch.delenv(var, raising=False)
