"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "opnsense-cli"
APP_AUTHOR = "opnsense-cli"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_FIREWALL_URL = "OPNSENSE_URL"
ENV_API_KEY = "OPNSENSE_API_KEY"
ENV_API_SECRET = "OPNSENSE_API_SECRET"
ENV_FIREWALL_PROFILE = "OPNSENSE_PROFILE"

# API defaults
DEFAULT_API_BASE = "/api"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECTION_TEST_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3

# Interfaces offered when the firewall does not report its own
DEFAULT_INTERFACES = {
    "lan": "LAN",
    "wan": "WAN",
    "opt1": "OPT1",
    "opt2": "OPT2",
}
