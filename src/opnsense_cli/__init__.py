"""Command-line client for the OPNsense firewall REST API."""

__version__ = "0.1.0"
