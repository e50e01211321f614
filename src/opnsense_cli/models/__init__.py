"""Pydantic data models for the OPNsense API."""

from opnsense_cli.models.rule import PORT_PROTOCOLS, Rule, RuleAction, RuleEditRequest
from opnsense_cli.models.snapshot import Snapshot, SnapshotReport, SourceStatus

__all__ = [
    "PORT_PROTOCOLS",
    "Rule",
    "RuleAction",
    "RuleEditRequest",
    "Snapshot",
    "SnapshotReport",
    "SourceStatus",
]
