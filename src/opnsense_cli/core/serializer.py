"""Serialize rule edits into the payload ``addRule``/``setRule`` accept."""

from __future__ import annotations

from typing import Any

from opnsense_cli.models.rule import PORT_PROTOCOLS, RuleEditRequest

# Outbound field name -> RuleEditRequest attribute
WIRE_FIELDS = {
    "action": "action",
    "interface": "interface",
    "protocol": "protocol",
    "source_net": "source",
    "source_not": "source_not",
    "source_port": "source_port",
    "destination_net": "destination",
    "destination_not": "destination_not",
    "destination_port": "destination_port",
    "description": "description",
    "enabled": "enabled",
    "log": "log",
    "ipprotocol": "ipprotocol",
    "direction": "direction",
    "quick": "quick",
}

PORT_FIELDS = ("source_port", "destination_port")


def _wire_protocol(protocol: str) -> str:
    # The API wants "TCP", "UDP", "ICMP" but the literal "any"
    if protocol.lower() == "any":
        return "any"
    return protocol.upper()


def serialize_rule_edit(edit: RuleEditRequest) -> dict[str, Any]:
    """Build the outbound rule mapping for *edit*."""
    payload: dict[str, Any] = {
        wire: getattr(edit, attr) for wire, attr in WIRE_FIELDS.items()
    }
    payload["enabled"] = "1" if edit.enabled else "0"
    payload["protocol"] = _wire_protocol(edit.protocol)

    # Port fields are rejected on port-less protocols
    if edit.protocol.lower() not in PORT_PROTOCOLS:
        for name in PORT_FIELDS:
            payload.pop(name)
    else:
        for name in PORT_FIELDS:
            value = (payload[name] or "").strip()
            if not value or value == "any":
                payload.pop(name)

    for name in ("source_net", "destination_net"):
        if not (payload[name] or "").strip():
            payload[name] = "any"

    if payload["description"] is None or payload["description"] == "null":
        payload["description"] = ""
    return payload


def wrap_rule_payload(edit: RuleEditRequest) -> dict[str, Any]:
    return {"rule": serialize_rule_edit(edit)}


def parse_validation_failure(body: Any) -> str | None:
    """Joined validation messages when a write reports ``result: failed``."""
    if not isinstance(body, dict) or body.get("result") != "failed":
        return None
    validations = body.get("validations")
    if isinstance(validations, dict) and validations:
        return ", ".join(str(message) for message in validations.values())
    return "Unknown validation error"
