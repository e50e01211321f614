"""Firewall rule data models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

RuleAction = Literal["pass", "block", "reject"]

# Protocols for which source/destination ports mean anything
PORT_PROTOCOLS = frozenset({"tcp", "udp", "tcp/udp"})


class Rule(BaseModel):
    """A firewall filter rule, normalized from any of the API's shapes."""

    model_config = ConfigDict(frozen=True)

    uuid: str = ""
    action: RuleAction = "pass"
    interface: str = ""
    protocol: str = "any"
    source: str = "any"
    destination: str = "any"
    source_port: str = "any"
    destination_port: str = "any"
    description: str = ""
    enabled: bool = True
    sequence: int = 0
    origin: str = ""

    @property
    def is_system_generated(self) -> bool:
        """Rules created by the firewall itself may not be edited, toggled or deleted."""
        return bool(self.origin)

    @property
    def supports_ports(self) -> bool:
        return self.protocol.lower() in PORT_PROTOCOLS

    @property
    def action_label(self) -> str:
        return self.action.capitalize()

    @property
    def protocol_label(self) -> str:
        return self.protocol.upper()


class RuleEditRequest(BaseModel):
    """A rule as submitted to ``addRule`` / ``setRule``.

    The trailing fields are wire defaults the firewall expects on every write.
    """

    action: RuleAction = "pass"
    interface: str
    protocol: str = "any"
    source: str = "any"
    destination: str = "any"
    source_port: str = ""
    destination_port: str = ""
    description: str | None = ""
    enabled: bool = True

    source_not: str = "0"
    destination_not: str = "0"
    log: str = "0"
    ipprotocol: str = "inet"
    direction: str = "in"
    quick: str = "1"

    @classmethod
    def from_rule(cls, rule: Rule) -> RuleEditRequest:
        return cls(
            action=rule.action,
            interface=rule.interface,
            protocol=rule.protocol,
            source=rule.source,
            destination=rule.destination,
            source_port=rule.source_port,
            destination_port=rule.destination_port,
            description=rule.description,
            enabled=rule.enabled,
        )
