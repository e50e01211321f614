"""High-level firewall operations built on the transport and the core."""

from __future__ import annotations

import logging
from typing import Any

from opnsense_cli.client.errors import (
    AuthenticationError,
    DecodeError,
    FirewallAPIError,
    FirewallConnectionError,
    NotFoundError,
    OPNsenseCLIError,
    ReadOnlyRuleError,
    ValidationError,
)
from opnsense_cli.client.transport import FirewallClient
from opnsense_cli.config.constants import DEFAULT_CONNECTION_TEST_TIMEOUT, DEFAULT_INTERFACES
from opnsense_cli.core.fallback import EndpointAttempt, as_list, resolve
from opnsense_cli.core.rules import (
    extract_interfaces,
    normalize_rule_collection,
    normalize_single_rule,
    rule_container,
)
from opnsense_cli.core.serializer import parse_validation_failure, wrap_rule_payload
from opnsense_cli.core.snapshot import fetch_snapshot, fetch_snapshot_report
from opnsense_cli.models.rule import Rule, RuleEditRequest
from opnsense_cli.models.snapshot import Snapshot, SnapshotReport

logger = logging.getLogger(__name__)

SERVICE_ACTIONS = ("start", "stop", "restart")


def _rows(data: Any) -> list[Any]:
    try:
        return as_list(data)
    except DecodeError:
        return []


def _filter_rules(data: Any) -> list[Rule]:
    if rule_container(data) is None:
        raise DecodeError("no filter.rules.rule in response")
    return normalize_rule_collection(data)


def _search_rows(data: Any) -> list[Rule]:
    rows = as_list(data)
    return normalize_rule_collection({"filter": {"rules": {"rule": rows}}})


def _interfaces_or_fail(data: Any) -> dict[str, str]:
    interfaces = extract_interfaces(data)
    if not interfaces:
        raise DecodeError("no interface options in rule payload")
    return interfaces


RULES_ATTEMPTS = [
    EndpointAttempt("/firewall/filter/get", _filter_rules),
    EndpointAttempt("/firewall/filter/searchRule", _search_rows),
]
INTERFACE_ATTEMPTS = [
    EndpointAttempt("/firewall/filter/get", _interfaces_or_fail),
]


def ensure_editable(rule: Rule | None) -> None:
    if rule is not None and rule.is_system_generated:
        raise ReadOnlyRuleError(
            f"Rule {rule.uuid} is managed by the firewall (origin: {rule.origin}) "
            "and cannot be changed"
        )


class FirewallService:
    """Operations exposed to the CLI, one instance per client."""

    def __init__(self, client: FirewallClient) -> None:
        self.client = client

    # -- system --------------------------------------------------------

    async def fetch_snapshot(self) -> Snapshot:
        return await fetch_snapshot(self.client)

    async def fetch_snapshot_report(self) -> SnapshotReport:
        return await fetch_snapshot_report(self.client)

    async def test_connection(self) -> bool:
        """True when the firewall answers at all, even with an auth failure."""
        try:
            await self.client.get(
                "/core/system/status", timeout=DEFAULT_CONNECTION_TEST_TIMEOUT,
            )
        except AuthenticationError:
            return True
        except FirewallAPIError as exc:
            return exc.status_code == 400
        except (FirewallConnectionError, NotFoundError):
            return False
        return True

    async def reboot(self) -> None:
        await self.client.post("/core/system/reboot")

    # -- rules ---------------------------------------------------------

    async def fetch_rules(self) -> list[Rule]:
        result = await resolve(self.client, RULES_ATTEMPTS, [])
        return result.value

    async def fetch_rule(self, uuid: str) -> Rule | None:
        try:
            data = await self.client.get_json(f"/firewall/filter/getRule/{uuid}")
        except OPNsenseCLIError as exc:
            logger.debug("getRule %s failed: %s", uuid, exc)
            return None
        return normalize_single_rule(uuid, data)

    async def fetch_available_interfaces(self) -> dict[str, str]:
        result = await resolve(self.client, INTERFACE_ATTEMPTS, dict(DEFAULT_INTERFACES))
        return result.value

    async def submit_rule_edit(
        self,
        edit: RuleEditRequest,
        uuid: str | None = None,
        *,
        current: Rule | None = None,
    ) -> str:
        """Create (no *uuid*) or update a rule, apply, and return its uuid."""
        ensure_editable(current)
        path = f"/firewall/filter/setRule/{uuid}" if uuid else "/firewall/filter/addRule"
        body = await self.client.post_json(path, json=wrap_rule_payload(edit))

        failure = parse_validation_failure(body)
        if failure is not None:
            verb = "update" if uuid else "create"
            raise ValidationError(f"Failed to {verb} rule: {failure}")

        if not uuid:
            uuid = body.get("uuid") if isinstance(body, dict) else None
            if not uuid:
                raise FirewallAPIError(500, "No UUID returned from addRule")
        await self.apply_changes()
        logger.info("Rule %s saved and applied", uuid)
        return uuid

    async def toggle_rule(self, uuid: str, *, current: Rule | None = None) -> None:
        ensure_editable(current)
        await self.client.post(f"/firewall/filter/toggleRule/{uuid}")
        await self.apply_changes()

    async def delete_rule(self, uuid: str, *, current: Rule | None = None) -> None:
        ensure_editable(current)
        await self.client.post(f"/firewall/filter/delRule/{uuid}")
        await self.apply_changes()

    async def apply_changes(self) -> None:
        await self.client.post("/firewall/filter/apply")

    # -- diagnostics ---------------------------------------------------

    async def fetch_logs(self, limit: int = 100) -> list[Any]:
        data = await self.client.get_json("/diagnostics/firewall/log", params={"limit": limit})
        return _rows(data)

    async def fetch_services(self) -> list[Any]:
        return _rows(await self.client.get_json("/core/service/search"))

    async def control_service(self, name: str, action: str) -> bool:
        if action not in SERVICE_ACTIONS:
            raise ValueError(f"Unknown service action '{action}'")
        data = await self.client.post_json(f"/core/service/{action}/{name}")
        if isinstance(data, dict):
            result = data.get("result") or data.get("status") or "ok"
            return str(result).lower() in ("ok", "success")
        return True

    async def fetch_gateways(self) -> list[Any]:
        return _rows(await self.client.get_json("/routes/gateway/status"))
