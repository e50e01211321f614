"""Rule normalization.

``searchRule`` returns flat strings, ``filter/get`` and ``getRule`` return
option maps for the enumerated fields, and the collection itself is either a
list or a mapping keyed by uuid. Everything here funnels into :class:`Rule`.
"""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from opnsense_cli.core.selection import resolve_selection, selection_options
from opnsense_cli.models.rule import Rule

logger = logging.getLogger(__name__)

# filter.rules.rule in the /firewall/filter/get response
RULES_PATH = ("filter", "rules", "rule")


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _or_any(value: Any) -> str:
    return _text(value) or "any"


def _enum_field(raw: dict[str, Any], key: str, *, want_label: bool = False) -> str:
    value = raw.get(key)
    if isinstance(value, str):
        return value
    return resolve_selection(value, want_label=want_label)


def _sequence(value: Any) -> int:
    try:
        return int(_text(value).strip())
    except ValueError:
        return 0


def normalize_rule(raw: dict[str, Any]) -> Rule:
    """Build a :class:`Rule` from one raw rule object.

    Raises ``pydantic.ValidationError`` for values that cannot form a rule
    (for example an unknown action).
    """
    return Rule(
        uuid=_text(raw.get("uuid")),
        action=(_enum_field(raw, "action") or "pass").lower(),
        # Option maps carry lowercase keys; the label matches what the flat
        # endpoints already return
        interface=_enum_field(raw, "interface", want_label=True),
        protocol=_enum_field(raw, "protocol") or "any",
        source=_or_any(raw.get("source_net")),
        destination=_or_any(raw.get("destination_net")),
        source_port=_or_any(raw.get("source_port")),
        destination_port=_or_any(raw.get("destination_port")),
        description=_text(raw.get("description")) or _text(raw.get("descr")),
        enabled=_text(raw.get("enabled", "1")) == "1",
        sequence=_sequence(raw.get("sequence")),
        origin=_text(raw.get("origin")),
    )


def rule_container(raw: Any) -> Any:
    node = raw
    for key in RULES_PATH:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _try_normalize(entry: dict[str, Any]) -> Rule | None:
    try:
        return normalize_rule(entry)
    except (pydantic.ValidationError, TypeError, ValueError) as exc:
        logger.debug("Dropping malformed rule %r: %s", entry.get("uuid"), exc)
        return None


def normalize_rule_collection(raw: Any) -> list[Rule]:
    """Normalize every rule under ``filter.rules.rule``.

    A list keeps its order. A uuid-keyed mapping implies no order; the key
    becomes the rule's uuid when the entry has none. Malformed entries are
    dropped.
    """
    container = rule_container(raw)
    entries: list[dict[str, Any]] = []
    if isinstance(container, list):
        entries = [entry for entry in container if isinstance(entry, dict)]
    elif isinstance(container, dict):
        for key, entry in container.items():
            if not isinstance(entry, dict):
                continue
            entry = dict(entry)
            if not entry.get("uuid"):
                entry["uuid"] = str(key)
            entries.append(entry)

    rules = []
    for entry in entries:
        rule = _try_normalize(entry)
        if rule is not None:
            rules.append(rule)
    return rules


def normalize_single_rule(uuid: str, raw: Any) -> Rule | None:
    """Normalize a ``getRule/<uuid>`` response.

    Unlike the collection, the interface keeps its key here so the rule can
    be fed straight back into an edit.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("rule"), dict):
        return None
    data = raw["rule"]
    entry = {
        **data,
        "uuid": uuid,
        "interface": _enum_field(data, "interface"),
        "source_net": data.get("source_net", data.get("source")),
        "destination_net": data.get("destination_net", data.get("destination")),
    }
    return _try_normalize(entry)


def extract_interfaces(raw: Any) -> dict[str, str]:
    """Interface ``key -> label`` options offered on the first rule."""
    container = rule_container(raw)
    if isinstance(container, dict):
        candidates = list(container.values())
    elif isinstance(container, list):
        candidates = container
    else:
        return {}
    if not candidates or not isinstance(candidates[0], dict):
        return {}
    return selection_options(candidates[0].get("interface"))
