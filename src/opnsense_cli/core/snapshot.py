"""Assemble a :class:`Snapshot` from four independently fallible sources.

* resources -- memory (required)
* system    -- firmware/product identity
* activity  -- ``top`` header lines with uptime and CPU load
* disk      -- ``df``-style device table

The optional sources degrade to ``{}``; only the resources source may fail
the whole snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from opnsense_cli.core.fallback import EndpointAttempt, FallbackResult, as_mapping, require, resolve
from opnsense_cli.core.quantity import (
    coerce_uint,
    cpu_usage_from_headers,
    parse_storage_size,
    uptime_from_headers,
)
from opnsense_cli.models.snapshot import Snapshot, SnapshotReport, SourceStatus

if TYPE_CHECKING:
    from opnsense_cli.client.transport import FirewallClient

logger = logging.getLogger(__name__)

RESOURCES_ATTEMPTS = [
    EndpointAttempt("/diagnostics/system/systemResources", as_mapping),
    EndpointAttempt("/core/system/status", as_mapping),
]
SYSTEM_ATTEMPTS = [
    EndpointAttempt("/core/firmware/info", as_mapping),
    EndpointAttempt("/core/firmware/status", as_mapping),
    EndpointAttempt("/core/system/info", as_mapping),
]
ACTIVITY_ATTEMPTS = [
    EndpointAttempt("/diagnostics/activity/getActivity", as_mapping),
]
DISK_ATTEMPTS = [
    EndpointAttempt("/diagnostics/system/systemDisk", as_mapping),
    EndpointAttempt("/core/system/systemDisk", as_mapping),
]

ROOT_MOUNTPOINT = "/"


def _first_str(source: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _product_fields(system: dict[str, Any]) -> dict[str, str]:
    product = system.get("product")
    source = product if isinstance(product, dict) else system

    repositories = _first_str(source, "product_repos")
    if not repositories:
        repo = _first_str(source, "CORE_REPOSITORY")
        if repo:
            repositories = f"OPNsense ({repo})"

    return {
        "version": _first_str(source, "CORE_VERSION", "product_version"),
        "product_type": _first_str(source, "CORE_PRODUCT", "CORE_NAME"),
        "architecture": _first_str(source, "CORE_ARCH", "product_arch"),
        "commit_hash": _first_str(source, "CORE_HASH", "product_hash"),
        "mirror_url": _first_str(source, "product_mirror", "CORE_PACKAGESITE")
        or _first_str(system, "product_mirror"),
        "repository_label": repositories or _first_str(system, "product_repos"),
        "last_update": _first_str(source, "product_time")
        or _first_str(system, "product_time", "status_msg", "last_check"),
    }


def _platform_label(system: dict[str, Any]) -> str:
    os_info = system.get("os")
    if isinstance(os_info, dict):
        name = os_info.get("name") or "FreeBSD"
        return f"{name} {os_info.get('version') or ''}".strip()
    if system.get("os_version"):
        return f"FreeBSD {system['os_version']}"
    return ""


def _root_device(disk: dict[str, Any]) -> dict[str, Any] | None:
    devices = disk.get("devices")
    if not isinstance(devices, list):
        return None
    for device in devices:
        if isinstance(device, dict) and device.get("mountpoint") == ROOT_MOUNTPOINT:
            return device
    return None


def merge_snapshot(
    resources: dict[str, Any],
    system: dict[str, Any],
    activity: dict[str, Any],
    disk: dict[str, Any],
) -> Snapshot:
    """Merge the four raw payloads into one snapshot."""
    fields: dict[str, Any] = {
        key: value for key, value in _product_fields(system).items() if value
    }
    if isinstance(system.get("hostname"), str) and system["hostname"]:
        fields["hostname"] = system["hostname"]
    platform = _platform_label(system)
    if platform:
        fields["platform_label"] = platform

    headers = activity.get("headers")
    if isinstance(headers, list):
        fields["uptime_seconds"] = uptime_from_headers(headers)
        fields["cpu_usage_percent"] = cpu_usage_from_headers(headers)

    memory = resources.get("memory")
    if isinstance(memory, dict):
        fields["memory_used_bytes"] = coerce_uint(memory.get("used"))
        fields["memory_total_bytes"] = coerce_uint(memory.get("total"))

    root = _root_device(disk)
    if root is not None:
        fields["disk_used_bytes"] = parse_storage_size(root.get("used"))
        fields["disk_total_bytes"] = parse_storage_size(root.get("blocks"))

    return Snapshot(**fields)


def _status(result: FallbackResult[Any]) -> SourceStatus:
    return SourceStatus(succeeded=result.succeeded, path=result.path, tried=result.tried)


async def fetch_snapshot_report(client: FirewallClient) -> SnapshotReport:
    """Fetch all sources concurrently and report which endpoint served each."""
    # All four run to completion before the required source's failure is raised
    resources, system, activity, disk = await asyncio.gather(
        require(client, RESOURCES_ATTEMPTS, source="resources"),
        resolve(client, SYSTEM_ATTEMPTS, {}),
        resolve(client, ACTIVITY_ATTEMPTS, {}),
        resolve(client, DISK_ATTEMPTS, {}),
        return_exceptions=True,
    )
    for result in (resources, system, activity, disk):
        if isinstance(result, BaseException):
            raise result
    for name, result in (("system", system), ("activity", activity), ("disk", disk)):
        if not result.succeeded:
            logger.info("Snapshot source '%s' unavailable; using defaults", name)
    snapshot = merge_snapshot(resources.value, system.value, activity.value, disk.value)
    return SnapshotReport(
        snapshot=snapshot,
        sources={
            "resources": _status(resources),
            "system": _status(system),
            "activity": _status(activity),
            "disk": _status(disk),
        },
    )


async def fetch_snapshot(client: FirewallClient) -> Snapshot:
    report = await fetch_snapshot_report(client)
    return report.snapshot
