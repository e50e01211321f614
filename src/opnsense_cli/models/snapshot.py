"""System snapshot data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Snapshot(BaseModel):
    """Canonical system and resource state, assembled from several endpoints.

    Every field carries a concrete default so consumers never branch on
    presence.
    """

    hostname: str = "OPNsense Router"
    product_type: str = "opnsense"
    version: str = "Unknown"
    architecture: str = "amd64"
    commit_hash: str = ""
    mirror_url: str = ""
    repository_label: str = ""
    last_update: str = ""
    platform_label: str = "FreeBSD"
    uptime_seconds: int = 0
    cpu_usage_percent: float = 0.0
    memory_used_bytes: int = 0
    memory_total_bytes: int = 0
    disk_used_bytes: int = 0
    disk_total_bytes: int = 0

    @property
    def memory_usage_percent(self) -> float:
        if self.memory_total_bytes == 0:
            return 0.0
        return self.memory_used_bytes / self.memory_total_bytes * 100

    @property
    def disk_usage_percent(self) -> float:
        if self.disk_total_bytes == 0:
            return 0.0
        return self.disk_used_bytes / self.disk_total_bytes * 100


class SourceStatus(BaseModel):
    """Which endpoint, if any, answered for one snapshot source."""

    succeeded: bool
    path: str | None = None
    tried: list[str] = Field(default_factory=list)


class SnapshotReport(BaseModel):
    snapshot: Snapshot
    sources: dict[str, SourceStatus] = Field(default_factory=dict)
