"""Parsers for the free-text quantities OPNsense reports.

Disk sizes come from ``df``-style strings ("8.0G", "40G"), uptime and CPU
load from the ``top`` header lines returned by the activity endpoint::

    last pid: 31779;  load averages:  0.86,  1.02,  0.89  up 0+07:16:41    19:59:35
    CPU:  2.7% user,  0.0% nice,  1.5% system,  0.7% interrupt, 95.0% idle

Every function here is total: unparseable input yields 0.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?|\.\d+)\s*([KMGT]?)", re.IGNORECASE)
_UPTIME_RE = re.compile(r"up (\d+)\+(\d+):(\d+):(\d+)")
_IDLE_RE = re.compile(r"(\d+(?:\.\d+)?)% idle")

CPU_MARKER = "CPU:"

_MULTIPLIERS = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}


def parse_storage_size(text: Any) -> int:
    """Convert a size string like ``"8.0G"`` to bytes."""
    if not isinstance(text, str):
        return 0
    match = _SIZE_RE.match(text.strip())
    if match is None:
        return 0
    number = float(match.group(1))
    return int(number * _MULTIPLIERS[match.group(2).upper()])


def parse_uptime(header_line: Any) -> int:
    """Seconds of uptime from a ``up D+HH:MM:SS`` token."""
    if not isinstance(header_line, str):
        return 0
    match = _UPTIME_RE.search(header_line)
    if match is None:
        return 0
    days, hours, minutes, seconds = (int(g) for g in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def parse_cpu_idle_usage(header_line: Any) -> float:
    """CPU usage percent derived from the ``<n>% idle`` token."""
    if not isinstance(header_line, str):
        return 0.0
    match = _IDLE_RE.search(header_line)
    if match is None:
        return 0.0
    return round(100.0 - float(match.group(1)), 2)


def uptime_from_headers(headers: Sequence[Any]) -> int:
    """Uptime is only ever reported on the first header line."""
    if not headers:
        return 0
    return parse_uptime(headers[0])


def cpu_usage_from_headers(headers: Sequence[Any]) -> float:
    for line in headers:
        if isinstance(line, str) and CPU_MARKER in line and _IDLE_RE.search(line):
            return parse_cpu_idle_usage(line)
    return 0.0


def coerce_uint(value: Any) -> int:
    """Accept ints and numeric strings; everything else becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0
