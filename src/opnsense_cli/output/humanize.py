"""Human-readable renderings of sizes, durations and percentages."""

from __future__ import annotations

_SUFFIXES = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(num_bytes: int, decimals: int = 2) -> str:
    if num_bytes <= 0:
        return "0 B"
    size = float(num_bytes)
    index = 0
    while size >= 1024 and index < len(_SUFFIXES) - 1:
        size /= 1024
        index += 1
    return f"{size:.{decimals}f} {_SUFFIXES[index]}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_uptime(seconds: int) -> str:
    """``93784`` -> ``"1 day, 2 hours, 3 minutes"``; seconds only below a minute."""
    if seconds <= 0:
        return "0 seconds"
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    parts = []
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    if minutes:
        parts.append(_plural(minutes, "minute"))
    if secs and not parts:
        parts.append(_plural(secs, "second"))
    return ", ".join(parts)


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def format_usage(used: int, total: int) -> str:
    if total <= 0:
        return format_bytes(used)
    return f"{format_bytes(used)} / {format_bytes(total)} ({format_percent(used / total * 100)})"
