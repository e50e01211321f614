"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class OPNsenseCLIError(Exception):
    """Base exception for opnsense-cli."""

    exit_code: int = 1


class FirewallConnectionError(OPNsenseCLIError):
    """Cannot reach the firewall (network error or timeout)."""

    exit_code = 2


class AuthenticationError(OPNsenseCLIError):
    """Authentication failed (401/403)."""

    exit_code = 3


class NotFoundError(OPNsenseCLIError):
    """Resource not found (404)."""

    exit_code = 4


class ConfigurationError(OPNsenseCLIError):
    """No usable firewall connection could be resolved."""

    exit_code = 6


class ValidationError(OPNsenseCLIError):
    """The firewall rejected a write with validation messages."""

    exit_code = 7

    def __init__(self, message: str = "") -> None:
        super().__init__(message or "Validation error")


class DecodeError(OPNsenseCLIError):
    """A response did not have the shape an adapter expected."""

    exit_code = 8


class MandatorySourceUnavailable(OPNsenseCLIError):
    """Every endpoint of a required fallback chain failed."""

    exit_code = 9

    def __init__(self, source: str, paths: list[str] | None = None) -> None:
        self.source = source
        self.paths = list(paths or [])
        tried = ", ".join(self.paths) or "no endpoints"
        super().__init__(f"Required source '{source}' is unavailable (tried {tried})")


class ReadOnlyRuleError(OPNsenseCLIError):
    """The rule is managed by the firewall itself and cannot be changed."""

    exit_code = 10


class FirewallAPIError(OPNsenseCLIError):
    """Generic API error from the firewall."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Firewall returned {status_code}: {detail}")


def error_handler(func: F) -> F:
    """Decorator that catches OPNsenseCLIError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except OPNsenseCLIError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
