"""Endpoint fallback chains.

Which endpoint answers, and in what shape, depends on the firmware version,
so a logical query is expressed as an ordered list of attempts. Attempts run
strictly in sequence; the first one that succeeds and decodes wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from opnsense_cli.client.errors import DecodeError, MandatorySourceUnavailable, OPNsenseCLIError

if TYPE_CHECKING:
    from opnsense_cli.client.transport import FirewallClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

Adapter = Callable[[Any], T]


def as_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def as_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("rows", "items", "data"):
            if isinstance(data.get(key), list):
                return list(data[key])
    raise DecodeError(f"expected a JSON list, got {type(data).__name__}")


@dataclass(frozen=True)
class EndpointAttempt(Generic[T]):
    """One candidate endpoint and the adapter that decodes its response."""

    path: str
    adapter: Adapter[T]
    params: dict[str, Any] | None = None
    method: str = "GET"


@dataclass
class FallbackResult(Generic[T]):
    value: T
    succeeded: bool
    path: str | None = None
    tried: list[str] = field(default_factory=list)


_ADAPTER_ERRORS = (DecodeError, TypeError, ValueError, KeyError, AttributeError)


async def resolve(
    client: FirewallClient,
    attempts: Sequence[EndpointAttempt[T]],
    default: T,
) -> FallbackResult[T]:
    """Return the first attempt that succeeds, or *default* if none does."""
    tried: list[str] = []
    for attempt in attempts:
        tried.append(attempt.path)
        try:
            response = await client.request(attempt.method, attempt.path, params=attempt.params)
            value = attempt.adapter(client.decode(response))
        except OPNsenseCLIError as exc:
            logger.debug("Fallback attempt %s failed: %s", attempt.path, exc)
            continue
        except _ADAPTER_ERRORS as exc:
            logger.debug("Fallback attempt %s returned an unexpected shape: %s", attempt.path, exc)
            continue
        return FallbackResult(value=value, succeeded=True, path=attempt.path, tried=tried)
    logger.debug("All %d fallback attempts failed: %s", len(tried), ", ".join(tried))
    return FallbackResult(value=default, succeeded=False, tried=tried)


async def require(
    client: FirewallClient,
    attempts: Sequence[EndpointAttempt[T]],
    *,
    source: str,
) -> FallbackResult[T]:
    """Like :func:`resolve`, but exhausting the chain is an error."""
    result: FallbackResult[Any] = await resolve(client, attempts, None)
    if not result.succeeded:
        raise MandatorySourceUnavailable(source, result.tried)
    return result
