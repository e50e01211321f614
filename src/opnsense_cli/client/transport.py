"""Async HTTP transport for the OPNsense REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from opnsense_cli.client.auth import resolve_auth
from opnsense_cli.client.errors import (
    AuthenticationError,
    DecodeError,
    FirewallAPIError,
    FirewallConnectionError,
    NotFoundError,
)
from opnsense_cli.config.constants import DEFAULT_API_BASE, DEFAULT_MAX_RETRIES
from opnsense_cli.config.models import FirewallProfile

logger = logging.getLogger(__name__)


class FirewallClient:
    """Asynchronous HTTP client for the OPNsense REST API.

    Every non-success status is raised as a typed error; callers that treat
    failures as "try the next endpoint" catch ``OPNsenseCLIError``.
    """

    def __init__(
        self,
        profile: FirewallProfile,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.profile = profile
        self.base_url = f"{profile.url}{DEFAULT_API_BASE}"
        if not profile.verify_ssl:
            logger.warning("TLS certificate verification is disabled for %s", profile.url)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=resolve_auth(profile),
            verify=profile.verify_ssl,
            timeout=profile.timeout,
            transport=transport or httpx.AsyncHTTPTransport(
                retries=DEFAULT_MAX_RETRIES, verify=profile.verify_ssl,
            ),
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> FirewallClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        try:
            body = response.json()
            detail = body.get("message", response.text) if isinstance(body, dict) else response.text
        except (json.JSONDecodeError, UnicodeDecodeError):
            detail = response.text
        if status == 401:
            raise AuthenticationError("Invalid credentials. Check your API key and secret.")
        if status == 403:
            raise AuthenticationError("Insufficient permissions for this API call.")
        if status == 404:
            raise NotFoundError(f"Not found: {response.request.url.path}")
        raise FirewallAPIError(status, detail)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json
        if timeout is not None:
            kwargs["timeout"] = timeout
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise FirewallConnectionError(
                f"Cannot connect to firewall at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise FirewallConnectionError(
                f"Request to {self.profile.url} timed out: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise FirewallConnectionError(
                f"Invalid URL for firewall at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise FirewallConnectionError(
                f"Transport error talking to {self.profile.url}: {exc}"
            ) from exc
        except httpx.RequestError as exc:
            # Body decoding and redirect loops are not TransportErrors
            raise FirewallConnectionError(
                f"Request to {self.profile.url} failed: {exc}"
            ) from exc
        return self._handle_response(response)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    @staticmethod
    def decode(response: httpx.Response) -> Any:
        """Decode a JSON body, tolerating non-UTF8 bytes."""
        try:
            return response.json()
        except UnicodeDecodeError:
            text = response.content.decode("utf-8", errors="replace")
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Response from {response.request.url.path} is not JSON") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Response from {response.request.url.path} is not JSON") from exc

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        return self.decode(await self.get(path, **kwargs))

    async def post_json(self, path: str, **kwargs: Any) -> Any:
        response = await self.post(path, **kwargs)
        if not response.content:
            return {}
        return self.decode(response)
