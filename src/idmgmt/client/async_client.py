"""Asynchronous HTTP client -- mirrors :class:`~idmgmt.client.sync_client.SyncClient` API.

:class:`AsyncClient` wraps :class:`httpx.AsyncClient` and offers the same
header injection, dry-run mode and error mapping, but uses ``await`` so it
can run inside an event loop.  It backs the ``a``-prefixed manager methods
(:meth:`~idmgmt.management.device_code.DeviceCodeManager.averify`, ...).
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from idmgmt.client._common import (
    build_default_headers,
    build_request_kwargs,
    connection_error,
    dry_run_response,
    join_url,
    map_response_error,
)
from idmgmt.models import ManagerOptions
from idmgmt.output import get_output


class AsyncClient:
    """Asynchronous HTTP client for management API calls.

    Must be used as an async context manager.

    Args:
        options: Validated manager options.
        transport: Optional async :mod:`httpx` transport.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.

    Example::

        async with AsyncClient(options) as client:
            response = await client.post("/device/activate", json_body=params)
    """

    def __init__(
        self,
        options: ManagerOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        dry_run: bool = False,
    ) -> None:
        self._options = options
        self._transport = transport
        self._dry_run = dry_run
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        config = self._options.request
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        body: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Make one async HTTP request and map error statuses to exceptions.

        Behaves identically to
        :meth:`~idmgmt.client.sync_client.SyncClient.request` but is
        non-blocking.
        """
        method = method.upper()
        merged_headers = build_default_headers(self._options)
        merged_headers.update(headers or {})
        merged_params: dict[str, Any] = dict(params or {})
        url = join_url(self._options.base_url, path)

        if self._dry_run:
            return dry_run_response(
                method, url, merged_headers, merged_params, json_body, body, data,
            )

        assert self._client is not None, "Client not initialised -- use as async context manager"

        output = get_output()
        output.debug(f"{method} {url}")
        try:
            response = await self._client.request(
                **build_request_kwargs(
                    method, url, merged_headers, merged_params, json_body, body, data,
                )
            )
        except httpx.RequestError as exc:
            raise connection_error(method, url, exc) from exc

        output.debug(f"HTTP {response.status_code} {method} {url}")
        map_response_error(response, method, url)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)
