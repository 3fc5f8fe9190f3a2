"""Synchronous HTTP client with header injection, dry-run and error mapping.

This module provides :class:`SyncClient`, the blocking client every
manager call goes through.  It wraps :class:`httpx.Client` and layers on:

- **Header injection** -- ``Accept``, the configured headers and the
  bearer token from :class:`~idmgmt.models.ManagerOptions` are merged into
  every outgoing request.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.
- **Error mapping** -- non-2xx statuses and transport failures are raised
  as :class:`~idmgmt.exceptions.RequestError` subclasses.

Each call is a single request; nothing is retried.

See Also:
    :class:`~idmgmt.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
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


class SyncClient:
    """Synchronous HTTP client for management API calls.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        options: Validated manager options (base URL, headers, token and
            request settings).
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.

    Example::

        with SyncClient(options) as client:
            response = client.post("/device/verify", json_body={"user_code": code})
    """

    def __init__(
        self,
        options: ManagerOptions,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
    ) -> None:
        self._options = options
        self._transport = transport
        self._dry_run = dry_run
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        config = self._options.request
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        body: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Make one HTTP request and map error statuses to exceptions.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: URL path appended to the configured ``base_url``.
            params: Query parameters.
            headers: Extra request headers, overriding the defaults.
            json_body: JSON-serialisable body (sets Content-Type automatically).
            body: Raw string body.
            data: Form-encoded body (application/x-www-form-urlencoded).

        Returns:
            The :class:`httpx.Response` from the server.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On 5xx.
            RequestError: On any other non-2xx status.
            ConnectionError_: On network, timeout, redirect or decoding errors.
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

        assert self._client is not None, "Client not initialised -- use as context manager"

        output = get_output()
        output.debug(f"{method} {url}")
        try:
            response = self._client.request(
                **build_request_kwargs(
                    method, url, merged_headers, merged_params, json_body, body, data,
                )
            )
        except httpx.RequestError as exc:
            raise connection_error(method, url, exc) from exc

        output.debug(f"HTTP {response.status_code} {method} {url}")
        map_response_error(response, method, url)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)
