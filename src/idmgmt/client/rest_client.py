"""Endpoint-bound REST resource used by the managers.

A :class:`RestResource` is bound to one path (``/device/verify``) and turns
``create`` calls into a single POST.  It implements the two calling
conventions managers expose:

* **return / raise** -- without a callback, ``create`` returns the decoded
  response body and raises :class:`~idmgmt.exceptions.RequestError` on
  failure; ``acreate`` does the same as a coroutine.
* **callback** -- with a callback, the outcome is delivered as
  ``callback(error, result)`` exactly once and the call returns ``None``.
  Only :class:`~idmgmt.exceptions.RequestError` is delivered this way;
  anything else still propagates.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from idmgmt.client.async_client import AsyncClient
from idmgmt.client.response import extract_response_data
from idmgmt.client.sync_client import SyncClient
from idmgmt.exceptions import RequestError
from idmgmt.models import ManagerOptions

Callback = Callable[[Optional[RequestError], Any], Any]


class RestResource:
    """One REST endpoint of the management API.

    Args:
        options: Validated manager options.
        path: Endpoint path relative to ``options.base_url``.
        transport: Optional :mod:`httpx` transport for :meth:`create`.  It is
            reused by :meth:`acreate` only when it is also an
            :class:`httpx.AsyncBaseTransport` (as :class:`httpx.MockTransport`
            is).
        async_transport: Optional transport for :meth:`acreate`; overrides
            the reuse of *transport*.
        dry_run: Forwarded to the HTTP clients.
    """

    def __init__(
        self,
        options: ManagerOptions,
        path: str,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._options = options
        self._path = path
        self._transport = transport
        if async_transport is None and isinstance(transport, httpx.AsyncBaseTransport):
            async_transport = transport
        self._async_transport = async_transport
        self._dry_run = dry_run

    @property
    def path(self) -> str:
        return self._path

    def create(self, data: Any = None, callback: Optional[Callback] = None) -> Any:
        """POST *data* to the endpoint.

        A callable passed as the only argument is taken as the callback and
        the request is sent without a body: ``create(done)``.

        Returns:
            The decoded response body, or ``None`` when a callback is given.
        """
        data, callback = _split_args(data, callback)
        try:
            with SyncClient(self._options, self._transport, self._dry_run) as client:
                response = client.post(self._path, json_body=data)
        except RequestError as exc:
            if callback is None:
                raise
            callback(exc, None)
            return None
        return _deliver(response, callback)

    async def acreate(self, data: Any = None, callback: Optional[Callback] = None) -> Any:
        """Awaitable counterpart of :meth:`create`."""
        data, callback = _split_args(data, callback)
        try:
            async with AsyncClient(self._options, self._async_transport, self._dry_run) as client:
                response = await client.post(self._path, json_body=data)
        except RequestError as exc:
            if callback is None:
                raise
            callback(exc, None)
            return None
        return _deliver(response, callback)


def _split_args(data: Any, callback: Optional[Callback]) -> tuple[Any, Optional[Callback]]:
    if callback is None and callable(data):
        return None, data
    return data, callback


def _deliver(response: httpx.Response, callback: Optional[Callback]) -> Any:
    result = extract_response_data(response)
    if callback is None:
        return result
    callback(None, result)
    return None
