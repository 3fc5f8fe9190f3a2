"""HTTP client module for idmgmt.

Provides synchronous and asynchronous HTTP clients that wrap :mod:`httpx`
with header injection, dry-run mode and typed error mapping, plus the
endpoint-bound :class:`RestResource` the managers delegate to.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.
    :class:`RestResource` -- one endpoint, ``create`` / ``acreate`` with
    optional callbacks.

Example::

    from idmgmt.client import SyncClient

    with SyncClient(options) as client:
        resp = client.post("/device/verify", json_body={"user_code": "ABCD-EFGH"})
"""

from idmgmt.client.async_client import AsyncClient
from idmgmt.client.rest_client import RestResource
from idmgmt.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient", "RestResource"]
