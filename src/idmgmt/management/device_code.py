"""Device code resource: verify and activate codes of the device-authorization grant."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from idmgmt.client.rest_client import Callback
from idmgmt.management.base import BaseManager
from idmgmt.models import ManagerOptions

VERIFY_PATH = "/device/verify"
ACTIVATE_PATH = "/device/activate"


class DeviceCodeManager(BaseManager):
    """Manages device codes.

    Every method performs exactly one POST and passes the response body
    through unchanged.  Without a callback the blocking methods return the
    body and raise :class:`~idmgmt.exceptions.RequestError` on failure;
    with a callback they call ``callback(error, result)`` and return
    ``None``.  The ``a``-prefixed methods are the awaitable counterparts.

    Example::

        device_code = DeviceCodeManager({
            "base_url": "https://tenant.example.com/api/v2",
            "token": token,
        })

        def done(err, result):
            if err:
                ...  # handle error
            # device code approved

        device_code.activate(
            {"user_code": "ABCD-EFGH", "subject_token": access_token},
            callback=done,
        )
    """

    def __init__(
        self,
        options: Union[ManagerOptions, Mapping[str, Any], None] = None,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            options, transport=transport, dry_run=dry_run, async_transport=async_transport,
        )
        self.verify_device = self._get_rest_client(VERIFY_PATH)
        self.activate_device = self._get_rest_client(ACTIVATE_PATH)

    def verify(self, data: Any = None, callback: Optional[Callback] = None) -> Any:
        """Verify a device code.

        Args:
            data: The device data object, sent as the JSON body.  A callable
                given here with no *callback* is used as the callback.
            callback: Optional ``callback(error, result)``.

        Returns:
            Information about the device code, or ``None`` with a callback.
        """
        return self.verify_device.create(data, callback)

    def activate(self, params: Any = None, callback: Optional[Callback] = None) -> Any:
        """Activate (approve) a device code.

        Args:
            params: Activation parameters, typically ``user_code`` and
                ``subject_token``.
            callback: Optional ``callback(error, result)``.

        Returns:
            The response body (``None`` for an empty 204), or ``None`` with
            a callback.
        """
        return self.activate_device.create(params, callback)

    async def averify(self, data: Any = None, callback: Optional[Callback] = None) -> Any:
        """Verify a device code without blocking; see :meth:`verify`."""
        return await self.verify_device.acreate(data, callback)

    async def aactivate(self, params: Any = None, callback: Optional[Callback] = None) -> Any:
        """Activate a device code without blocking; see :meth:`activate`."""
        return await self.activate_device.acreate(params, callback)
