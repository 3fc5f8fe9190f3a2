"""Resource managers for the management API.

:class:`ManagementClient` validates options once and exposes each resource
manager as an attribute::

    management = ManagementClient({"base_url": url, "token": token})
    management.device_code.verify({"user_code": "ABCD-EFGH"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from idmgmt.management.base import BaseManager, validate_options
from idmgmt.management.device_code import DeviceCodeManager
from idmgmt.models import ManagerOptions


class ManagementClient:
    """Entry point grouping the resource managers of one API tenant.

    Args:
        options: Manager options shared by all resources.
        transport: Optional :mod:`httpx` transport for the blocking calls.
        dry_run: Print requests instead of sending them.
        async_transport: Optional transport for the awaitable calls.
    """

    def __init__(
        self,
        options: Union[ManagerOptions, Mapping[str, Any], None] = None,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.options = validate_options(options)
        self.device_code = DeviceCodeManager(
            self.options,
            transport=transport,
            dry_run=dry_run,
            async_transport=async_transport,
        )


__all__ = ["BaseManager", "DeviceCodeManager", "ManagementClient", "validate_options"]
