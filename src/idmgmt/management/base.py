"""Base class shared by all resource managers.

:class:`BaseManager` validates the caller's options once, synchronously,
before any network activity, and hands out endpoint-bound
:class:`~idmgmt.client.rest_client.RestResource` objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from idmgmt.client.rest_client import RestResource
from idmgmt.exceptions import ArgumentError
from idmgmt.models import ManagerOptions

_BASE_URL_KEYS = ("base_url", "baseUrl")


def validate_options(options: Union[ManagerOptions, Mapping[str, Any], None]) -> ManagerOptions:
    """Turn caller-supplied options into a validated :class:`ManagerOptions`.

    Raises:
        ArgumentError: If *options* is missing, carries no base URL, the base
            URL is not an absolute ``http``/``https`` URL, or any other field
            fails validation.
    """
    if options is None:
        raise ArgumentError("Must provide manager options")

    if isinstance(options, ManagerOptions):
        base_url: Optional[str] = options.base_url
    elif isinstance(options, Mapping):
        key = next((k for k in _BASE_URL_KEYS if k in options), None)
        if key is None:
            raise ArgumentError("Must provide a base URL for the API")
        base_url = options[key]
    else:
        raise ArgumentError("Must provide manager options")

    if not _is_valid_base_url(base_url):
        raise ArgumentError("The provided base URL is invalid")

    if isinstance(options, ManagerOptions):
        return options
    try:
        return ManagerOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ArgumentError(f"Invalid manager options: {exc}") from exc


def _is_valid_base_url(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return url.scheme in ("http", "https") and bool(url.host)


class BaseManager:
    """Common constructor and REST plumbing for resource managers.

    Args:
        options: A :class:`~idmgmt.models.ManagerOptions` or a mapping with
            ``base_url`` (or ``baseUrl``), and optionally ``headers``,
            ``token`` and ``request``.
        transport: Optional :mod:`httpx` transport for the blocking calls.
        dry_run: Print requests instead of sending them.
        async_transport: Optional transport for the awaitable calls.  When
            omitted, *transport* is reused if it also supports async I/O.

    Raises:
        ArgumentError: See :func:`validate_options`.
    """

    def __init__(
        self,
        options: Union[ManagerOptions, Mapping[str, Any], None] = None,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.options = validate_options(options)
        self._transport = transport
        self._async_transport = async_transport
        self._dry_run = dry_run

    def _get_rest_client(self, path: str) -> RestResource:
        return RestResource(
            self.options,
            path,
            transport=self._transport,
            dry_run=self._dry_run,
            async_transport=self._async_transport,
        )
