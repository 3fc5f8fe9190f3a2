"""Pydantic models shared across idmgmt.

**Connection models** -- handed to managers and HTTP clients:
    :class:`RequestConfig` and :class:`ManagerOptions`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RequestConfig(BaseModel):
    """HTTP request settings applied to every call made by a manager."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ManagerOptions(BaseModel):
    """Options accepted by :class:`~idmgmt.management.base.BaseManager`.

    ``base_url`` is the API root that endpoint paths such as
    ``/device/verify`` are appended to.  ``headers`` are sent with every
    request.  When ``token`` is set, an ``Authorization: Bearer <token>``
    header is added unless ``headers`` already carries one.

    Example::

        ManagerOptions(
            base_url="https://tenant.example.com/api/v2",
            token="eyJhbGciOi...",
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(
        validation_alias=AliasChoices("base_url", "baseUrl"),
        description="Root URL of the management API",
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers included in all requests"
    )
    token: Optional[str] = Field(
        default=None, description="Bearer token for the Authorization header"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/idmgmt/config.json``.

    Loaded and saved by :func:`~idmgmt.config.load_global_config` and
    :func:`~idmgmt.config.save_global_config`.  Fields here have the
    lowest precedence; see :func:`~idmgmt.config.resolve_config` for the
    full chain.
    """

    base_url: Optional[str] = Field(
        default=None, description="Root URL of the management API"
    )
    token_source: Optional[str] = Field(
        default=None,
        description="Where to read the bearer token: env:VAR, file:/path, prompt",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
