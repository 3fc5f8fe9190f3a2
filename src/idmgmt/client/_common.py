"""Request plumbing shared by :class:`SyncClient` and :class:`AsyncClient`.

Both clients build headers, map error statuses and render dry-run previews
the same way; only the I/O differs.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from idmgmt.client.response import extract_response_data
from idmgmt.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    RequestError,
    ServerError,
)
from idmgmt.models import ManagerOptions
from idmgmt.output import get_output

_REDACTED = "***"
_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "proxy-authorization"})


def build_default_headers(options: ManagerOptions) -> dict[str, str]:
    """Return the headers sent with every request for *options*.

    The bearer token is applied first so that an explicit ``Authorization``
    entry in ``options.headers`` (any casing) overrides it.
    """
    headers: dict[str, str] = {"Accept": "application/json"}
    if options.token and not any(k.lower() == "authorization" for k in options.headers):
        headers["Authorization"] = f"Bearer {options.token}"
    headers.update(options.headers)
    return headers


def join_url(base_url: str, path: str) -> str:
    """Append *path* to the path of *base_url* with exactly one slash between them.

    A query string on *base_url* is kept and stays after the joined path.
    """
    if not path:
        return base_url
    url = httpx.URL(base_url)
    return str(url.copy_with(path=f"{url.path.rstrip('/')}/{path.lstrip('/')}"))


def build_request_kwargs(
    method: str,
    url: str,
    headers: dict[str, str],
    params: dict[str, Any],
    json_body: Any,
    body: Optional[str],
    data: Optional[dict[str, Any]],
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "method": method,
        "url": url,
        "headers": headers,
        "params": params,
    }
    if data is not None:
        kwargs["data"] = data
    elif json_body is not None:
        kwargs["json"] = json_body
    elif body is not None:
        kwargs["content"] = body
    return kwargs


def connection_error(method: str, url: str, exc: httpx.RequestError) -> ConnectionError_:
    return ConnectionError_(
        f"Connection failed: {exc}",
        method=method,
        url=url,
    )


def map_response_error(response: httpx.Response, method: str, url: str) -> None:
    """Raise a typed :class:`RequestError` for any non-2xx status.

    Redirects that were not followed (a 304, or a 3xx without ``Location``)
    are errors too.
    """
    status = response.status_code
    if response.is_success:
        return

    body = extract_response_data(response)
    if isinstance(body, dict):
        msg = (
            body.get("message")
            or body.get("error_description")
            or body.get("error")
            or body.get("detail")
            or ""
        )
    elif body is None:
        msg = ""
    else:
        msg = str(body)[:200]

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    exc_type: type[RequestError]
    if status in (401, 403):
        exc_type = AuthError
    elif status == 404:
        exc_type = NotFoundError
    elif status >= 500:
        exc_type = ServerError
    else:
        exc_type = RequestError
    raise exc_type(full_msg, status_code=status, body=body, method=method, url=url)


def dry_run_response(
    method: str,
    url: str,
    headers: dict[str, str],
    params: dict[str, Any],
    json_body: Any,
    body: Optional[str],
    data: Optional[dict[str, Any]],
) -> httpx.Response:
    """Print the request to stderr and return a synthetic 200 response."""
    output = get_output()
    output.info(f"(dry-run) {method} {url}")

    for key, value in headers.items():
        shown = _REDACTED if key.lower() in _SENSITIVE_HEADERS else value
        output.info(f"  Header: {key}: {shown}")

    for key, value in params.items():
        output.info(f"  Param: {key}={value}")

    if data is not None:
        output.info(f"  Body (form): {json.dumps(data, indent=2)}")
    elif json_body is not None:
        output.info(f"  Body (JSON): {json.dumps(json_body, indent=2)}")
    elif body is not None:
        output.info(f"  Body: {body}")

    return httpx.Response(
        status_code=200,
        headers={"content-type": "application/json"},
        json={"dry_run": True, "message": "Request was not sent"},
        request=httpx.Request(method=method, url=url),
    )
