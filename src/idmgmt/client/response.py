"""Response helpers -- map :class:`httpx.Response` to plain Python values.

:func:`extract_response_data` is what managers hand back to callers: the
body passed through unchanged, decoded from JSON when possible.
:func:`format_api_response` routes the same value to the output system for
the CLI.

See Also:
    :mod:`idmgmt.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

import httpx

from idmgmt.output import get_output


def format_api_response(response: httpx.Response) -> None:
    """Print the status line to stderr and the decoded body to stdout.

    Empty bodies (e.g. ``204 No Content``) produce only the status line.

    Args:
        response: The :class:`httpx.Response` to display.
    """
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())

    data = extract_response_data(response)
    if data is not None:
        output.format_response(data)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. the
    response is HTML or plain text), returns the raw text.  Returns
    ``None`` for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
