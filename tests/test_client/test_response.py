"""Tests for the response helpers."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx

from idmgmt.client.response import extract_response_data, format_api_response
from idmgmt.output import OutputManager, set_output


def _make_response(
    status_code: int = 200,
    content: bytes | None = None,
    json_data: object | None = None,
    text: str | None = None,
) -> httpx.Response:
    request = httpx.Request("POST", "https://api.example.com/device/verify")
    if json_data is not None:
        return httpx.Response(status_code=status_code, json=json_data, request=request)
    if text is not None:
        return httpx.Response(status_code=status_code, text=text, request=request)
    return httpx.Response(status_code=status_code, content=content or b"", request=request)


class TestFormatApiResponse:
    def test_json_body_goes_to_format_response(self) -> None:
        mock_output = MagicMock(spec=OutputManager)
        set_output(mock_output)

        format_api_response(_make_response(200, json_data={"user_code": "ABCD-EFGH"}))

        assert "200" in mock_output.info.call_args_list[0].args[0]
        mock_output.format_response.assert_called_once_with({"user_code": "ABCD-EFGH"})

    def test_empty_body_prints_only_status(self) -> None:
        mock_output = MagicMock(spec=OutputManager)
        set_output(mock_output)

        format_api_response(_make_response(204))

        assert mock_output.info.call_args.args[0] == "HTTP 204 No Content"
        mock_output.format_response.assert_not_called()


class TestExtractResponseData:
    def test_json_object(self) -> None:
        data = extract_response_data(_make_response(json_data={"key": "value", "nested": {"a": 1}}))
        assert data == {"key": "value", "nested": {"a": 1}}

    def test_json_list(self) -> None:
        assert extract_response_data(_make_response(json_data=[1, 2, 3])) == [1, 2, 3]

    def test_json_scalar(self) -> None:
        assert extract_response_data(_make_response(content=b"true")) is True

    def test_fallback_to_text(self) -> None:
        assert extract_response_data(_make_response(text="This is not JSON")) == "This is not JSON"

    def test_empty_body_returns_none(self) -> None:
        assert extract_response_data(_make_response(204)) is None

    def test_malformed_json_falls_back_to_text(self) -> None:
        data = extract_response_data(_make_response(content=b'{"broken": json'))
        assert data == '{"broken": json'
