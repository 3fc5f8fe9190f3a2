"""Shared test fixtures for idmgmt.

Provides fixtures for recording HTTP traffic through
:class:`httpx.MockTransport`, isolating configuration directories, and
running CLI commands.  They are discovered by pytest automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from idmgmt.output import OutputFormat, OutputManager, reset_output, set_output

API_URL = "https://tenant.example.com"
TOKEN = "TOKEN"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    CliRunner swaps sys.stdout/stderr; an OutputManager created during a
    CLI invocation would otherwise keep references to closed streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records every request it handles.

    Responses are produced by *handler*; by default every request gets an
    empty 200.
    """

    def __init__(
        self,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200))
        super().__init__(self._record)

    def _record(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def reply(self, status_code: int, json: Any = None, **kwargs: Any) -> None:
        """Answer all further requests with a fixed response."""
        if json is not None:
            kwargs["json"] = json
        self._handler = lambda request: httpx.Response(status_code, **kwargs)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def manager_options() -> dict[str, Any]:
    return {
        "base_url": API_URL,
        "headers": {"authorization": f"Bearer {TOKEN}"},
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at tmp_path, clears IDMGMT_*
    environment variables and changes into tmp_path so that no project
    config leaks in.
    """
    monkeypatch.setattr("idmgmt.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["IDMGMT_BASE_URL", "IDMGMT_TOKEN_SOURCE", "IDMGMT_TOKEN"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the duration of a test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
