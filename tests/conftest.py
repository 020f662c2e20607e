"""Shared test fixtures for wwwjson.

Provides reusable fixtures for isolating settings files, managing output
state, recording requests sent through an :class:`httpx.MockTransport`,
and running CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from wwwjson.client.transport import HttpxTransport
from wwwjson.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test the cached references go stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Request recording
# ---------------------------------------------------------------------------


class RecordingHandler:
    """MockTransport handler that records requests and replies with a canned response.

    Attributes:
        requests: Every :class:`httpx.Request` received, in order.
    """

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content, headers=self.headers)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)
        return httpx.Response(self.status_code, headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_transport(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxTransport:
    """Wrap *handler* in an :class:`HttpxTransport` backed by a mock httpx client."""
    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


@pytest.fixture
def recorder() -> RecordingHandler:
    """A handler replying ``200 {"ok": true}``."""
    return RecordingHandler(json_body={"ok": True})


@pytest.fixture
def make_handler() -> type[RecordingHandler]:
    """Factory for handlers with a custom canned response."""
    return RecordingHandler


@pytest.fixture
def transport_for() -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpxTransport]:
    """Factory wrapping a handler in a mock-backed :class:`HttpxTransport`."""
    return make_transport


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME into tmp_path, forces XDG path handling, clears
    all WWWJSON_* environment variables and changes the working directory
    to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("wwwjson.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in ["WWWJSON_CONFIG", "WWWJSON_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
