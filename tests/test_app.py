"""Tests for the wwwjson CLI."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from wwwjson import __version__
from wwwjson.app import app, make_unwrap_transform, parse_data
from wwwjson.config import build_client
from wwwjson.exceptions import InvalidUsageError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def wired(monkeypatch: pytest.MonkeyPatch, isolated_config: Path, transport_for):
    """Route every CLI request through a mock handler.

    Returns a function that installs *handler* and returns it.
    """

    def _install(handler):
        def _build(settings, transform=None):
            return build_client(settings, transform, transport=transport_for(handler))

        monkeypatch.setattr("wwwjson.app.build_client", _build)
        return handler

    return _install


def _invoke(cli_runner, *args: str):
    return cli_runner.invoke(app, ["--no-color", *args])


# ---------------------------------------------------------------------------
# Helpers under test
# ---------------------------------------------------------------------------


class TestParseData:
    def test_pairs(self) -> None:
        assert parse_data(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}

    def test_repeated_keys_become_list(self) -> None:
        assert parse_data(["t=1", "t=2", "t=3"]) == {"t": ["1", "2", "3"]}

    def test_empty_value_allowed(self) -> None:
        assert parse_data(["a="]) == {"a": ""}

    def test_none(self) -> None:
        assert parse_data(None) == {}

    @pytest.mark.parametrize("item", ["novalue", "=x"])
    def test_malformed(self, item: str) -> None:
        with pytest.raises(InvalidUsageError):
            parse_data([item])


class TestUnwrapTransform:
    def test_dotted_path(self) -> None:
        assert make_unwrap_transform("data.0")({"data": [{"id": 1}]}) == {"id": 1}

    def test_missing_key(self) -> None:
        with pytest.raises(InvalidUsageError, match="not found"):
            make_unwrap_transform("data.name")({"data": {}})


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestVersion:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestVerbCommands:
    def test_get(self, cli_runner, wired, make_handler) -> None:
        handler = wired(make_handler(json_body={"name": "mark"}))
        result = _invoke(
            cli_runner, "-q", "--json", "--base-url", "https://graph.facebook.com",
            "get", "/zuckerberg", "-d", "fields=name",
        )
        assert result.exit_code == 0, result.output
        assert str(handler.last.url) == "https://graph.facebook.com/zuckerberg?fields=name"
        assert json.loads(result.stdout) == {"name": "mark"}

    def test_post_json_body(self, cli_runner, wired, recorder) -> None:
        wired(recorder)
        result = _invoke(
            cli_runner, "--json", "--json-body", "--base-url", "https://api.github.com",
            "post", "/user/repos", "-d", "name=demo",
        )
        assert result.exit_code == 0, result.output
        assert recorder.last.method == "POST"
        assert json.loads(recorder.last.content) == {"name": "demo"}

    def test_settings_file(self, cli_runner, wired, recorder, isolated_config: Path) -> None:
        wired(recorder)
        (isolated_config / "wwwjson.json").write_text(
            json.dumps(
                {
                    "base_url": "https://api.example.com/v1",
                    "base_params": {"key": "abc"},
                    "body_params": {"app": "demo"},
                }
            ),
            encoding="utf-8",
        )
        result = _invoke(cli_runner, "--json", "put", "items/1", "-d", "name=a")
        assert result.exit_code == 0, result.output
        assert recorder.last.url.params["key"] == "abc"
        assert recorder.last.content == b"app=demo&name=a"

    def test_unwrap(self, cli_runner, wired, make_handler) -> None:
        wired(make_handler(json_body={"data": [{"id": 7}]}))
        result = _invoke(
            cli_runner, "-q", "--json", "--unwrap", "data.0", "--base-url", "https://api.example.com",
            "get", "x",
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"id": 7}

    def test_delete_and_head(self, cli_runner, wired, make_handler) -> None:
        handler = wired(make_handler(status_code=204))
        for verb in ["delete", "head"]:
            result = _invoke(cli_runner, "--base-url", "https://api.example.com", verb, "x/1")
            assert result.exit_code == 0, result.output
            assert handler.last.method == verb.upper()

    def test_http_error_exit_code(self, cli_runner, wired, make_handler, isolated_config: Path) -> None:
        wired(make_handler(status_code=404, json_body={"error": "missing"}))
        target = isolated_config / "out.json"
        result = _invoke(
            cli_runner, "-o", str(target), "--base-url", "https://api.example.com", "get", "x"
        )
        assert result.exit_code == 5
        assert json.loads(target.read_text(encoding="utf-8")) == {"error": "missing"}

    def test_transport_error_exit_code(self, cli_runner, wired) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        wired(handler)
        result = _invoke(cli_runner, "--base-url", "https://api.example.com", "get", "x")
        assert result.exit_code == 6

    def test_missing_base_url(self, cli_runner, wired, recorder) -> None:
        wired(recorder)
        result = _invoke(cli_runner, "get", "x")
        assert result.exit_code == 1
        assert recorder.requests == []

    def test_malformed_data(self, cli_runner, wired, recorder) -> None:
        wired(recorder)
        result = _invoke(cli_runner, "--base-url", "https://api.example.com", "get", "x", "-d", "oops")
        assert result.exit_code == 2
        assert recorder.requests == []
