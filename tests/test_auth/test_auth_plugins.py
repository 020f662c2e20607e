"""Tests for AuthManager and the Basic and OAuth2 strategies."""

from __future__ import annotations

import base64
from types import SimpleNamespace
from typing import Any, ClassVar
from unittest.mock import MagicMock

import httpx
import pytest

from wwwjson.auth.base import AuthStrategy, NoAuth
from wwwjson.auth.manager import AuthManager, create_default_manager
from wwwjson.exceptions import ConfigError
from wwwjson.models import HTTPMethod, OAuth2Token, RequestSpec
from wwwjson.plugins.basic import BasicAuth
from wwwjson.plugins.oauth1 import OAuth1Auth
from wwwjson.plugins.oauth2 import OAuth2Auth


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _request(url: str = "https://api.example.com/x?a=1", **kwargs: Any) -> RequestSpec:
    return RequestSpec(method=kwargs.pop("method", HTTPMethod.GET), url=httpx.URL(url), **kwargs)


class _HeaderAuth(AuthStrategy):
    auth_type: ClassVar[str] = "Header"

    @classmethod
    def from_credentials(cls, credentials: Any) -> _HeaderAuth:
        return cls()

    def augment(self, request: RequestSpec) -> RequestSpec:
        return request


# ---------------------------------------------------------------------------
# NoAuth
# ---------------------------------------------------------------------------


class TestNoAuth:
    def test_returns_request_unchanged(self) -> None:
        request = _request()
        assert NoAuth().augment(request) is request

    def test_ignores_credentials(self) -> None:
        assert isinstance(NoAuth.from_credentials({"anything": 1}), NoAuth)


# ---------------------------------------------------------------------------
# Basic
# ---------------------------------------------------------------------------


class TestBasicAuth:
    def test_header(self) -> None:
        request = BasicAuth("user", "pass").augment(_request())
        expected = base64.b64encode(b"user:pass").decode()
        assert request.headers == {"Authorization": f"Basic {expected}"}

    def test_url_untouched(self) -> None:
        request = _request()
        assert BasicAuth("u", "p").augment(request).url == request.url

    def test_original_request_not_mutated(self) -> None:
        request = _request()
        BasicAuth("u", "p").augment(request)
        assert request.headers == {}

    def test_from_credentials(self) -> None:
        auth = BasicAuth.from_credentials({"username": "u", "password": "p"})
        assert (auth.username, auth.password) == ("u", "p")

    def test_missing_password(self) -> None:
        with pytest.raises(ConfigError, match="Invalid credentials for Basic"):
            BasicAuth.from_credentials({"username": "u"})

    def test_unexpected_field(self) -> None:
        with pytest.raises(ConfigError):
            BasicAuth.from_credentials({"username": "u", "password": "p", "realm": "x"})


# ---------------------------------------------------------------------------
# OAuth2
# ---------------------------------------------------------------------------


class TestOAuth2Auth:
    def test_string_token_header(self) -> None:
        request = OAuth2Auth.from_credentials("tok").augment(_request())
        assert request.headers["Authorization"] == "Bearer tok"

    def test_lowercase_bearer_normalised(self) -> None:
        auth = OAuth2Auth.from_credentials({"access_token": "tok", "token_type": "bearer"})
        assert auth.augment(_request()).headers["Authorization"] == "Bearer tok"

    def test_custom_scheme_kept(self) -> None:
        auth = OAuth2Auth.from_credentials({"access_token": "tok", "token_type": "MAC"})
        assert auth.augment(_request()).headers["Authorization"] == "MAC tok"

    def test_query_location(self) -> None:
        auth = OAuth2Auth.from_credentials({"access_token": "tok", "location": "query"})
        request = auth.augment(_request())
        assert request.url.params["access_token"] == "tok"
        assert request.url.params["a"] == "1"
        assert "Authorization" not in request.headers

    def test_query_param_name(self) -> None:
        auth = OAuth2Auth(OAuth2Token(access_token="tok", location="query", param_name="oauth_token"))
        assert auth.augment(_request()).url.params["oauth_token"] == "tok"

    def test_token_object(self) -> None:
        token = SimpleNamespace(access_token="tok", token_type="bearer")
        auth = OAuth2Auth.from_credentials(token)
        assert auth.augment(_request()).headers["Authorization"] == "Bearer tok"

    def test_object_without_token(self) -> None:
        with pytest.raises(ConfigError):
            OAuth2Auth.from_credentials(object())

    def test_missing_token(self) -> None:
        with pytest.raises(ConfigError):
            OAuth2Auth.from_credentials({})

    def test_model_instance(self) -> None:
        token = OAuth2Token(access_token="tok")
        assert OAuth2Auth.from_credentials(token).token is token


# ---------------------------------------------------------------------------
# AuthManager
# ---------------------------------------------------------------------------


class TestAuthManager:
    def test_default_types(self) -> None:
        assert create_default_manager().list_types() == ["Basic", "None", "OAuth1", "OAuth2"]

    def test_names_case_insensitive(self) -> None:
        manager = create_default_manager()
        assert manager.get_strategy_class("basic") is BasicAuth
        assert manager.get_strategy_class("OAUTH1") is OAuth1Auth
        assert manager.get_strategy_class("none") is NoAuth

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigError, match="Available strategies: Basic, None, OAuth1, OAuth2"):
            create_default_manager().create("Digest", {})

    def test_create_validates_credentials(self) -> None:
        with pytest.raises(ConfigError):
            create_default_manager().create("OAuth1", {"consumer_key": "k"})

    def test_register_custom_strategy(self) -> None:
        manager = AuthManager()
        manager.register(_HeaderAuth)
        assert manager.list_types() == ["Header"]
        assert isinstance(manager.create("header"), _HeaderAuth)

    def test_register_requires_auth_type(self) -> None:
        class Nameless(_HeaderAuth):
            auth_type: ClassVar[str] = ""

        with pytest.raises(ConfigError):
            AuthManager().register(Nameless)


class TestDiscover:
    def _entry_point(self, name: str, loaded: Any = None, error: Exception | None = None) -> MagicMock:
        ep = MagicMock()
        ep.name = name
        ep.value = f"thirdparty:{name}"
        if error is not None:
            ep.load.side_effect = error
        else:
            ep.load.return_value = loaded
        return ep

    def test_registers_strategies(self, monkeypatch: pytest.MonkeyPatch) -> None:
        eps = [self._entry_point("header", _HeaderAuth)]
        monkeypatch.setattr(
            "wwwjson.auth.manager.importlib.metadata.entry_points", lambda group: eps
        )
        manager = AuthManager()
        assert manager.discover() == ["Header"]
        assert manager.get_strategy_class("header") is _HeaderAuth

    def test_skips_broken_entry_points(self, monkeypatch: pytest.MonkeyPatch) -> None:
        eps = [
            self._entry_point("broken", error=ImportError("no module")),
            self._entry_point("wrong", loaded=object),
            self._entry_point("header", _HeaderAuth),
        ]
        monkeypatch.setattr(
            "wwwjson.auth.manager.importlib.metadata.entry_points", lambda group: eps
        )
        assert AuthManager().discover() == ["Header"]
