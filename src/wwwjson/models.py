"""Canonical Pydantic models shared across all wwwjson modules.

The models fall into three groups:

**Client configuration** -- owned by one :class:`~wwwjson.client.JSONClient`
and re-validated on every assignment:
    :class:`PostBodyFormat` and :class:`ClientConfig`.

**Per-request data** -- built for a single call and discarded after dispatch:
    :class:`HTTPMethod`, :class:`RequestSpec`, and :class:`RawResponse`.

**Credential and settings payloads** -- validated when an authentication
strategy is created or a settings file is loaded:
    :class:`BasicCredentials`, :class:`OAuth1Credentials`,
    :class:`OAuth2Token`, :class:`AuthSettings`, and :class:`ClientSettings`.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Literal, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the client knows how to dispatch.

    Anything else is rejected with
    :class:`~wwwjson.exceptions.InvalidUsageError` before the transport is
    touched.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class PostBodyFormat(str, enum.Enum):
    """How request bodies are serialised for POST and PUT.

    ``SERIALIZED`` hands the parameters to the transport as a form-encoded
    body (Facebook, Foursquare). ``JSON_ENCODED`` sends them as a JSON
    document with ``Content-Type: application/json`` (GitHub, Google+).
    """

    SERIALIZED = "serialized"
    JSON_ENCODED = "json-encoded"


# --- Client configuration ---


def coerce_base_url(value: Any) -> httpx.URL:
    """Turn a base URL value into a normalised :class:`httpx.URL`.

    Accepts a string, an :class:`httpx.URL`, or a ``(url, params)`` pair in
    which *params* replaces any query string already present on *url*. The
    result is always absolute and its path always ends with ``/`` so that
    relative request paths resolve underneath it.

    Raises:
        ValueError: If the value cannot be parsed or is not absolute.
    """
    try:
        if isinstance(value, (tuple, list)):
            if len(value) != 2:
                raise ValueError(
                    "base_url pair must be (url, query_params), "
                    f"got {len(value)} items"
                )
            raw_url, params = value
            try:
                params = dict(params or {})
            except (TypeError, ValueError) as exc:
                raise ValueError(f"base_url query params must be a mapping: {exc}") from None
            url = httpx.URL(str(raw_url)).copy_with(params=params)
        elif isinstance(value, httpx.URL):
            url = value
        elif isinstance(value, str):
            url = httpx.URL(value)
        else:
            raise ValueError(
                f"base_url must be a string, URL or (url, params) pair, "
                f"got {type(value).__name__}"
            )
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid base_url: {exc}") from exc

    if not url.is_absolute_url:
        raise ValueError(f"base_url must be an absolute URL, got '{url}'")

    # Work on the raw path so percent-escapes such as %2F survive.
    path, sep, query = url.raw_path.decode("ascii").partition("?")
    if not path.endswith("/"):
        url = url.copy_with(raw_path=f"{path}/{sep}{query}".encode("ascii"))
    return url


class ClientConfig(BaseModel):
    """Configuration owned by a single :class:`~wwwjson.client.JSONClient`.

    ``validate_assignment`` is enabled, so an invalid value is rejected at
    the moment it is assigned rather than when the next request is made.

    Example::

        config = ClientConfig(
            base_url=("https://api.example.com/v1", {"key": "abc"}),
            post_body_format="json-encoded",
        )
        assert str(config.base_url) == "https://api.example.com/v1/?key=abc"
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    base_url: httpx.URL = Field(
        description="Root URL; its query parameters are sent on every request"
    )
    body_params: dict[str, Any] = Field(
        default_factory=dict,
        description="Parameters merged under every POST/PUT body",
    )
    post_body_format: Optional[PostBodyFormat] = Field(
        default=PostBodyFormat.SERIALIZED,
        description="Body serialisation; None behaves as 'serialized'",
    )
    default_response_transform: Optional[Callable[[Any], Any]] = Field(
        default=None,
        description="Applied to the decoded JSON of successful responses only",
    )
    auth_type: Optional[str] = Field(
        default=None, description="Name of the active authentication strategy"
    )
    auth_credentials: Any = Field(
        default=None, description="Credential payload handed to the strategy"
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: Any) -> httpx.URL:
        return coerce_base_url(value)

    @property
    def body_format(self) -> PostBodyFormat:
        """The effective body format, treating a cleared value as ``serialized``."""
        return self.post_body_format or PostBodyFormat.SERIALIZED


# --- Per-request data ---


class RequestSpec(BaseModel):
    """A fully resolved request, ready for serialisation and dispatch.

    Built by :func:`~wwwjson.client.resolver.resolve_request`, possibly
    replaced by an authentication strategy via :meth:`model_copy`, and
    discarded once the transport returns.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    method: HTTPMethod
    url: httpx.URL
    body_params: Optional[dict[str, Any]] = None
    body_format: PostBodyFormat = PostBodyFormat.SERIALIZED
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def query_params(self) -> httpx.QueryParams:
        """The merged query string of :attr:`url`."""
        return self.url.params

    @property
    def has_body(self) -> bool:
        """Whether a body will be sent (a body method with at least one parameter)."""
        return bool(self.body_params)


class RawResponse(BaseModel):
    """Transport-neutral result of a single HTTP round trip.

    ``ok`` is about the transport only: it is ``True`` whenever a response
    was received, whatever its status code, and ``False`` when the request
    never completed (connection refused, DNS failure, timeout). In the
    latter case ``status_code`` is ``None`` and ``error_type`` /
    ``error_message`` describe the fault.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    status_code: Optional[int] = None
    reason: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""
    url: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, with undecodable bytes replaced."""
        return self.content.decode("utf-8", errors="replace")


# --- Credential payloads ---


class BasicCredentials(BaseModel):
    """Credentials for HTTP Basic authentication."""

    model_config = ConfigDict(extra="forbid")

    username: str
    password: str


class OAuth1Credentials(BaseModel):
    """Consumer and token credentials for OAuth 1.0a request signing.

    ``token`` and ``token_secret`` may be omitted for two-legged requests
    that are signed with the consumer credentials alone.
    """

    model_config = ConfigDict(extra="forbid")

    consumer_key: str
    consumer_secret: str
    token: Optional[str] = None
    token_secret: Optional[str] = None


class OAuth2Token(BaseModel):
    """An OAuth2 access token and where to put it on outgoing requests."""

    access_token: str
    token_type: str = Field(default="Bearer", description="Authorization scheme")
    location: Literal["header", "query"] = Field(
        default="header", description="Send the token as a header or a query parameter"
    )
    param_name: str = Field(
        default="access_token", description="Query parameter name for location='query'"
    )


# --- Settings files ---


class AuthSettings(BaseModel):
    """The ``authentication`` section of a settings file.

    Credential values written as ``env:VAR``, ``file:/path`` or ``prompt``
    are resolved by :func:`~wwwjson.config.resolve_credentials` when the
    client is built.

    Example::

        AuthSettings(
            type="Basic",
            credentials={"username": "antipasta", "password": "env:API_PASSWORD"},
        )
    """

    type: str = Field(description="Strategy name: Basic, OAuth1, OAuth2, None")
    credentials: Union[dict[str, Any], str] = Field(default_factory=dict)


class ClientSettings(BaseModel):
    """Client settings loaded from a JSON settings file or CLI flags.

    See :func:`~wwwjson.config.resolve_settings` for the precedence chain
    and :func:`~wwwjson.config.build_client` for turning settings into a
    client.
    """

    model_config = ConfigDict(extra="forbid")

    base_url: Optional[str] = None
    base_params: dict[str, Any] = Field(
        default_factory=dict, description="Query parameters sent on every request"
    )
    body_params: dict[str, Any] = Field(default_factory=dict)
    post_body_format: PostBodyFormat = PostBodyFormat.SERIALIZED
    authentication: Optional[AuthSettings] = None
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
