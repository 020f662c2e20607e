"""The client facade: one method per HTTP verb.

This module provides :class:`JSONClient`. Every call runs the same fixed
pipeline:

1. **Resolve** -- :func:`~wwwjson.client.resolver.resolve_request` joins the
   path to the base URL and routes the parameters to the query string or
   the body depending on the verb.
2. **Authenticate** -- the configured
   :class:`~wwwjson.auth.base.AuthStrategy` attaches its credentials to the
   resolved request.
3. **Serialise** -- :func:`~wwwjson.client.body.serialize_body` encodes the
   body in the configured format.
4. **Dispatch** -- the :class:`~wwwjson.client.transport.Transport` performs
   exactly one blocking round trip.
5. **Wrap** -- the raw result becomes a
   :class:`~wwwjson.client.response.Response`.

Configuration is validated when it is assigned. A client instance is meant
to have a single owner; it does no locking of its own.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from wwwjson.auth.base import AuthStrategy, NoAuth
from wwwjson.auth.manager import AuthManager, create_default_manager
from wwwjson.client.body import serialize_body
from wwwjson.client.resolver import PathLike, resolve_request
from wwwjson.client.response import Response, Transform
from wwwjson.client.transport import HttpxTransport, Transport
from wwwjson.exceptions import ConfigError
from wwwjson.models import ClientConfig, HTTPMethod, PostBodyFormat, RequestSpec
from wwwjson.output import get_output

Params = Optional[Mapping[str, Any]]


def _config_error(exc: ValidationError) -> ConfigError:
    """Flatten a Pydantic validation error into a single :class:`ConfigError`."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
        for err in exc.errors()
    )
    return ConfigError(f"Invalid configuration: {problems}")


def _as_params(value: Any, name: str) -> dict[str, Any]:
    """Copy a parameter mapping, rejecting values that are not one."""
    try:
        return dict(value or {})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {name} must be a mapping ({exc})") from exc


class JSONClient:
    """Client for a JSON web API rooted at one base URL.

    Args:
        base_url: Root URL as a string, an :class:`httpx.URL`, or a
            ``(url, query_params)`` pair. Query parameters on the base URL
            are sent with every request.
        body_params: Parameters merged under the body of every POST and PUT.
        post_body_format: ``"serialized"`` (form encoding, the default) or
            ``"json-encoded"``.
        default_response_transform: Function applied to the decoded JSON of
            successful responses, e.g. ``lambda r: r["data"][0]``.
        authentication: A single ``{strategy_name: credentials}`` pair such
            as ``{"Basic": {"username": "u", "password": "p"}}``, or an
            :class:`~wwwjson.auth.base.AuthStrategy` instance.
        auth_manager: Registry used to resolve strategy names. Defaults to
            :func:`~wwwjson.auth.manager.create_default_manager`.
        transport: A :class:`~wwwjson.client.transport.Transport` or an
            :class:`httpx.Client` to send requests through. When omitted an
            :class:`~wwwjson.client.transport.HttpxTransport` is created and
            closed by :meth:`close`.
        timeout: Request timeout in seconds for the default transport.
        verify_ssl: Verify SSL certificates in the default transport.

    Raises:
        ConfigError: If any configuration value is invalid.

    Example::

        with JSONClient(
            base_url="https://api.github.com",
            post_body_format="json-encoded",
            authentication={"Basic": {"username": "antipasta", "password": "hunter2"}},
        ) as gh:
            r = gh.post("/user/repos", {"name": "demo"})
    """

    def __init__(
        self,
        base_url: Any,
        body_params: Optional[Mapping[str, Any]] = None,
        post_body_format: Union[PostBodyFormat, str, None] = PostBodyFormat.SERIALIZED,
        default_response_transform: Optional[Transform] = None,
        authentication: Union[Mapping[str, Any], AuthStrategy, None] = None,
        auth_manager: Optional[AuthManager] = None,
        transport: Union[Transport, httpx.Client, None] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._auth_manager = auth_manager or create_default_manager()
        try:
            self._config = ClientConfig(
                base_url=base_url,
                body_params=_as_params(body_params, "body_params"),
                post_body_format=post_body_format,
                default_response_transform=default_response_transform,
            )
        except ValidationError as exc:
            raise _config_error(exc) from exc

        self._auth: AuthStrategy = NoAuth()
        if isinstance(authentication, AuthStrategy):
            self._auth = authentication
            self._config.auth_type = authentication.auth_type
        elif authentication is not None:
            if not isinstance(authentication, Mapping) or len(authentication) != 1:
                raise ConfigError(
                    "authentication takes a single {strategy: credentials} pair "
                    "or an AuthStrategy instance"
                )
            (auth_type, credentials), = authentication.items()
            self.set_authentication(auth_type, credentials)

        self._owns_transport = not isinstance(transport, Transport)
        if transport is None:
            transport = HttpxTransport(timeout=timeout, verify=verify_ssl)
        elif isinstance(transport, httpx.Client):
            transport = HttpxTransport(client=transport)
        self._transport: Transport = transport

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> JSONClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self._transport.close()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def auth(self) -> AuthStrategy:
        """The active authentication strategy."""
        return self._auth

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def base_url(self) -> httpx.URL:
        return self._config.base_url

    @base_url.setter
    def base_url(self, value: Any) -> None:
        self._assign("base_url", value)

    @property
    def body_params(self) -> dict[str, Any]:
        return self._config.body_params

    @body_params.setter
    def body_params(self, value: Mapping[str, Any]) -> None:
        self._assign("body_params", _as_params(value, "body_params"))

    def body_param(self, key: str, value: Any) -> None:
        """Add or update a single default body parameter."""
        self._config.body_params[key] = value

    @property
    def post_body_format(self) -> Optional[PostBodyFormat]:
        return self._config.post_body_format

    @post_body_format.setter
    def post_body_format(self, value: Union[PostBodyFormat, str]) -> None:
        self._assign("post_body_format", value)

    def clear_post_body_format(self) -> None:
        """Reset the body format; bodies are then form-encoded."""
        self._config.post_body_format = None

    @property
    def default_response_transform(self) -> Optional[Transform]:
        return self._config.default_response_transform

    @default_response_transform.setter
    def default_response_transform(self, value: Transform) -> None:
        self._assign("default_response_transform", value)

    def clear_default_response_transform(self) -> None:
        self._config.default_response_transform = None

    def set_authentication(self, auth_type: str, credentials: Any = None) -> None:
        """Replace the authentication strategy.

        Raises:
            ConfigError: If *auth_type* is unknown or *credentials* invalid.
        """
        self._auth = self._auth_manager.create(auth_type, credentials)
        self._config.auth_type = self._auth.auth_type
        self._config.auth_credentials = credentials

    def _assign(self, name: str, value: Any) -> None:
        try:
            setattr(self._config, name, value)
        except ValidationError as exc:
            raise _config_error(exc) from exc

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def prepare(self, method: Union[str, HTTPMethod], path: PathLike, params: Params = None) -> RequestSpec:
        """Resolve and authenticate a request without sending it.

        Raises:
            InvalidUsageError: For unsupported methods or unparseable paths.
        """
        request = resolve_request(self._config, method, path, params)
        return self._auth.augment(request)

    def request(self, method: Union[str, HTTPMethod], path: PathLike, params: Params = None) -> Response:
        """Perform one HTTP request and wrap the result.

        For GET, HEAD and DELETE *params* go into the query string; for POST
        and PUT they are merged over :attr:`body_params` into the body.

        Returns:
            A :class:`~wwwjson.client.response.Response`. Network faults,
            HTTP errors and undecodable bodies are reported through
            ``Response.success`` rather than raised.

        Raises:
            InvalidUsageError: For unsupported methods, before any I/O.
        """
        request = self.prepare(method, path, params)
        body = serialize_body(request.body_params, request.body_format)
        headers = {**request.headers, **body.headers}
        url = str(request.url)

        output = get_output()
        output.debug(f"{request.method.value} {url}")
        raw = self._transport.perform(request.method.value, url, headers, body.content)
        response = Response(raw, self._config.default_response_transform)
        output.debug(f"Response: {response.status_line}")
        return response

    def get(self, path: PathLike, params: Params = None) -> Response:
        """Send a GET request; *params* become query parameters."""
        return self.request(HTTPMethod.GET, path, params)

    def post(self, path: PathLike, params: Params = None) -> Response:
        """Send a POST request; *params* are merged into the body."""
        return self.request(HTTPMethod.POST, path, params)

    def put(self, path: PathLike, params: Params = None) -> Response:
        """Send a PUT request; *params* are merged into the body."""
        return self.request(HTTPMethod.PUT, path, params)

    def delete(self, path: PathLike, params: Params = None) -> Response:
        """Send a DELETE request; *params* become query parameters."""
        return self.request(HTTPMethod.DELETE, path, params)

    def head(self, path: PathLike, params: Params = None) -> Response:
        """Send a HEAD request; *params* become query parameters."""
        return self.request(HTTPMethod.HEAD, path, params)
