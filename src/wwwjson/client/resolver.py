"""Request resolution -- from a relative path and a dict to a complete request.

:func:`resolve_request` is where the interesting merge rules live:

1. A string path has a leading ``/`` rewritten to ``./`` so that it
   resolves *under* the base URL instead of replacing the base path.
   ``httpx.URL`` paths are used as given.
2. Absolute paths (with a scheme) are used directly; relative ones are
   joined to the base URL per :rfc:`3986`.
3. The query string becomes the path's own parameters followed by the base
   URL's parameters. Base URL parameters are sent on every request,
   whatever the verb.
4. For GET, HEAD and DELETE the per-call parameters are appended to the
   query string. A same-named base parameter is kept, so both values are
   sent.
5. For POST and PUT the per-call parameters are layered over the default
   body parameters to form the body; the query string is left as is.

Example::

    config = ClientConfig(base_url="https://api.example.com/v1")
    request = resolve_request(config, "GET", "/items", {"q": "x"})
    assert str(request.url) == "https://api.example.com/v1/items?q=x"
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from wwwjson.exceptions import InvalidUsageError
from wwwjson.models import ClientConfig, HTTPMethod, RequestSpec

QUERY_METHODS = frozenset({HTTPMethod.GET, HTTPMethod.HEAD, HTTPMethod.DELETE})
"""Verbs whose per-call parameters go into the query string."""

BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT})
"""Verbs whose per-call parameters go into the request body."""

_LEADING_SLASH = re.compile(r"^/")

PathLike = Union[str, httpx.URL]


def coerce_method(method: Union[str, HTTPMethod]) -> HTTPMethod:
    """Normalise *method* to an :class:`HTTPMethod`.

    Raises:
        InvalidUsageError: If the method is not one the client implements.
    """
    if isinstance(method, HTTPMethod):
        return method
    try:
        return HTTPMethod(str(method).upper())
    except ValueError:
        raise InvalidUsageError(f"Method {method} not implemented") from None


def coerce_path(path: PathLike) -> httpx.URL:
    """Parse a request path, rewriting a leading ``/`` to ``./``.

    Raises:
        InvalidUsageError: If *path* cannot be parsed as a URL reference.
    """
    if isinstance(path, httpx.URL):
        return path
    try:
        return httpx.URL(_LEADING_SLASH.sub("./", str(path)))
    except httpx.InvalidURL as exc:
        raise InvalidUsageError(f"Invalid request path '{path}': {exc}") from exc


def resolve_url(base_url: httpx.URL, path: PathLike) -> httpx.URL:
    """Resolve *path* against *base_url* and merge both query strings.

    The result carries the path's query parameters followed by every query
    parameter of *base_url*. Duplicated keys are kept.
    """
    token = coerce_path(path)
    absolute = token if token.scheme else base_url.join(token)
    query = list(token.params.multi_items()) + list(base_url.params.multi_items())
    return absolute.copy_with(params=query)


def resolve_request(
    config: ClientConfig,
    method: Union[str, HTTPMethod],
    path: PathLike,
    params: Optional[Mapping[str, Any]] = None,
) -> RequestSpec:
    """Build the :class:`~wwwjson.models.RequestSpec` for one call.

    Args:
        config: The owning client's configuration.
        method: HTTP verb; see :data:`QUERY_METHODS` and :data:`BODY_METHODS`.
        path: Relative or absolute path, as a string or :class:`httpx.URL`.
        params: Per-call parameters. ``None`` is treated as empty.

    Returns:
        A request whose ``body_params`` is ``None`` for query verbs and the
        merged mapping (possibly empty) for body verbs.

    Raises:
        InvalidUsageError: For unsupported methods or unparseable paths.
    """
    verb = coerce_method(method)
    url = resolve_url(config.base_url, path)
    call_params = dict(params or {})

    body_params: Optional[dict[str, Any]] = None
    if verb in BODY_METHODS:
        body_params = {**config.body_params, **call_params}
    elif call_params:
        query = list(url.params.multi_items()) + list(httpx.QueryParams(call_params).multi_items())
        url = url.copy_with(params=query)

    return RequestSpec(
        method=verb,
        url=url,
        body_params=body_params,
        body_format=config.body_format,
    )
