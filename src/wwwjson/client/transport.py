"""Transports -- the one place where network I/O happens.

The client only ever calls :meth:`Transport.perform`. It expects a
:class:`~wwwjson.models.RawResponse` back in every case: a network fault is
reported as ``RawResponse(ok=False, ...)`` and never raised, so callers
always get a :class:`~wwwjson.client.Response` they can inspect.

:class:`HttpxTransport` is the default implementation, backed by
:class:`httpx.Client`. Retries, redirects, connection pooling and timeouts
are its business, not the client's.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from wwwjson import __version__
from wwwjson.models import RawResponse
from wwwjson.output import get_output

Body = Union[Mapping[str, Any], str, bytes, None]

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": f"wwwjson/{__version__}",
}


class Transport(ABC):
    """The narrow contract between the client and the network."""

    @abstractmethod
    def perform(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Body = None,
    ) -> RawResponse:
        """Send one request and block until the response (or a fault) arrives.

        Args:
            method: Upper-case HTTP method.
            url: Absolute URL including the query string.
            headers: Request headers.
            body: A mapping to form-encode, a string or bytes to send
                verbatim, or ``None``.

        Returns:
            The response. Transport-level faults are encoded with
            ``ok=False`` rather than raised.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the transport."""


class HttpxTransport(Transport):
    """Transport backed by :class:`httpx.Client`.

    Args:
        client: An existing client to send requests through. It is not
            closed by :meth:`close`; the caller owns it.
        timeout: Request timeout in seconds, used when *client* is omitted.
        verify: Verify SSL certificates, used when *client* is omitted.
        headers: Extra default headers, used when *client* is omitted.

    Example::

        transport = HttpxTransport(timeout=10)
        raw = transport.perform("GET", "https://api.example.com/", {})
        transport.close()
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        verify: bool = True,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                timeout=timeout,
                verify=verify,
                headers={**DEFAULT_HEADERS, **(headers or {})},
                follow_redirects=True,
            )
        self._client = client

    def perform(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Body = None,
    ) -> RawResponse:
        kwargs: dict[str, Any] = {"headers": dict(headers)}
        if isinstance(body, Mapping):
            kwargs["data"] = dict(body)
        elif body is not None:
            kwargs["content"] = body

        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            get_output().debug(f"Transport error: {method} {url}: {exc}")
            return RawResponse(
                ok=False,
                url=url,
                error_type=type(exc).__name__,
                error_message=str(exc) or type(exc).__name__,
            )

        return RawResponse(
            ok=True,
            status_code=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers),
            content=response.content,
            url=str(response.url),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
