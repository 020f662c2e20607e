"""The response wrapper returned by every client call.

:class:`Response` wraps a :class:`~wwwjson.models.RawResponse` and decodes
its body as JSON on first access. Nothing here raises for a failed
request: HTTP errors, transport faults and undecodable bodies all end up
as ``success == False``, with the decoded body (or a
:class:`DecodeFailure` marker) still available so API error payloads can
be read.

Decoding, the success check and the response transform each run at most
once; their results are cached on the instance.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Optional

from wwwjson.models import RawResponse

Transform = Callable[[Any], Any]


@dataclass(frozen=True)
class DecodeFailure:
    """Marker exposed in place of a value when the body is not valid JSON.

    It is falsy, so ``if response.json:`` reads naturally.

    Attributes:
        message: The decoder's error message.
        body: The raw body text that failed to decode.
    """

    message: str
    body: str

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"Could not decode JSON: {self.message}"


class Response:
    """Lazily decoded, success-classified view of an HTTP response.

    Args:
        raw: The transport's response.
        transform: Optional function applied to the decoded JSON of
            successful responses only.

    Example::

        r = client.get("/me", {"fields": "email"})
        if r.success:
            print(r.value["email"])
        else:
            print(r.status_line, r.json)
    """

    def __init__(self, raw: RawResponse, transform: Optional[Transform] = None) -> None:
        self._raw = raw
        self._transform = transform

    # ------------------------------------------------------------------ #
    # Raw views
    # ------------------------------------------------------------------ #

    @property
    def raw(self) -> RawResponse:
        """The underlying transport response, for anything not wrapped here."""
        return self._raw

    @property
    def transport_ok(self) -> bool:
        """Whether the transport delivered a response at all."""
        return self._raw.ok

    @property
    def status_code(self) -> Optional[int]:
        """The HTTP status code, or ``None`` after a transport fault."""
        return self._raw.status_code

    @property
    def reason(self) -> str:
        return self._raw.reason

    @property
    def status_line(self) -> str:
        """``"<code> <reason>"``, or a description of the transport fault."""
        if not self._raw.ok:
            kind = self._raw.error_type or "TransportError"
            message = self._raw.error_message
            return f"{kind}: {message}" if message else kind
        return f"{self._raw.status_code} {self._raw.reason}".rstrip()

    @property
    def headers(self) -> dict[str, str]:
        return self._raw.headers

    @property
    def content(self) -> bytes:
        return self._raw.content

    @property
    def text(self) -> str:
        return self._raw.text

    @property
    def url(self) -> Optional[str]:
        return self._raw.url

    # ------------------------------------------------------------------ #
    # Decoded views (computed once)
    # ------------------------------------------------------------------ #

    @cached_property
    def json(self) -> Any:
        """The decoded body, before any transform.

        An empty body decodes to ``None``. A body that is not valid JSON
        yields a :class:`DecodeFailure` instead of raising.
        """
        text = self._raw.text
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            return DecodeFailure(message=str(exc), body=text)

    @property
    def decode_failed(self) -> bool:
        """Whether the body could not be decoded as JSON."""
        return isinstance(self.json, DecodeFailure)

    @cached_property
    def success(self) -> bool:
        """Transport succeeded, status is 2xx, and the body decoded as JSON."""
        if not self._raw.ok or self._raw.status_code is None:
            return False
        if not 200 <= self._raw.status_code <= 299:
            return False
        return not self.decode_failed

    @cached_property
    def value(self) -> Any:
        """The effective value: transformed on success, otherwise the decoded body untouched."""
        decoded = self.json
        if self.success and self._transform is not None:
            return self._transform(decoded)
        return decoded

    @property
    def res(self) -> Any:
        """Alias of :attr:`value`."""
        return self.value

    @property
    def error(self) -> Optional[str]:
        """Why the request did not succeed, or ``None`` if it did."""
        if self.success:
            return None
        if not self._raw.ok or self._raw.status_code is None:
            return self.status_line
        if not 200 <= self._raw.status_code <= 299:
            return self.status_line
        return str(self.json)

    def __repr__(self) -> str:
        return f"<Response [{self.status_line}] success={self.success}>"
