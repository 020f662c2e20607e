"""HTTP Basic authentication strategy.

This module provides :class:`BasicAuth`, registered as ``Basic``. The
credential payload is ``{"username": ..., "password": ...}``; the pair is
joined with a colon, Base64-encoded, and sent as an
``Authorization: Basic <encoded>`` header per :rfc:`7617`.
"""

from __future__ import annotations

import base64
from typing import Any, ClassVar

from wwwjson.auth.base import AuthStrategy, parse_credentials, with_headers
from wwwjson.models import BasicCredentials, RequestSpec


class BasicAuth(AuthStrategy):
    """Authenticate via HTTP Basic authentication."""

    auth_type: ClassVar[str] = "Basic"

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    @classmethod
    def from_credentials(cls, credentials: Any) -> BasicAuth:
        """Build from a ``{"username": ..., "password": ...}`` payload.

        Raises:
            ConfigError: If either field is missing.
        """
        creds = parse_credentials(BasicCredentials, credentials, cls.auth_type)
        return cls(creds.username, creds.password)

    @property
    def header_value(self) -> str:
        """The ``Authorization`` header value sent with every request."""
        raw = f"{self.username}:{self.password}"
        encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"

    def augment(self, request: RequestSpec) -> RequestSpec:
        return with_headers(request, {"Authorization": self.header_value})
