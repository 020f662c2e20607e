"""OAuth2 access-token strategy.

This module provides :class:`OAuth2Auth`, registered as ``OAuth2``. It
does not perform any token exchange or refresh; it attaches a token the
caller already holds. The credential payload may be:

- a plain token string,
- a mapping with ``access_token`` and optionally ``token_type``,
  ``location`` (``"header"`` or ``"query"``) and ``param_name``,
- any object exposing an ``access_token`` attribute (and optionally
  ``token_type``), such as the token objects returned by OAuth2 client
  libraries.

See Also:
    :class:`wwwjson.models.OAuth2Token` for the accepted fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from wwwjson.auth.base import AuthStrategy, parse_credentials, with_headers
from wwwjson.exceptions import ConfigError
from wwwjson.models import OAuth2Token, RequestSpec


class OAuth2Auth(AuthStrategy):
    """Attach an OAuth2 access token as a header or a query parameter."""

    auth_type: ClassVar[str] = "OAuth2"

    def __init__(self, token: OAuth2Token) -> None:
        self.token = token

    @classmethod
    def from_credentials(cls, credentials: Any) -> OAuth2Auth:
        """Build from a token string, mapping, or token-like object.

        Raises:
            ConfigError: If no access token can be found in *credentials*.
        """
        if isinstance(credentials, OAuth2Token):
            return cls(credentials)
        if isinstance(credentials, str):
            credentials = {"access_token": credentials}
        elif not isinstance(credentials, Mapping) and credentials is not None:
            access_token = getattr(credentials, "access_token", None)
            if access_token is None:
                raise ConfigError(
                    "OAuth2 credentials must be a token string, a mapping with "
                    f"'access_token', or an object exposing it; got {type(credentials).__name__}"
                )
            payload = {"access_token": access_token}
            token_type = getattr(credentials, "token_type", None)
            if token_type:
                payload["token_type"] = token_type
            credentials = payload
        return cls(parse_credentials(OAuth2Token, credentials, cls.auth_type))

    def augment(self, request: RequestSpec) -> RequestSpec:
        if self.token.location == "query":
            url = request.url.copy_merge_params({self.token.param_name: self.token.access_token})
            return request.model_copy(update={"url": url})
        scheme = self.token.token_type
        # Token endpoints commonly answer with a lowercase "bearer".
        if scheme.lower() == "bearer":
            scheme = "Bearer"
        return with_headers(request, {"Authorization": f"{scheme} {self.token.access_token}"})
