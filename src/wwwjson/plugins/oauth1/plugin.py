"""OAuth 1.0a request-signing strategy.

This module provides :class:`OAuth1Auth`, registered as ``OAuth1``. The
credential payload is::

    {
        "consumer_key": "...",
        "consumer_secret": "...",
        "token": "...",          # optional for two-legged requests
        "token_secret": "...",   # optional for two-legged requests
    }

Each request is signed per :rfc:`5849` section 3.4 with HMAC-SHA1:

1. Collect the protocol parameters (``oauth_consumer_key``,
   ``oauth_nonce``, ``oauth_signature_method``, ``oauth_timestamp``,
   ``oauth_token``, ``oauth_version``), the URL query parameters, and the
   body parameters when the body is form-encoded.
2. Percent-encode every name and value, sort, and join as ``k=v`` pairs
   with ``&``.
3. Build the base string ``METHOD&enc(base URI)&enc(parameters)``.
4. Sign it with the key ``enc(consumer_secret)&enc(token_secret)``.

The protocol parameters and the signature are sent in an
``Authorization: OAuth ...`` header.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Optional
from urllib.parse import quote

import httpx

from wwwjson.auth.base import AuthStrategy, parse_credentials, with_headers
from wwwjson.models import OAuth1Credentials, PostBodyFormat, RequestSpec

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def percent_encode(value: Any) -> str:
    """Percent-encode *value* per :rfc:`3986`, keeping only unreserved characters."""
    return quote(_to_str(value), safe="~")


def _to_str(value: Any) -> str:
    # Same primitive conversion httpx applies when encoding params and forms.
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    return str(value)


def _pairs(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _to_str(item)) for item in value)
        else:
            pairs.append((key, _to_str(value)))
    return pairs


def signature_base_string(
    method: str,
    url: httpx.URL,
    params: Iterable[tuple[str, str]],
) -> str:
    """Build the :rfc:`5849` signature base string.

    Args:
        method: HTTP method, upper-cased in the result.
        url: Request URL. Its query and fragment are dropped from the
            base URI; query parameters must be passed in *params*.
        params: Every parameter that takes part in the signature.
    """
    base_uri = str(url.copy_with(query=None, fragment=None))
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    normalized = "&".join(f"{k}={v}" for k, v in encoded)
    return "&".join(
        [method.upper(), percent_encode(base_uri), percent_encode(normalized)]
    )


def sign_hmac_sha1(
    base_string: str,
    consumer_secret: str,
    token_secret: Optional[str] = None,
) -> str:
    """Return the Base64 HMAC-SHA1 signature of *base_string*."""
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"
    digest = hmac.new(
        key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class OAuth1Auth(AuthStrategy):
    """Sign every request with OAuth 1.0a HMAC-SHA1."""

    auth_type: ClassVar[str] = "OAuth1"

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: Optional[str] = None,
        token_secret: Optional[str] = None,
    ) -> None:
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.token = token
        self.token_secret = token_secret

    @classmethod
    def from_credentials(cls, credentials: Any) -> OAuth1Auth:
        """Build from a consumer/token credential mapping.

        Raises:
            ConfigError: If ``consumer_key`` or ``consumer_secret`` is missing.
        """
        creds = parse_credentials(OAuth1Credentials, credentials, cls.auth_type)
        return cls(
            consumer_key=creds.consumer_key,
            consumer_secret=creds.consumer_secret,
            token=creds.token,
            token_secret=creds.token_secret,
        )

    def sign(
        self,
        request: RequestSpec,
        nonce: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> dict[str, str]:
        """Compute the protocol parameters, including ``oauth_signature``, for *request*.

        Args:
            request: The resolved request to sign.
            nonce: Fixed nonce; a random one is generated when omitted.
            timestamp: Fixed timestamp; the current time when omitted.

        Returns:
            The ``oauth_*`` parameters in header order.
        """
        oauth_params = {
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": nonce or secrets.token_hex(16),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": timestamp or str(int(time.time())),
            "oauth_version": OAUTH_VERSION,
        }
        if self.token:
            oauth_params["oauth_token"] = self.token

        params = list(oauth_params.items())
        params.extend(request.url.params.multi_items())
        # Only form-encoded bodies take part in the signature (RFC 5849 3.4.1.3.1).
        if request.body_params and request.body_format == PostBodyFormat.SERIALIZED:
            params.extend(_pairs(request.body_params))

        base_string = signature_base_string(request.method.value, request.url, params)
        oauth_params["oauth_signature"] = sign_hmac_sha1(
            base_string, self.consumer_secret, self.token_secret
        )
        return oauth_params

    def augment(self, request: RequestSpec) -> RequestSpec:
        oauth_params = self.sign(request)
        header = "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in oauth_params.items()
        )
        return with_headers(request, {"Authorization": header})
