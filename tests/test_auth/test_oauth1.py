"""Tests for OAuth 1.0a HMAC-SHA1 request signing."""

from __future__ import annotations

import re
from urllib.parse import unquote

import httpx
import pytest

from wwwjson.exceptions import ConfigError
from wwwjson.models import HTTPMethod, PostBodyFormat, RequestSpec
from wwwjson.plugins.oauth1 import OAuth1Auth, percent_encode, sign_hmac_sha1
from wwwjson.plugins.oauth1.plugin import signature_base_string


# Worked example from Twitter's "Creating a signature" developer guide.
TWITTER_CREDENTIALS = {
    "consumer_key": "xvz1evFS4wEEPTGEFPHBog",
    "consumer_secret": "kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
    "token": "370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
    "token_secret": "LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
}
TWITTER_NONCE = "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg"
TWITTER_TIMESTAMP = "1318622958"
TWITTER_STATUS = "Hello Ladies + Gentlemen, a signed OAuth request!"
TWITTER_SIGNATURE = "hCtSmYh+iHYCEqBWrE7C7hYmtUk="


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _twitter_request(body_format: PostBodyFormat = PostBodyFormat.SERIALIZED) -> RequestSpec:
    return RequestSpec(
        method=HTTPMethod.POST,
        url=httpx.URL("https://api.twitter.com/1.1/statuses/update.json?include_entities=true"),
        body_params={"status": TWITTER_STATUS},
        body_format=body_format,
    )


def _parse_header(value: str) -> dict[str, str]:
    assert value.startswith("OAuth ")
    return {k: unquote(v) for k, v in re.findall(r'(\w+)="([^"]*)"', value)}


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


class TestPercentEncode:
    def test_unreserved_kept(self) -> None:
        assert percent_encode("AZaz09-._~") == "AZaz09-._~"

    def test_reserved_encoded(self) -> None:
        assert percent_encode("a b+c/d=e&f!") == "a%20b%2Bc%2Fd%3De%26f%21"

    def test_utf8(self) -> None:
        assert percent_encode("☃") == "%E2%98%83"

    def test_booleans(self) -> None:
        assert percent_encode(True) == "true"


class TestSignatureBaseString:
    def test_query_and_fragment_dropped_from_base_uri(self) -> None:
        base = signature_base_string("get", httpx.URL("https://EXAMPLE.com/r?x=1#frag"), [])
        method, uri, params = base.split("&")
        assert method == "GET"
        assert unquote(uri) == "https://example.com/r"
        assert params == ""

    def test_params_sorted_after_encoding(self) -> None:
        base = signature_base_string(
            "POST", httpx.URL("https://example.com/"), [("b", "2"), ("a", "2"), ("a", "1")]
        )
        assert base.endswith(percent_encode("a=1&a=2&b=2"))


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------


class TestOAuth1Sign:
    def test_known_signature(self) -> None:
        auth = OAuth1Auth.from_credentials(TWITTER_CREDENTIALS)
        params = auth.sign(_twitter_request(), nonce=TWITTER_NONCE, timestamp=TWITTER_TIMESTAMP)
        assert params["oauth_signature"] == TWITTER_SIGNATURE

    def test_protocol_params(self) -> None:
        auth = OAuth1Auth.from_credentials(TWITTER_CREDENTIALS)
        params = auth.sign(_twitter_request(), nonce=TWITTER_NONCE, timestamp=TWITTER_TIMESTAMP)
        assert params["oauth_consumer_key"] == TWITTER_CREDENTIALS["consumer_key"]
        assert params["oauth_token"] == TWITTER_CREDENTIALS["token"]
        assert params["oauth_signature_method"] == "HMAC-SHA1"
        assert params["oauth_version"] == "1.0"

    def test_json_body_not_signed(self) -> None:
        auth = OAuth1Auth.from_credentials(TWITTER_CREDENTIALS)
        signed = auth.sign(
            _twitter_request(PostBodyFormat.JSON_ENCODED),
            nonce=TWITTER_NONCE,
            timestamp=TWITTER_TIMESTAMP,
        )
        assert signed["oauth_signature"] != TWITTER_SIGNATURE

    def test_two_legged_omits_token(self) -> None:
        auth = OAuth1Auth.from_credentials(
            {"consumer_key": "key", "consumer_secret": "secret"}
        )
        params = auth.sign(_twitter_request(), nonce="n", timestamp="1")
        assert "oauth_token" not in params

    def test_two_legged_key_has_empty_token_secret(self) -> None:
        assert sign_hmac_sha1("base", "secret") == sign_hmac_sha1("base", "secret", "")

    def test_fresh_nonce_and_timestamp(self) -> None:
        auth = OAuth1Auth("key", "secret")
        first = auth.sign(_twitter_request())
        second = auth.sign(_twitter_request())
        assert first["oauth_nonce"] != second["oauth_nonce"]
        assert first["oauth_timestamp"].isdigit()

    def test_missing_consumer_secret(self) -> None:
        with pytest.raises(ConfigError, match="Invalid credentials for OAuth1"):
            OAuth1Auth.from_credentials({"consumer_key": "key"})


class TestOAuth1Augment:
    def test_authorization_header(self) -> None:
        auth = OAuth1Auth.from_credentials(TWITTER_CREDENTIALS)
        request = auth.augment(_twitter_request())
        fields = _parse_header(request.headers["Authorization"])
        assert set(fields) == {
            "oauth_consumer_key",
            "oauth_nonce",
            "oauth_signature",
            "oauth_signature_method",
            "oauth_timestamp",
            "oauth_token",
            "oauth_version",
        }

    def test_header_signature_matches_recomputation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("wwwjson.plugins.oauth1.plugin.secrets.token_hex", lambda n: TWITTER_NONCE)
        monkeypatch.setattr("wwwjson.plugins.oauth1.plugin.time.time", lambda: int(TWITTER_TIMESTAMP))
        auth = OAuth1Auth.from_credentials(TWITTER_CREDENTIALS)
        fields = _parse_header(auth.augment(_twitter_request()).headers["Authorization"])
        assert fields["oauth_signature"] == TWITTER_SIGNATURE

    def test_url_and_body_untouched(self) -> None:
        request = _twitter_request()
        signed = OAuth1Auth("key", "secret").augment(request)
        assert signed.url == request.url
        assert signed.body_params == request.body_params
