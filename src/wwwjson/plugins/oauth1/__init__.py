"""OAuth 1.0a request-signing strategy.

Implements the ``OAuth1`` strategy: every request is signed with
HMAC-SHA1 over its method, URL and parameters per :rfc:`5849`, and the
signature travels in an ``Authorization: OAuth ...`` header.

See Also:
    :class:`~wwwjson.plugins.oauth1.plugin.OAuth1Auth`
"""

from wwwjson.plugins.oauth1.plugin import OAuth1Auth, percent_encode, sign_hmac_sha1

__all__ = ["OAuth1Auth", "percent_encode", "sign_hmac_sha1"]
