"""OAuth2 access-token strategy.

Implements the ``OAuth2`` strategy, which attaches an already-obtained
access token to every request, either as an ``Authorization`` header or
as a query parameter.

See Also:
    :class:`~wwwjson.plugins.oauth2.plugin.OAuth2Auth`
"""

from wwwjson.plugins.oauth2.plugin import OAuth2Auth

__all__ = ["OAuth2Auth"]
