"""Built-in authentication strategies.

Each strategy lives in its own sub-package, mirroring how third-party
strategies are shipped and registered through the ``wwwjson.auth``
entry-point group:

* :mod:`wwwjson.plugins.basic` -- HTTP Basic.
* :mod:`wwwjson.plugins.oauth1` -- OAuth 1.0a HMAC-SHA1 signing.
* :mod:`wwwjson.plugins.oauth2` -- OAuth2 bearer access tokens.
"""
