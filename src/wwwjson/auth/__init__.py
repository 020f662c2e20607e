"""Pluggable authentication for wwwjson.

The main entry points are:

- :class:`AuthStrategy` -- abstract base class for implementing new schemes.
- :class:`NoAuth` -- the identity strategy used when none is configured.
- :class:`AuthManager` -- registry that maps strategy names to classes and
  builds configured instances.
- :func:`create_default_manager` -- factory returning an :class:`AuthManager`
  pre-loaded with the built-in Basic, OAuth1 and OAuth2 strategies.

Typical usage::

    from wwwjson.auth import create_default_manager

    strategy = create_default_manager().create("OAuth2", "my-access-token")
    request = strategy.augment(request)
"""

from wwwjson.auth.base import AuthStrategy, NoAuth
from wwwjson.auth.manager import AuthManager, create_default_manager

__all__ = [
    "AuthStrategy",
    "AuthManager",
    "NoAuth",
    "create_default_manager",
]
