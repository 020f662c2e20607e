"""Auth manager -- registry and factory for authentication strategies.

The :class:`AuthManager` maps strategy names (``"Basic"``, ``"OAuth1"``,
``"OAuth2"``, ``"None"``) to :class:`~wwwjson.auth.base.AuthStrategy`
classes and builds configured instances from credential payloads. The
client asks it for a strategy once, at configuration time, so an unknown
name or a malformed payload fails before any request is made.

Third-party packages can contribute strategies through the
``wwwjson.auth`` entry-point group; see :meth:`AuthManager.discover`.

For most use cases, call :func:`create_default_manager`.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any

from wwwjson.auth.base import AuthStrategy, NoAuth
from wwwjson.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "wwwjson.auth"
"""The entry-point group scanned by :meth:`AuthManager.discover`."""


class AuthManager:
    """Registry of authentication strategy classes, keyed case-insensitively.

    Example::

        from wwwjson.auth import AuthManager
        from wwwjson.plugins.basic import BasicAuth

        manager = AuthManager()
        manager.register(BasicAuth)
        strategy = manager.create("basic", {"username": "u", "password": "p"})
    """

    def __init__(self) -> None:
        self._strategies: dict[str, type[AuthStrategy]] = {}

    def register(self, strategy_cls: type[AuthStrategy]) -> None:
        """Register *strategy_cls* under its :attr:`~AuthStrategy.auth_type`.

        A strategy already registered under the same name is replaced.

        Raises:
            ConfigError: If the class does not declare an ``auth_type``.
        """
        if not strategy_cls.auth_type:
            raise ConfigError(f"{strategy_cls.__name__} does not declare an auth_type")
        self._strategies[strategy_cls.auth_type.lower()] = strategy_cls

    def get_strategy_class(self, auth_type: str) -> type[AuthStrategy]:
        """Look up a registered strategy class by name.

        Raises:
            ConfigError: If no strategy is registered for *auth_type*.
        """
        strategy_cls = self._strategies.get(str(auth_type).lower())
        if strategy_cls is None:
            available = ", ".join(self.list_types()) or "(none)"
            raise ConfigError(
                f"Unknown authentication strategy '{auth_type}'. "
                f"Available strategies: {available}"
            )
        return strategy_cls

    def create(self, auth_type: str, credentials: Any = None) -> AuthStrategy:
        """Build a configured strategy instance.

        Args:
            auth_type: Strategy name, matched case-insensitively.
            credentials: Payload handed to
                :meth:`~AuthStrategy.from_credentials`.

        Raises:
            ConfigError: If the name is unknown or the payload is invalid.
        """
        strategy_cls = self.get_strategy_class(auth_type)
        strategy = strategy_cls.from_credentials(credentials)
        logger.debug("Configured %s authentication", strategy_cls.auth_type)
        return strategy

    def list_types(self) -> list[str]:
        """Return the names of all registered strategies, sorted."""
        return sorted(cls.auth_type for cls in self._strategies.values())

    def discover(self) -> list[str]:
        """Register strategies advertised in the ``wwwjson.auth`` entry-point group.

        Each entry point must load to an :class:`AuthStrategy` subclass.
        Entry points that fail to load, or load to something else, are
        logged as warnings and skipped.

        Returns:
            The ``auth_type`` names registered by this call.
        """
        registered: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            try:
                strategy_cls = ep.load()
            except Exception as exc:
                logger.warning("Failed to load auth strategy '%s': %s", ep.name, exc)
                continue
            if not (isinstance(strategy_cls, type) and issubclass(strategy_cls, AuthStrategy)):
                logger.warning(
                    "Entry point '%s' is not an AuthStrategy subclass, skipping", ep.name
                )
                continue
            self.register(strategy_cls)
            registered.append(strategy_cls.auth_type)
            logger.info("Registered auth strategy '%s' from %s", strategy_cls.auth_type, ep.value)
        return registered


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` pre-loaded with the built-in strategies.

    - ``None`` -- requests pass through unchanged.
    - ``Basic`` -- HTTP Basic authentication.
    - ``OAuth1`` -- OAuth 1.0a HMAC-SHA1 request signing.
    - ``OAuth2`` -- bearer access token in a header or query parameter.
    """
    from wwwjson.plugins.basic import BasicAuth
    from wwwjson.plugins.oauth1 import OAuth1Auth
    from wwwjson.plugins.oauth2 import OAuth2Auth

    manager = AuthManager()
    manager.register(NoAuth)
    manager.register(BasicAuth)
    manager.register(OAuth1Auth)
    manager.register(OAuth2Auth)
    return manager
