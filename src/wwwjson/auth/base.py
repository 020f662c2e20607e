"""Abstract base class for authentication strategies.

An :class:`AuthStrategy` receives a fully resolved
:class:`~wwwjson.models.RequestSpec` and returns a new one carrying its
credentials: an extra header, an extra query parameter, or a signature
computed over the request itself. The client invokes every strategy the
same way and never needs to know which scheme is active.

To implement a new strategy, subclass :class:`AuthStrategy`, set
:attr:`~AuthStrategy.auth_type`, and implement
:meth:`~AuthStrategy.from_credentials` and :meth:`~AuthStrategy.augment`.
Register it with :class:`~wwwjson.auth.manager.AuthManager` directly or
through the ``wwwjson.auth`` entry-point group.

See Also:
    :mod:`wwwjson.auth.manager` for registration and lookup.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from wwwjson.exceptions import ConfigError

if TYPE_CHECKING:
    from wwwjson.models import RequestSpec

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class AuthStrategy(ABC):
    """Abstract base class for authentication strategies.

    Every concrete strategy must provide:

    1. An :attr:`auth_type` class attribute naming it (``"Basic"``,
       ``"OAuth1"``...). Lookup in the manager is case-insensitive.
    2. A :meth:`from_credentials` constructor that validates the
       configuration payload and raises
       :class:`~wwwjson.exceptions.ConfigError` if it is unusable.
    3. An :meth:`augment` implementation.
    """

    auth_type: ClassVar[str] = ""

    @classmethod
    @abstractmethod
    def from_credentials(cls, credentials: Any) -> AuthStrategy:
        """Build the strategy from its configuration payload.

        Args:
            credentials: Strategy-specific payload, e.g. a mapping with
                ``username`` and ``password`` for Basic.

        Raises:
            ConfigError: If the payload is missing fields or malformed.
        """
        ...

    @abstractmethod
    def augment(self, request: RequestSpec) -> RequestSpec:
        """Return *request* with this strategy's credentials attached.

        Implementations must not mutate *request*; they return a copy made
        with :meth:`~pydantic.BaseModel.model_copy`.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} auth_type={self.auth_type!r}>"


class NoAuth(AuthStrategy):
    """The identity strategy: requests pass through unchanged."""

    auth_type: ClassVar[str] = "None"

    @classmethod
    def from_credentials(cls, credentials: Any) -> NoAuth:
        return cls()

    def augment(self, request: RequestSpec) -> RequestSpec:
        return request


def with_headers(request: RequestSpec, headers: dict[str, str]) -> RequestSpec:
    """Return a copy of *request* with *headers* added over its existing ones."""
    return request.model_copy(update={"headers": {**request.headers, **headers}})


def parse_credentials(model: type[_ModelT], credentials: Any, auth_type: str) -> _ModelT:
    """Validate a credential payload against *model*.

    Args:
        model: The Pydantic model describing the payload.
        credentials: A mapping or an already-built *model* instance.
        auth_type: Strategy name used in the error message.

    Raises:
        ConfigError: If *credentials* does not validate.
    """
    if isinstance(credentials, model):
        return credentials
    if credentials is None:
        credentials = {}
    try:
        return model.model_validate(credentials)
    except ValidationError as exc:
        raise ConfigError(f"Invalid credentials for {auth_type} authentication: {exc}") from exc
