"""Settings files, precedence resolution, and credential sources.

The library itself is configured in code through
:class:`~wwwjson.client.JSONClient` arguments. This module adds a
file-based layer, used by the CLI and available to applications:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.wwwjson/`` on macOS and Windows. See :func:`get_config_dir`.
* **Settings files** -- a JSON document deserialised into
  :class:`~wwwjson.models.ClientSettings` by :func:`load_settings`.
* **Precedence resolution** -- :func:`resolve_settings` layers CLI flags,
  environment variables, the project file and the user file.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from environment variables, files, or an interactive prompt, so settings
  files never need to contain them.
* **Client construction** -- :func:`build_client` turns settings into a
  ready :class:`~wwwjson.client.JSONClient`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
from pathlib import Path
from typing import Any, Optional

import httpx

from wwwjson.auth.manager import create_default_manager
from wwwjson.client import JSONClient
from wwwjson.client.response import Transform
from wwwjson.client.transport import Transport
from wwwjson.exceptions import ConfigError
from wwwjson.models import ClientSettings, PostBodyFormat

_APP_NAME = "wwwjson"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "wwwjson.json"

_CREDENTIAL_PREFIXES = ("env:", "file:")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the user configuration directory (not created).

    On Linux/BSD: ``$XDG_CONFIG_HOME/wwwjson/`` (default ``~/.config/wwwjson/``).
    On macOS/Windows: ``~/.wwwjson/``.
    """
    if not _is_xdg_platform():
        return Path.home() / f".{_APP_NAME}"
    env_value = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(env_value) if env_value else Path.home() / ".config"
    return base / _APP_NAME


def user_config_path() -> Path:
    """Path of the user-wide settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def project_config_path() -> Path:
    """Path of the project-local settings file in the working directory."""
    return Path.cwd() / _PROJECT_CONFIG_FILENAME


# --- Settings files ---


def load_settings(path: Path) -> ClientSettings:
    """Load and validate a settings file.

    Raises:
        ConfigError: If the file does not exist, is not valid JSON, or fails
            validation.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientSettings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc


def resolve_settings(
    cli_config: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_format: Optional[PostBodyFormat] = None,
) -> ClientSettings:
    """Resolve settings through the full precedence chain.

    The settings file is the first one found among:

        1. ``cli_config`` (``--config``)
        2. ``$WWWJSON_CONFIG``
        3. ``./wwwjson.json``
        4. ``~/.config/wwwjson/config.json``

    Individual values are then overridden, highest first, by CLI flags
    (``cli_base_url``, ``cli_format``) and ``$WWWJSON_BASE_URL``.

    Returns:
        The effective settings; defaults when no file exists.

    Raises:
        ConfigError: If an explicitly named file is missing or any file is
            invalid.
    """
    explicit = cli_config or os.environ.get("WWWJSON_CONFIG")
    if explicit:
        settings = load_settings(Path(explicit))
    else:
        settings = ClientSettings()
        for candidate in (project_config_path(), user_config_path()):
            if candidate.is_file():
                settings = load_settings(candidate)
                break

    env_base_url = os.environ.get("WWWJSON_BASE_URL")
    if cli_base_url is not None:
        settings.base_url = cli_base_url
    elif env_base_url:
        settings.base_url = env_base_url

    if cli_format is not None:
        settings.post_body_format = cli_format

    return settings


# --- Credential source resolution ---


def is_credential_source(value: Any) -> bool:
    """Whether *value* is a credential source descriptor rather than a literal."""
    return isinstance(value, str) and (
        value == "prompt" or value.startswith(_CREDENTIAL_PREFIXES)
    )


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_credentials(credentials: Any) -> Any:
    """Resolve every source descriptor in a credential payload.

    Strings that are not descriptors are kept as literal values. A payload
    that is itself a single string (e.g. an OAuth2 token) is resolved the
    same way.
    """
    if is_credential_source(credentials):
        return resolve_credential(credentials)
    if isinstance(credentials, dict):
        return {
            key: resolve_credential(value) if is_credential_source(value) else value
            for key, value in credentials.items()
        }
    return credentials


# --- Client construction ---


def build_client(
    settings: ClientSettings,
    transform: Optional[Transform] = None,
    transport: Optional[Transport] = None,
) -> JSONClient:
    """Build a :class:`~wwwjson.client.JSONClient` from resolved settings.

    Authentication strategies from installed ``wwwjson.auth`` entry points
    are available alongside the built-in ones.

    Raises:
        ConfigError: If no base URL is configured, or any value is invalid.
    """
    if not settings.base_url:
        raise ConfigError(
            "No base URL configured. Pass --base-url, set WWWJSON_BASE_URL, "
            f"or add 'base_url' to {_PROJECT_CONFIG_FILENAME}"
        )

    base_url: Any = settings.base_url
    if settings.base_params:
        try:
            merged = dict(httpx.URL(settings.base_url).params)
        except httpx.InvalidURL as exc:
            raise ConfigError(f"Invalid base_url '{settings.base_url}': {exc}") from exc
        merged.update(settings.base_params)
        base_url = (settings.base_url, merged)

    auth_manager = create_default_manager()
    auth_manager.discover()

    authentication = None
    if settings.authentication is not None:
        authentication = {
            settings.authentication.type: resolve_credentials(
                settings.authentication.credentials
            )
        }

    return JSONClient(
        base_url=base_url,
        body_params=settings.body_params,
        post_body_format=settings.post_body_format,
        default_response_transform=transform,
        authentication=authentication,
        auth_manager=auth_manager,
        transport=transport,
        timeout=settings.timeout,
        verify_ssl=settings.verify_ssl,
    )
