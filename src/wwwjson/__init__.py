"""wwwjson -- make working with JSON web APIs as painless as possible.

Point a :class:`~wwwjson.client.JSONClient` at a base URL once, then call
relative paths with plain dicts of parameters. The client takes care of
URL resolution, default query and body parameters, body serialisation,
authentication, and JSON decoding. Every call returns a
:class:`~wwwjson.client.Response` that tells you whether it succeeded
instead of raising.

Typical usage::

    from wwwjson import JSONClient

    client = JSONClient(base_url="https://graph.facebook.com?access_token=XXXX")
    r = client.get("/me", {"fields": "email"})
    if r.success:
        print(r.value["email"])

Modules:
    app: Typer CLI entry point.
    models: Pydantic models shared across the package.
    config: Settings files, precedence resolution, credential sources.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes used by the CLI.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

from wwwjson.client import DecodeFailure, JSONClient, Response  # noqa: E402
from wwwjson.exceptions import ConfigError, InvalidUsageError, WWWJSONError  # noqa: E402
from wwwjson.models import PostBodyFormat  # noqa: E402

__all__ = [
    "ConfigError",
    "DecodeFailure",
    "InvalidUsageError",
    "JSONClient",
    "PostBodyFormat",
    "Response",
    "WWWJSONError",
    "__version__",
]
