"""Typer application and CLI entry point for wwwjson.

The CLI is a thin shell over :class:`~wwwjson.client.JSONClient`: the root
callback resolves settings and output preferences, and each verb command
sends exactly one request and renders the response.

Exit status follows :mod:`wwwjson.exit_codes`: ``0`` when the response is
a success, ``5`` when the server answered with an error or an undecodable
body, ``6`` when no response arrived at all.

See Also:
    :mod:`wwwjson.config`: Settings files and precedence resolution.
    :mod:`wwwjson.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from wwwjson import __version__
from wwwjson.client.response import Transform
from wwwjson.config import build_client, resolve_settings
from wwwjson.exceptions import InvalidUsageError, WWWJSONError
from wwwjson.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_REQUEST_FAILED,
    EXIT_SUCCESS,
    EXIT_TRANSPORT_ERROR,
)
from wwwjson.models import HTTPMethod, PostBodyFormat
from wwwjson.output import OutputFormat, OutputManager, error, get_output, set_output

app = typer.Typer(
    name="wwwjson",
    help="Call JSON web APIs from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_DATA_HELP = "Parameter as key=value. Repeat for more; repeated keys become lists."


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"wwwjson {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Settings file to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base URL of the API."
    ),
    json_body: bool = typer.Option(
        False, "--json-body", help="Send POST/PUT bodies JSON-encoded."
    ),
    unwrap: Optional[str] = typer.Option(
        None,
        "--unwrap",
        "-u",
        help="Dotted key path applied to successful responses, e.g. data.0",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress the status line."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show resolved URLs and response status."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the response value to this file."
    ),
) -> None:
    """Root callback executed before every verb command.

    Installs the global :class:`~wwwjson.output.OutputManager` and stores
    the settings-related flags in ``ctx.obj``; settings are resolved only
    when a request is actually sent.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["base_url"] = base_url
    ctx.obj["format"] = PostBodyFormat.JSON_ENCODED if json_body else None
    ctx.obj["unwrap"] = unwrap


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def parse_data(items: Optional[list[str]]) -> dict[str, Any]:
    """Turn repeated ``key=value`` options into a parameter mapping.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    params: dict[str, Any] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Expected key=value, got '{item}'")
        if key in params:
            existing = params[key]
            params[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def make_unwrap_transform(path: str) -> Transform:
    """Build a transform that walks a dotted key path into the decoded JSON.

    Numeric segments index into lists, so ``"data.0"`` is the equivalent of
    ``lambda r: r["data"][0]``.
    """
    segments = [segment for segment in path.split(".") if segment]

    def _unwrap(value: Any) -> Any:
        for segment in segments:
            try:
                if isinstance(value, list):
                    value = value[int(segment)]
                else:
                    value = value[segment]
            except (KeyError, IndexError, TypeError, ValueError) as exc:
                raise InvalidUsageError(
                    f"Key path '{path}' not found in response (at '{segment}')"
                ) from exc
        return value

    return _unwrap


def _send(ctx: typer.Context, method: HTTPMethod, path: str, data: Optional[list[str]]) -> None:
    """Send one request with the resolved settings and render the response."""
    obj = ctx.obj or {}
    output = get_output()
    try:
        params = parse_data(data)
        settings = resolve_settings(
            cli_config=obj.get("config"),
            cli_base_url=obj.get("base_url"),
            cli_format=obj.get("format"),
        )
        unwrap = obj.get("unwrap")
        transform = make_unwrap_transform(unwrap) if unwrap else None
        with build_client(settings, transform) as client:
            response = client.request(method, path, params)
            output.render_response(response)
    except WWWJSONError as exc:
        output.error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if response.success:
        raise typer.Exit(EXIT_SUCCESS)
    if not response.transport_ok:
        raise typer.Exit(EXIT_TRANSPORT_ERROR)
    raise typer.Exit(EXIT_REQUEST_FAILED)


# ------------------------------------------------------------------ #
# Verb commands
# ------------------------------------------------------------------ #


@app.command("get")
def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path relative to the base URL, or an absolute URL."),
    data: Optional[list[str]] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
) -> None:
    """Send a GET request; parameters go into the query string."""
    _send(ctx, HTTPMethod.GET, path, data)


@app.command("post")
def post_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path relative to the base URL, or an absolute URL."),
    data: Optional[list[str]] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
) -> None:
    """Send a POST request; parameters go into the body."""
    _send(ctx, HTTPMethod.POST, path, data)


@app.command("put")
def put_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path relative to the base URL, or an absolute URL."),
    data: Optional[list[str]] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
) -> None:
    """Send a PUT request; parameters go into the body."""
    _send(ctx, HTTPMethod.PUT, path, data)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path relative to the base URL, or an absolute URL."),
    data: Optional[list[str]] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
) -> None:
    """Send a DELETE request; parameters go into the query string."""
    _send(ctx, HTTPMethod.DELETE, path, data)


@app.command("head")
def head_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path relative to the base URL, or an absolute URL."),
    data: Optional[list[str]] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
) -> None:
    """Send a HEAD request; parameters go into the query string."""
    _send(ctx, HTTPMethod.HEAD, path, data)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``wwwjson`` console script.

    :class:`~wwwjson.exceptions.WWWJSONError` instances that escape a
    command cause a clean exit with the error's ``exit_code``.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except WWWJSONError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
