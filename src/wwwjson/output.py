"""Output formatting with strict stdout/stderr discipline.

* **stdout** -- the response value only, so ``wwwjson get ... | jq`` works.
* **stderr** -- status lines, debug traces, warnings and errors.
* **TTY detection** -- Rich syntax highlighting when stdout is an
  interactive terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and
  ``--no-color``.

The module exposes two layers:

1. :class:`OutputManager` -- holds format preferences, Rich consoles and
   quiet/verbose flags. Created by :func:`~wwwjson.app.main_callback` and
   installed via :func:`set_output`.
2. The global instance behind :func:`get_output`, so the client can emit
   debug traces without being handed a manager, plus an :func:`error`
   shortcut for the CLI's top-level handler.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import IO, TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

if TYPE_CHECKING:
    from wwwjson.client.response import Response


class OutputFormat(str, Enum):
    """Supported formats for the response value.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and
    colour is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes response data to stdout and diagnostics to stderr.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress the status line and informational messages.
        verbose: Show debug traces (resolved URLs, response status).
        output_file: Write the response value to this path instead of
            stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._file_started = False

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def render_response(self, response: Response) -> None:
        """Print the status line to stderr and the response value to stdout.

        When the body is not JSON the raw text is printed instead, so error
        pages stay readable.
        """
        status = response.status_line
        if response.success:
            self.info(f"HTTP {status}")
        else:
            self.warning(f"HTTP {status}" if response.transport_ok else status)

        if not response.transport_ok:
            return
        if response.decode_failed:
            if response.text:
                self.print_data(response.text)
            return
        if response.value is not None:
            self.format_value(response.value)

    def format_value(self, data: Any) -> None:
        """Render a decoded JSON value in the active format."""
        if self._output_file:
            self._write_to_file(data)
        elif self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, or write it to the output file."""
        if self._output_file:
            with self._open_output_file() as f:
                f.write(text)
                if not text.endswith("\n"):
                    f.write("\n")
        else:
            print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(escape(message))

    def warning(self, message: str) -> None:
        """Yellow warning. Not suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Bold red error. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Debug trace, shown only with ``--verbose``."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{escape(f'[debug] {message}')}[/dim]", highlight=False)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{_plain_scalar(value)}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(_plain_scalar(v) for v in item.values()))
                else:
                    self.print_data(_plain_scalar(item))
        else:
            self.print_data(_plain_scalar(data))

    def _print_rich(self, data: Any) -> None:
        if isinstance(data, (dict, list)):
            json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(_plain_scalar(data), markup=False)

    def _open_output_file(self) -> IO[str]:
        # The first write of a run truncates; later lines of the same value append.
        assert self._output_file is not None
        mode = "a" if self._file_started else "w"
        self._file_started = True
        return open(self._output_file, mode, encoding="utf-8")

    def _write_to_file(self, data: Any) -> None:
        assert self._output_file is not None
        if isinstance(data, str):
            content = data
        else:
            content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        with self._open_output_file() as f:
            f.write(content)
            if not content.endswith("\n"):
                f.write("\n")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _plain_scalar(value: Any) -> str:
    """Render JSON scalars the way JSON spells them; nested values as compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a quiet default lazily.

    Library users who never configure output get no diagnostics at all.
    """
    global _output
    if _output is None:
        _output = OutputManager(quiet=True)
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def error(message: str) -> None:
    get_output().error(message)
