"""Rendering of SendPulse results and CLI diagnostics.

Response ``data`` is the only thing written to stdout, so ``sendpulse ... --json``
can be piped into other tools. Status lines, warnings and errors, including
those raised deep in the request pipeline, go to stderr.

Three renderings of a payload are supported:

* ``json`` -- the payload as indented JSON, unchanged.
* ``plain`` -- tab-separated text. A list of records (what the listing
  endpoints such as ``addressbooks list`` return) gets a header row built
  from the union of the record keys; an object prints one ``key<TAB>value``
  line per field.
* ``rich`` -- a table for lists of records, highlighted JSON otherwise.

``auto`` picks ``rich`` on an interactive terminal and ``plain`` when stdout
is piped or colour is disabled (``NO_COLOR``, ``TERM=dumb`` or ``--no-color``).

The CLI installs one :class:`OutputManager` per invocation in
:func:`~sendpulse_client.app.main_callback`. Library code (the token manager,
the retry coordinator, the response normalizer) reaches it through
:func:`get_output`; when nothing was installed a default manager is created
on first use.
"""

from __future__ import annotations

import json
import os
import sys
import traceback
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from sendpulse_client.exceptions import SendPulseError, error_for_result

if TYPE_CHECKING:
    from sendpulse_client.models import SendPulseResponse


class OutputFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes result data to stdout and diagnostics to stderr.

    Args:
        format: Payload rendering; ``AUTO`` is resolved at construction.
        no_color: Print diagnostics without Rich markup.
        quiet: Drop ``info``, ``success`` and ``suggest`` lines.
        verbose: Show ``debug`` lines and tracebacks of logged exceptions.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # Results
    # ------------------------------------------------------------------ #

    def render_result(self, name: str, result: SendPulseResponse) -> Optional[SendPulseError]:
        """Print the outcome of the API call *name*.

        ``data`` goes to stdout even for error results, since SendPulse puts
        its error details in the body. When the result is an error its
        message is reported on stderr.

        Returns:
            The typed error matching the result (carrying the CLI exit code),
            or ``None`` on success.
        """
        self.debug(f"{name}: HTTP {result.http_status_code}")
        self.format_response(result.data)

        failure = error_for_result(
            result.http_status_code, result.is_error, result.sdk_error_message
        )
        if failure is not None:
            self.error(str(failure))
        return failure

    def format_response(self, data: Any) -> None:
        """Print a payload in the active format. ``None`` prints nothing."""
        if data is None:
            return
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(data, indent=2))
            return

        records = _as_records(data)
        if records is not None:
            self.print_table(*records)
        elif self._format == OutputFormat.RICH and isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_to_json(data, indent=2), "json", word_wrap=True))
        elif isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{_cell(value)}")
        elif isinstance(data, list):
            for item in data:
                self.print_data(_cell(item))
        else:
            self.print_data(str(data))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, TSV with a header line, or JSON records."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows], indent=2))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(f"→ {message}", f"[dim]→ {message}[/dim]")

    def warning(self, message: str) -> None:
        self._diagnostic(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def log_exception(self, message: str, exc: BaseException) -> None:
        """Report a recovered failure as a warning, plus its traceback when verbose."""
        self.warning(f"{message}: {exc}")
        if not self._verbose or exc.__traceback__ is None:
            return
        if self._no_color:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        else:
            self._stderr.print_exception(show_locals=False)

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


# ------------------------------------------------------------------ #
# Payload helpers
# ------------------------------------------------------------------ #


def _to_json(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return _to_json(value)
    return str(value)


def _as_records(data: Any) -> Optional[tuple[list[str], list[list[str]]]]:
    """Return ``(headers, rows)`` when *data* is a non-empty list of objects.

    Records of one listing do not always share the same keys (optional
    fields are omitted), so the headers are the union of all keys in
    first-seen order and missing cells are empty.
    """
    if not isinstance(data, list) or not data:
        return None
    if not all(isinstance(item, dict) for item in data):
        return None
    headers: list[str] = []
    for item in data:
        headers.extend(key for key in item if key not in headers)
    rows = [[_cell(item.get(key)) for key in headers] for item in data]
    return headers, rows


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value) or ``TERM=dumb`` turns colour off."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` makes a new one."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
