"""Terminal rendering for CLI output.

Design principles:
- One header line per diagnostic, compiler style: path:line:col
- The offending source line with a caret underline beneath it
- Graceful degradation in non-TTY (no colors, no wrapping surprises in pipes)
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from rpclens.catalog.completion import Completion
from rpclens.scanner.models import ParsedCall, ScanError, value_to_json
from rpclens.validation.models import Diagnostic, Severity

_SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "bold yellow",
}

# Style prefixes
_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
}


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 error" / "3 errors"."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def status(console: Console, message: str, *, style: str = "info") -> None:
    """Print a styled one-line status message."""
    console.print(f"{_STYLES.get(style, '')}{message}", highlight=False)


def _source_excerpt(text: str, diagnostic: Diagnostic) -> Text:
    """The first line of the span with a caret underline."""
    span = diagnostic.span
    line_start = text.rfind("\n", 0, span.start) + 1
    line_end = text.find("\n", span.start)
    if line_end == -1:
        line_end = len(text)
    source_line = text[line_start:line_end]
    underline_end = min(span.end, line_end)
    width = max(1, underline_end - span.start)

    excerpt = Text("    ")
    excerpt.append(source_line)
    excerpt.append("\n    ")
    excerpt.append(" " * (span.start - line_start))
    excerpt.append("^" * width, style=_SEVERITY_STYLES[diagnostic.severity])
    return excerpt


def render_diagnostics(console: Console, text: str, diagnostics: Sequence[Diagnostic], *, label: str) -> None:
    """Print every diagnostic with its source excerpt, then a summary line."""
    for diagnostic in diagnostics:
        header = Text(f"{label}:{diagnostic.span.line}:{diagnostic.span.column}: ")
        header.append(diagnostic.severity.value, style=_SEVERITY_STYLES[diagnostic.severity])
        header.append(f" [{diagnostic.code.value}] ")
        first, _, rest = diagnostic.message.partition("\n")
        header.append(first)
        console.print(header)
        console.print(_source_excerpt(text, diagnostic))
        for extra in rest.strip("\n").splitlines():
            console.print(Text(f"    {extra}", style="dim"))

    errors = sum(1 for d in diagnostics if d.severity is Severity.ERROR)
    warnings = len(diagnostics) - errors
    if not diagnostics:
        status(console, "No problems found", style="success")
    elif errors:
        status(console, f"{pluralize(errors, 'error')}, {pluralize(warnings, 'warning')}", style="error")
    else:
        status(console, pluralize(warnings, "warning"), style="warning")


def render_calls(console: Console, calls: Sequence[ParsedCall], errors: Sequence[ScanError], *, label: str) -> None:
    """Print scanned calls as a table, followed by scan errors."""
    if calls:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Location")
        table.add_column("Procedure")
        table.add_column("Kind")
        table.add_column("Argument", overflow="fold")
        for call in calls:
            table.add_row(
                f"{label}:{call.span.line}:{call.span.column}",
                call.procedure,
                call.kind.value,
                json.dumps(value_to_json(call.argument)),
            )
        console.print(table)
    for error in errors:
        status(console, escape(f"{label}:{error.span.line}:{error.span.column}: {error.message}"), style="error")
    status(console, f"{pluralize(len(calls), 'call')}, {pluralize(len(errors), 'scan error')}")


def render_completion(console: Console, completion: Completion) -> None:
    """Print completion options, one per line."""
    if not completion.items:
        status(console, "No completions", style="warning")
        return
    for item in completion.items:
        line = Text(item.label, style="bold")
        line.append(f"  {item.kind}", style="cyan")
        line.append(f"  → {item.apply}")
        if item.detail:
            line.append(f"  ({item.detail})", style="dim")
        console.print(line)
