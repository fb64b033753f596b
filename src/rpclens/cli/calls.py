"""rpclens calls command - list the call sites found in a source file."""

import json
from typing import TextIO

import click

from rpclens.cli.render import render_calls
from rpclens.cli.utils import get_config, get_console, read_source_or_fail
from rpclens.scanner.scanner import scan


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def calls_command(ctx: click.Context, source: TextIO, as_json: bool) -> None:
    """List call sites in SOURCE with their parsed arguments.

    No catalog is needed; scan errors are listed after the calls.
    """
    result = scan(read_source_or_fail(source), client_name=get_config(ctx).scanner.client_name)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    render_calls(get_console(), result.calls, result.errors, label=source.name)
