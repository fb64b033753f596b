"""rpclens check command - report diagnostics for a source file."""

import json
from pathlib import Path
from typing import TextIO

import click

from rpclens.analyzer import Analyzer
from rpclens.cli.render import render_diagnostics
from rpclens.cli.utils import get_config, get_console, load_catalog_or_fail, read_source_or_fail


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option(
    "--catalog",
    "catalog_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Procedure catalog (.json or .yaml)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check_command(ctx: click.Context, source: TextIO, catalog_path: Path, as_json: bool) -> None:
    """Validate the calls in SOURCE against a procedure catalog.

    SOURCE is a file path, or - for stdin. Exits with status 1 when any error
    is reported.
    """
    catalog = load_catalog_or_fail(catalog_path)
    text = read_source_or_fail(source)
    analysis = Analyzer(catalog, config=get_config(ctx)).analyze(text)

    if as_json:
        click.echo(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    else:
        render_diagnostics(get_console(), text, analysis.diagnostics, label=source.name)

    if analysis.has_errors:
        ctx.exit(1)
