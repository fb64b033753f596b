"""rpclens complete command - catalog completions at an offset."""

import json
from pathlib import Path
from typing import TextIO

import click

from rpclens.analyzer import Analyzer
from rpclens.cli.render import render_completion
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
@click.option("--offset", type=click.IntRange(min=0), default=None, help="Cursor offset (default: end of text)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def complete_command(
    ctx: click.Context,
    source: TextIO,
    catalog_path: Path,
    offset: int | None,
    as_json: bool,
) -> None:
    """Show catalog completions for the call chain before OFFSET in SOURCE."""
    catalog = load_catalog_or_fail(catalog_path)
    text = read_source_or_fail(source)
    cursor = len(text) if offset is None else min(offset, len(text))
    completion = Analyzer(catalog, config=get_config(ctx)).complete(text, cursor)

    if as_json:
        click.echo(json.dumps(completion.to_dict(), indent=2, ensure_ascii=False))
        return

    render_completion(get_console(), completion)
