"""rpclens watch command - re-check a source file whenever it or the catalog changes."""

from collections.abc import Iterable
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.markup import escape
from watchfiles import watch

from rpclens.analyzer import Analysis, Analyzer
from rpclens.catalog.loader import load_catalog
from rpclens.cli.render import render_diagnostics, status
from rpclens.cli.utils import get_config, get_console, load_catalog_or_fail
from rpclens.core.errors import CatalogError

log = structlog.get_logger(__name__)


def run_check(analyzer: Analyzer, source: Path, console: Console) -> Analysis | None:
    """Analyze the current contents of `source` and render the result.

    A source that cannot be read is reported and yields None.
    """
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("source_read_failed", path=str(source), error=str(e))
        status(console, escape(f"Cannot read {source}: {e}"), style="error")
        return None
    analysis = analyzer.analyze(text)
    render_diagnostics(console, text, analysis.diagnostics, label=str(source))
    return analysis


def handle_changes(
    analyzer: Analyzer,
    changed: Iterable[str],
    *,
    source: Path,
    catalog_path: Path,
    console: Console,
) -> Analysis | None:
    """React to one batch of file changes.

    A catalog change reloads the catalog first; a catalog that fails to load
    is reported and the previous one is kept. Returns the fresh analysis, or
    None when neither watched file changed or the source cannot be read.
    """
    changed_paths = {Path(p).resolve() for p in changed}
    catalog_changed = catalog_path.resolve() in changed_paths
    if not catalog_changed and source.resolve() not in changed_paths:
        return None

    if catalog_changed:
        try:
            analyzer.set_catalog(load_catalog(catalog_path))
            status(console, escape(f"Reloaded catalog {catalog_path}"), style="success")
        except CatalogError as e:
            log.warning("catalog_reload_failed", path=str(catalog_path), error=e.message)
            status(console, escape(f"Catalog reload failed, keeping previous: {e.message}"), style="error")

    if not source.exists():
        status(console, escape(f"{source} no longer exists"), style="warning")
        return None

    console.rule(style="dim")
    return run_check(analyzer, source, console)


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--catalog",
    "catalog_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Procedure catalog (.json or .yaml)",
)
@click.option(
    "--debounce",
    type=click.IntRange(min=0),
    default=300,
    show_default=True,
    help="Milliseconds to wait for changes to settle",
)
@click.pass_context
def watch_command(ctx: click.Context, source: Path, catalog_path: Path, debounce: int) -> None:
    """Re-check SOURCE each time it or the catalog changes (Ctrl+C to stop)."""
    console = get_console()
    analyzer = Analyzer(load_catalog_or_fail(catalog_path), config=get_config(ctx))
    run_check(analyzer, source, console)
    status(console, escape(f"Watching {source} and {catalog_path}"))

    for changes in watch(source, catalog_path, debounce=debounce, raise_interrupt=False):
        handle_changes(
            analyzer,
            (path for _, path in changes),
            source=source,
            catalog_path=catalog_path,
            console=console,
        )
