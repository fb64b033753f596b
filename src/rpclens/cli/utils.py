"""CLI utilities."""

from pathlib import Path
from typing import TextIO

import click
from rich.console import Console

from rpclens.catalog.loader import load_catalog
from rpclens.catalog.models import ProcedureCatalog
from rpclens.config.models import RpcLensConfig
from rpclens.core.errors import CatalogError


def get_config(ctx: click.Context) -> RpcLensConfig:
    """Config resolved by the root command, or defaults when run standalone."""
    obj = ctx.find_root().obj or {}
    config = obj.get("config")
    return config if isinstance(config, RpcLensConfig) else RpcLensConfig()


def get_console() -> Console:
    """Console bound to the current stdout (so CliRunner captures it)."""
    return Console(highlight=False)


def load_catalog_or_fail(path: Path) -> ProcedureCatalog:
    """Load a catalog, turning load errors into a clean CLI failure.

    Raises:
        click.ClickException: If the catalog cannot be loaded
    """
    try:
        return load_catalog(path)
    except CatalogError as e:
        raise click.ClickException(e.message) from e


def read_source_or_fail(source: TextIO) -> str:
    """Read a SOURCE argument, turning I/O and decode errors into a clean CLI failure.

    Raises:
        click.ClickException: If the source cannot be read as UTF-8 text
    """
    try:
        return source.read()
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read {source.name}: {e}") from e
