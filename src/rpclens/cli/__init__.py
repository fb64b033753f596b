"""CLI module."""

from rpclens.cli.main import cli

__all__ = ["cli"]
