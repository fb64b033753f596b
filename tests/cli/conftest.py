"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _no_global_config(tmp_path: Path) -> Generator[None, None, None]:
    """Keep the user's ~/.config/rpclens out of CLI runs."""
    with patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def catalog_file(project_dir: Path, catalog_document: dict) -> Path:
    path = project_dir / "catalog.json"
    path.write_text(json.dumps(catalog_document))
    return path
