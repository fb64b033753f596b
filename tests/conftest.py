"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local rpclens package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of rpclens modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("rpclens"):
        del sys.modules[module_name]

from rpclens.catalog.models import ProcedureCatalog  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to streams that a test (or CliRunner) may close."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def catalog_document() -> dict:
    """Introspection document with a nested router, a mutation, and a bare query."""
    return {
        "user": {
            "type": "router",
            "children": {
                "get": {
                    "type": "query",
                    "inputSchema": {
                        "type": "object",
                        "properties": {"id": {"type": "string"}},
                        "required": ["id"],
                        "additionalProperties": False,
                    },
                },
                "create": {
                    "type": "mutation",
                    "inputSchema": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "age": {"type": "number"},
                        },
                        "required": ["name"],
                    },
                },
            },
        },
        "health": {"type": "query"},
    }


@pytest.fixture
def catalog(catalog_document: dict) -> ProcedureCatalog:
    return ProcedureCatalog.from_dict(catalog_document)
