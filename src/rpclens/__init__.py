"""rpclens - Static checking of RPC call sites against a procedure catalog."""

__version__ = "0.1.0"

from rpclens.analyzer import Analysis, Analyzer  # noqa: E402
from rpclens.catalog import CatalogBuilder, ProcedureCatalog, load_catalog  # noqa: E402
from rpclens.scanner import scan  # noqa: E402
from rpclens.validation import ValidationCache, validate, validate_call  # noqa: E402

__all__ = [
    "__version__",
    "Analysis",
    "Analyzer",
    "CatalogBuilder",
    "ProcedureCatalog",
    "ValidationCache",
    "load_catalog",
    "scan",
    "validate",
    "validate_call",
]
