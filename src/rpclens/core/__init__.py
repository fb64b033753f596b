"""Core module exports."""

from rpclens.core.errors import (
    CatalogError,
    ConfigError,
    ErrorCode,
    RpcLensError,
)
from rpclens.core.logging import (
    clear_evaluation_id,
    configure_logging,
    get_evaluation_id,
    get_logger,
    set_evaluation_id,
)

__all__ = [
    # Errors
    "RpcLensError",
    "CatalogError",
    "ConfigError",
    "ErrorCode",
    # Logging
    "clear_evaluation_id",
    "configure_logging",
    "get_evaluation_id",
    "get_logger",
    "set_evaluation_id",
]
