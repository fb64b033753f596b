"""Config module exports."""

from rpclens.config.loader import load_config
from rpclens.config.models import (
    CacheConfig,
    DiagnosticsConfig,
    LoggingConfig,
    LogOutputConfig,
    RpcLensConfig,
    ScannerConfig,
)

__all__ = [
    "load_config",
    "RpcLensConfig",
    "CacheConfig",
    "DiagnosticsConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ScannerConfig",
]
