"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (RPCLENS__SECTION__KEY)
3. Project YAML (.rpclens/config.yaml)
4. Global YAML (~/.config/rpclens/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    RPCLENS__<SECTION>__<KEY>=<VALUE>

Examples:
    RPCLENS__LOGGING__LEVEL=DEBUG
    RPCLENS__CACHE__CAPACITY=250
    RPCLENS__SCANNER__CLIENT_NAME=api
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from rpclens.config.constants import (
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_CLIENT_NAME,
    DEFAULT_DIAGNOSTIC_SOURCE,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        RPCLENS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every evaluation pass.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScannerConfig(BaseModel):
    """Call-site scanner configuration.

    Env vars:
        RPCLENS__SCANNER__CLIENT_NAME: Root identifier call chains start from
    """

    client_name: str | None = Field(
        default=DEFAULT_CLIENT_NAME,
        description="Identifier that call chains start from (e.g. 'trpc' in "
        "trpc.user.get.query(...)). Empty or null means the whole chain is the "
        "procedure path.",
    )

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not _IDENTIFIER.fullmatch(v):
            raise ValueError(f"Client name must be an ASCII identifier, got {v!r}")
        return v


class CacheConfig(BaseModel):
    """Validation cache configuration.

    Env vars:
        RPCLENS__CACHE__CAPACITY: Max cached validation results
    """

    capacity: int = Field(
        default=DEFAULT_CACHE_CAPACITY,
        ge=1,
        description="Max cached validation results. Oldest-inserted entries are "
        "evicted first once exceeded.",
    )


class DiagnosticsConfig(BaseModel):
    """Diagnostic presentation configuration.

    Env vars:
        RPCLENS__DIAGNOSTICS__SOURCE: Source label attached to every diagnostic
    """

    source: str = Field(
        default=DEFAULT_DIAGNOSTIC_SOURCE,
        description="Source label editor hosts show next to each diagnostic.",
    )


class RpcLensConfig(BaseModel):
    """Root configuration for rpclens.

    All settings can be configured via:
    1. Environment variables: RPCLENS__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
