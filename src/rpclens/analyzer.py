"""Editor-host facade over the scan → validate pipeline.

An Analyzer owns the current catalog and the validation cache. Hosts call
`analyze()` with the full document text on every change (serialized and
debounced on their side), `set_catalog()` when the catalog is replaced, and
`call_at()` to pick the call under the cursor for execution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any

import structlog

from rpclens.catalog.completion import Completion, complete
from rpclens.catalog.models import ProcedureCatalog
from rpclens.config.models import RpcLensConfig
from rpclens.core.logging import clear_evaluation_id, set_evaluation_id
from rpclens.scanner.models import ParsedCall, ScanError, ScanErrorCode
from rpclens.scanner.scanner import scan
from rpclens.validation.cache import ValidationCache
from rpclens.validation.models import Diagnostic, DiagnosticCode, Severity, ValidationResult
from rpclens.validation.validator import validate

log = structlog.get_logger(__name__)

_SCAN_CODES = {
    ScanErrorCode.UNBALANCED_PARENTHESES: DiagnosticCode.UNBALANCED_PARENTHESES,
    ScanErrorCode.PARSE_FAILURE: DiagnosticCode.SCAN_ERROR,
}


@dataclass
class Analysis:
    """Everything one evaluation pass produced."""

    calls: list[ParsedCall] = field(default_factory=list)
    scan_errors: list[ScanError] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "calls": [c.to_dict() for c in self.calls],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class Analyzer:
    """Runs scan and cached validation for one catalog at a time."""

    def __init__(self, catalog: ProcedureCatalog, *, config: RpcLensConfig | None = None) -> None:
        self._config = config or RpcLensConfig()
        self._catalog = catalog
        self._source = self._config.diagnostics.source
        self._cache = ValidationCache(
            capacity=self._config.cache.capacity,
            validator=partial(validate, source=self._source),
        )

    @property
    def catalog(self) -> ProcedureCatalog:
        return self._catalog

    @property
    def cache(self) -> ValidationCache:
        return self._cache

    @property
    def client_name(self) -> str | None:
        return self._config.scanner.client_name

    def set_catalog(self, catalog: ProcedureCatalog) -> None:
        """Replace the catalog; cached results are dropped unconditionally."""
        self._catalog = catalog
        self._cache.clear()
        log.info("catalog_replaced", procedures=sum(1 for _ in catalog.walk()))

    def analyze(self, text: str) -> Analysis:
        """Scan `text` and validate its calls, returning ordered diagnostics.

        Order: scan errors, then validation errors, then warnings, each in
        discovery order.
        """
        set_evaluation_id()
        try:
            scanned = scan(text, client_name=self.client_name)
            validation = self._cache.validate(text, scanned.calls, self._catalog)
            diagnostics = [self._scan_diagnostic(e) for e in scanned.errors]
            diagnostics.extend(validation.diagnostics)
            log.debug(
                "analysis_complete",
                calls=len(scanned.calls),
                scan_errors=len(scanned.errors),
                diagnostics=len(diagnostics),
                cache_size=self._cache.size(),
            )
            return Analysis(
                calls=scanned.calls,
                scan_errors=scanned.errors,
                validation=validation,
                diagnostics=diagnostics,
            )
        finally:
            clear_evaluation_id()

    def call_at(self, text: str, offset: int) -> ParsedCall | None:
        """Return the innermost call whose span contains `offset`."""
        containing = [c for c in scan(text, client_name=self.client_name).calls if c.span.contains(offset)]
        if not containing:
            return None
        return min(containing, key=lambda c: c.span.end - c.span.start)

    def complete(self, text: str, cursor: int) -> Completion:
        """Completion options for the call chain ending at `cursor`."""
        return complete(self._catalog, text[:cursor], client_name=self.client_name)

    def _scan_diagnostic(self, error: ScanError) -> Diagnostic:
        return Diagnostic(
            message=error.message,
            code=_SCAN_CODES[error.code],
            span=error.span,
            severity=Severity.ERROR,
            source=self._source,
        )
