"""Bounded memo of validation results keyed by (source text, catalog).

Design:
- Key is (source_text, catalog.serialize()); any change to either is a miss
- Strict FIFO eviction: the oldest-inserted entry goes first, hits do not
  refresh an entry's position
- No in-place updates and no invalidation beyond clear(); callers clear on
  catalog replacement, since keys built from an old catalog would otherwise
  linger until pushed out
- One instance per analyzer; touched only from the evaluation path
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from rpclens.catalog.models import ProcedureCatalog
from rpclens.config.constants import DEFAULT_CACHE_CAPACITY
from rpclens.scanner.models import ParsedCall
from rpclens.validation.models import ValidationResult
from rpclens.validation.validator import validate

log = structlog.get_logger(__name__)

CacheKey = tuple[str, str]
Validator = Callable[[Sequence[ParsedCall], ProcedureCatalog], ValidationResult]


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Cache counters."""

    hits: int
    misses: int
    size: int
    capacity: int


class ValidationCache:
    """FIFO-bounded cache in front of the schema validator."""

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY, validator: Validator = validate) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._validator = validator
        self._store: OrderedDict[CacheKey, ValidationResult] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @staticmethod
    def key_for(source_text: str, catalog: ProcedureCatalog) -> CacheKey:
        return (source_text, catalog.serialize())

    def validate(
        self,
        source_text: str,
        calls: Sequence[ParsedCall],
        catalog: ProcedureCatalog,
    ) -> ValidationResult:
        """Return the cached result for (text, catalog), validating on a miss."""
        key = self.key_for(source_text, catalog)
        cached = self._store.get(key)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        result = self._validator(calls, catalog)
        self._store[key] = result
        if len(self._store) > self._capacity:
            self._store.popitem(last=False)
            log.debug("validation_cache_evicted", size=len(self._store))
        return result

    def get(self, key: CacheKey) -> ValidationResult | None:
        return self._store.get(key)

    def clear(self) -> None:
        """Drop every entry unconditionally."""
        self._store.clear()
        log.debug("validation_cache_cleared")

    def size(self) -> int:
        return len(self._store)

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._store),
            capacity=self._capacity,
        )

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
