"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py.
"""

# =============================================================================
# Defaults shared by config models and library entry points
# =============================================================================

DEFAULT_CLIENT_NAME = "trpc"
"""Root identifier call chains start from when none is configured."""

DEFAULT_DIAGNOSTIC_SOURCE = "rpclens"
"""Source label attached to diagnostics."""

DEFAULT_CACHE_CAPACITY = 100
"""Validation results kept before FIFO eviction."""

# =============================================================================
# Internal Implementation Constants
# =============================================================================

SCAN_FAULT_SPAN_WIDTH = 100
"""Width of the span reported when a call site fails unexpectedly.

Clamped to the end of the text.
"""

PROJECT_CONFIG_DIR = ".rpclens"
"""Per-project directory holding config.yaml."""
