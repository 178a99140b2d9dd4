"""
Utility helpers for legacyfit.

This package provides reusable utilities used across legacyfit, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Application bundle metadata reading
- Async HTTP client utilities
- Version and machine model comparison helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from legacyfit.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from legacyfit.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_details,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Bundle utilities
# ---------------------------------------------------------------------------

from legacyfit.utils.bundle import BundleInfo, BundleInfoReader, is_app_bundle

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from legacyfit.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from legacyfit.utils.version_utils import (
    Ordering,
    compare,
    get_update_type,
    is_newer_model,
    normalize,
    shipped_after,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_details",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Bundles
    "BundleInfo",
    "BundleInfoReader",
    "is_app_bundle",
    # HTTP
    "HTTPClient",
    # Version utilities
    "Ordering",
    "compare",
    "normalize",
    "get_update_type",
    "is_newer_model",
    "shipped_after",
]
