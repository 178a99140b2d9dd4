"""
Core functionality exports for legacyfit.

Importing from here keeps user-facing imports clean and stable:

    from legacyfit.core import InstallationScanner, resolve, route
"""

from __future__ import annotations

from legacyfit.core.catalog import CatalogStore, CompatibilityCatalog
from legacyfit.core.targets import BUILTIN_TARGETS
from legacyfit.core.scanner import FilesystemSearch, InstallationScanner, ScanHandle
from legacyfit.core.resolver import EligibilityResolver, resolve, validate_manual_selection
from legacyfit.core.router import WorkflowRouter, route
from legacyfit.core.session import LocateResult, WorkflowSession

__all__ = [
    "BUILTIN_TARGETS",
    "CatalogStore",
    "CompatibilityCatalog",
    "FilesystemSearch",
    "InstallationScanner",
    "ScanHandle",
    "EligibilityResolver",
    "resolve",
    "validate_manual_selection",
    "WorkflowRouter",
    "route",
    "LocateResult",
    "WorkflowSession",
]
