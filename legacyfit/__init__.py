"""
legacyfit — compatibility resolution for legacy macOS applications.

legacyfit finds an installed copy of a legacy macOS application, checks the
installed version against the versions a known unlock patch supports, and
decides which workflow stage comes next:

    • Already patched          → completion
    • Compatible, unpatched    → authenticate and patch
    • Compatible, older build  → offer an optional update first
    • Too old / too new        → guidance (update, reinstall, locate manually)
    • Not installed            → guidance (acquire the application)

The patching itself is not part of this package; only the decision is.
"""

from __future__ import annotations

from legacyfit.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "legacyfit Contributors"
__license__ = "Apache-2.0"
__description__ = "Version compatibility resolution for legacy macOS applications."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from legacyfit.core import (  # noqa: E402
    CompatibilityCatalog,
    EligibilityResolver,
    InstallationScanner,
    WorkflowRouter,
    WorkflowSession,
    resolve,
    route,
)

__all__ = [
    "__version__",
    "CompatibilityCatalog",
    "EligibilityResolver",
    "InstallationScanner",
    "WorkflowRouter",
    "WorkflowSession",
    "resolve",
    "route",
]
