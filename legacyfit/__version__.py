"""
legacyfit version information.

Single source of truth for the package version, read by the packaging
metadata, the ``--version`` flag and the HTTP User-Agent header.
"""

from __future__ import annotations

__version__ = "0.1.0.dev0"

#: Human-readable version for CLI banners.
VERSION_STRING = f"legacyfit {__version__}"
