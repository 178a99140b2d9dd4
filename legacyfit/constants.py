"""
Centralized constants for legacyfit.

This module defines immutable configuration values used across legacyfit,
including bundle metadata keys, search defaults, network settings, machine
model reference sets and logging formats. All values are intended to be
treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "legacyfit/{version}"

# ---------------------------------------------------------------------------
# Bundle metadata
# ---------------------------------------------------------------------------

#: Info.plist key holding the bundle identifier.
BUNDLE_IDENTIFIER_KEY: Final[str] = "CFBundleIdentifier"

#: Info.plist key holding the build ("full") version.
BUNDLE_VERSION_KEY: Final[str] = "CFBundleVersion"

#: Info.plist key holding the marketing ("short") version.
BUNDLE_SHORT_VERSION_KEY: Final[str] = "CFBundleShortVersionString"

#: Location of the metadata file inside an application bundle.
INFO_PLIST_SUBPATH: Final[str] = "Contents/Info.plist"

#: Directory suffix identifying an application bundle.
APP_BUNDLE_SUFFIX: Final[str] = ".app"

# ---------------------------------------------------------------------------
# Search defaults
# ---------------------------------------------------------------------------

#: Default search scope for installed applications.
DEFAULT_SEARCH_ROOT: Final[str] = "/Applications"

#: Maximum directory depth walked below the search root.
MAX_SEARCH_DEPTH: Final[int] = 4

# ---------------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------------

#: Builds sometimes embed extra qualifiers; only this many segments count.
MAX_VERSION_SEGMENTS: Final[int] = 3

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Remote catalog location; empty means built-in targets only.
DEFAULT_CATALOG_URL: Final[str] = ""

#: Whether ``check`` refreshes the catalog before resolving.
DEFAULT_REFRESH_CATALOG: Final[bool] = False

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

# ---------------------------------------------------------------------------
# Hardware
# ---------------------------------------------------------------------------

#: Newest model of each Mac family that shipped with macOS Mojave.
LAST_MODELS_FOR_MOJAVE: Final[Sequence[str]] = (
    "iMac19,2",
    "iMacPro1,1",
    "MacBook10,1",
    "MacBookAir8,2",
    "MacBookPro15,4",
    "Macmini8,1",
    "MacPro6,1",
)

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
