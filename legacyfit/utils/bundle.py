"""
Application bundle metadata reader for legacyfit.

Reads ``Contents/Info.plist`` from ``.app`` bundles. Results are cached per
path, and the cache must be invalidated before a re-read: an installer may
replace the bundle at the same path between two observations. All
filesystem and parse failures are normalized to
:class:`~legacyfit.exceptions.BundleReadError`.
"""

from __future__ import annotations

import plistlib
import threading
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from legacyfit.utils.logger import get_logger
from legacyfit.exceptions import BundleReadError
from legacyfit.constants import (
    APP_BUNDLE_SUFFIX,
    BUNDLE_IDENTIFIER_KEY,
    BUNDLE_SHORT_VERSION_KEY,
    BUNDLE_VERSION_KEY,
    INFO_PLIST_SUBPATH,
)

logger = get_logger("bundle")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class BundleInfo:
    """Identifier and version strings of one bundle.

    Missing or non-string values are read as empty strings.
    """

    bundle_id: str
    short_version: str
    full_version: str


def is_app_bundle(path: PathLike) -> bool:
    """Return True if *path* names an existing ``.app`` directory."""
    candidate = Path(path)
    return candidate.suffix == APP_BUNDLE_SUFFIX and candidate.is_dir()


def info_plist_path(bundle_path: PathLike) -> Path:
    """Return the ``Info.plist`` location inside *bundle_path*."""
    return Path(bundle_path) / INFO_PLIST_SUBPATH


def _string_value(info: Dict[str, Any], key: str) -> str:
    value = info.get(key)
    if not isinstance(value, str):
        return ""
    # Some bundles pad version strings with NUL bytes.
    return value.replace("\x00", "").strip()


def load_info_dictionary(bundle_path: PathLike) -> Dict[str, Any]:
    """Parse the bundle's ``Info.plist`` without caching.

    Raises:
        BundleReadError: The plist is missing, unreadable or not a dictionary.
    """
    plist = info_plist_path(bundle_path)
    try:
        with open(plist, "rb") as fh:
            data = plistlib.load(fh)
    except FileNotFoundError as exc:
        raise BundleReadError(
            "Bundle has no Info.plist",
            bundle_path=str(bundle_path),
            original_error=exc,
        ) from exc
    except Exception as exc:
        # plistlib raises assorted exception types on malformed content
        raise BundleReadError(
            f"Cannot read Info.plist: {exc}",
            bundle_path=str(bundle_path),
            original_error=exc,
        ) from exc

    if not isinstance(data, dict):
        raise BundleReadError(
            "Info.plist is not a dictionary",
            bundle_path=str(bundle_path),
        )
    return data


class BundleInfoReader:
    """Cached ``Info.plist`` reader.

    Example::

        reader = BundleInfoReader()
        reader.invalidate("/Applications/Aperture.app")
        info = reader.read_info("/Applications/Aperture.app")
        print(info.short_version)
    """

    def __init__(self) -> None:
        self._cache: Dict[str, BundleInfo] = {}
        self._lock = threading.Lock()

    def read_info(self, bundle_path: PathLike) -> BundleInfo:
        """Return metadata for *bundle_path*, from cache when available.

        Raises:
            BundleReadError: Metadata cannot be read or has no identifier.
        """
        key = str(bundle_path)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        info = load_info_dictionary(bundle_path)
        bundle_id = _string_value(info, BUNDLE_IDENTIFIER_KEY)
        if not bundle_id:
            raise BundleReadError(
                "Info.plist has no bundle identifier",
                bundle_path=key,
            )

        result = BundleInfo(
            bundle_id=bundle_id,
            short_version=_string_value(info, BUNDLE_SHORT_VERSION_KEY),
            full_version=_string_value(info, BUNDLE_VERSION_KEY),
        )
        with self._lock:
            self._cache[key] = result
        return result

    def read_fresh(self, bundle_path: PathLike) -> BundleInfo:
        """Invalidate any cached entry for *bundle_path*, then read it."""
        self.invalidate(bundle_path)
        return self.read_info(bundle_path)

    def try_read(self, bundle_path: PathLike) -> Optional[BundleInfo]:
        """Like :meth:`read_fresh` but returns ``None`` on read failure."""
        try:
            return self.read_fresh(bundle_path)
        except BundleReadError as exc:
            logger.debug("Skipping unreadable bundle %s: %s", bundle_path, exc)
            return None

    def invalidate(self, bundle_path: PathLike) -> None:
        """Drop the cached entry for *bundle_path*, if any."""
        with self._lock:
            self._cache.pop(str(bundle_path), None)

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
