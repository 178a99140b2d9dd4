"""Compatibility catalog for legacyfit.

:class:`CompatibilityCatalog` answers version questions about a single
:class:`~legacyfit.models.target.ApplicationTarget`. It is immutable and
cheap to build, so callers create one per target selection.

:class:`CatalogStore` owns the set of known targets. A remote refresh
validates the whole document first and then swaps the mapping in one
step, so readers observe either the old or the new catalog, never a mix.

Typical usage::

    from legacyfit.utils.http import HTTPClient
    from legacyfit.core.catalog import CatalogStore

    store = CatalogStore()
    async with HTTPClient() as client:
        await store.refresh(client, "https://example.org/catalog.plist")

    catalog = store.catalog_for("aperture")
    catalog.is_compatible("3.6")   # True
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from legacyfit.exceptions import UnknownTargetError
from legacyfit.models.target import ApplicationTarget
from legacyfit.utils.http import HTTPClient
from legacyfit.utils.logger import get_logger
from legacyfit.utils.version_utils import (
    Ordering,
    compare,
    is_newer,
    is_older,
    normalize,
)
from legacyfit.core.targets import (
    BUILTIN_TARGETS,
    decode_catalog_document,
    parse_catalog_document,
)

logger = get_logger("catalog")

__all__ = ["CompatibilityCatalog", "CatalogStore", "fetch_catalog_document"]


# ---------------------------------------------------------------------------
# Per-target queries
# ---------------------------------------------------------------------------


class CompatibilityCatalog:
    """Version checks for one application target.

    Args:
        target: The target whose compatibility matrix is queried.

    Example::

        >>> catalog = CompatibilityCatalog(target)
        >>> catalog.is_compatible("9.6")
        True
        >>> catalog.is_too_new("9.7")
        True
    """

    __slots__ = ("target",)

    def __init__(self, target: ApplicationTarget) -> None:
        self.target = target

    @property
    def latest_compatible_version(self) -> Optional[str]:
        return self.target.latest_compatible_version

    @property
    def latest_update_version(self) -> Optional[str]:
        """Newest version reachable by a vendor minor update.

        Falls back to the latest compatible version, which leaves no
        minor-update window.
        """
        return self.target.latest_update_version or self.target.latest_compatible_version

    def is_compatible(self, short_version: str) -> bool:
        """Exact membership test; numerically close versions do not count."""
        return short_version in self.target.compatible_versions

    def is_already_patched(
        self,
        bundle_id: str,
        full_version: str,
        short_version: str,
    ) -> bool:
        """Return True if the bundle carries the patch's identifier or a
        post-patch marker version."""
        if self.target.patched_bundle_id and bundle_id == self.target.patched_bundle_id:
            return True
        markers = self.target.patched_versions
        return bool(full_version and full_version in markers) or bool(
            short_version and short_version in markers
        )

    def is_too_new(self, found_version: str) -> bool:
        """Return True if *found_version* is past every compatible entry and
        past the latest known update."""
        if not self.target.compatible_versions:
            return False
        found = normalize(found_version)
        if not all(is_newer(found, version) for version in self.target.compatible_versions):
            return False
        latest_update = self.latest_update_version
        return latest_update is None or is_newer(found, latest_update)

    def requires_only_minor_update(self, found_version: str) -> bool:
        """Return True if *found_version* lies strictly between the latest
        compatible version and the latest known update."""
        latest = self.latest_compatible_version
        latest_update = self.latest_update_version
        if latest is None or latest_update is None:
            return False

        low, high = latest, latest_update
        if compare(normalize(low), normalize(high)) is Ordering.GREATER:
            low, high = high, low

        found = normalize(found_version)
        return is_newer(found, low) and is_older(found, high)

    def is_outdated_build(self, full_version: str) -> bool:
        """Return True if *full_version* predates the latest compatible build.

        An empty build string is never outdated.
        """
        latest = self.latest_compatible_version
        if not full_version or latest is None:
            return False
        return is_older(full_version, latest)

    def __repr__(self) -> str:
        return f"CompatibilityCatalog(target={self.target.key!r})"


# ---------------------------------------------------------------------------
# Target store with atomic refresh
# ---------------------------------------------------------------------------


async def fetch_catalog_document(client: HTTPClient, url: str) -> Dict[str, Any]:
    """Download and decode a catalog document.

    Raises:
        NetworkError: The download failed.
        CatalogError: The body is not a plist or JSON mapping.
    """
    logger.info("Fetching catalog from %s", url)
    content = await client.get_content(url)
    return decode_catalog_document(content, source=url)


class CatalogStore:
    """Holds every known target and swaps them atomically on refresh.

    Args:
        targets: Initial targets. Defaults to the built-in table.
    """

    def __init__(self, targets: Optional[Iterable[ApplicationTarget]] = None) -> None:
        initial = BUILTIN_TARGETS if targets is None else targets
        self._lock = threading.Lock()
        self._targets: Mapping[str, ApplicationTarget] = MappingProxyType(
            {target.key: target for target in initial}
        )
        self._revision = 0

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    @property
    def revision(self) -> int:
        """Incremented on every successful refresh."""
        return self._revision

    def snapshot(self) -> Mapping[str, ApplicationTarget]:
        """Return the current read-only ``key → target`` mapping."""
        return self._targets

    def keys(self) -> List[str]:
        return list(self._targets)

    def get(self, key: str) -> ApplicationTarget:
        """Return the target registered under *key*.

        Raises:
            UnknownTargetError: No such target.
        """
        try:
            return self._targets[key]
        except KeyError:
            raise UnknownTargetError(key) from None

    def catalog_for(self, key: str) -> CompatibilityCatalog:
        return CompatibilityCatalog(self.get(key))

    def __contains__(self, key: object) -> bool:
        return key in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def apply_document(
        self,
        document: Mapping[str, Any],
        *,
        source: Optional[str] = None,
    ) -> int:
        """Merge a decoded catalog document into the store.

        Entries replace (or extend) targets with the same key; targets the
        document does not mention are kept. The document is validated in
        full before the swap.

        Returns:
            Number of targets the document defined.

        Raises:
            CatalogError: The document is malformed; the store is unchanged.
        """
        with self._lock:
            current = self._targets
            parsed = parse_catalog_document(document, current, source=source)
            merged = dict(current)
            merged.update(parsed)
            self._targets = MappingProxyType(merged)
            self._revision += 1

        logger.info("Catalog updated with %d target(s)", len(parsed))
        return len(parsed)

    async def refresh(self, client: HTTPClient, url: str) -> int:
        """Fetch *url* and apply it with :meth:`apply_document`."""
        document = await fetch_catalog_document(client, url)
        return self.apply_document(document, source=url)
