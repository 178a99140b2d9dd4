"""Installation discovery for legacyfit.

A scan asks a :class:`MetadataSearch` backend for bundles whose identifier
contains a filter string, waits for the backend to report that it has
gathered every currently known match, and then re-reads each match's
``Info.plist`` to build :class:`~legacyfit.models.DiscoveredInstallation`
records.

Only the most recently started scan is acted upon. Every call to
:meth:`InstallationScanner.start` returns a new :class:`ScanHandle`; a
completion that arrives for any other handle is discarded.

Typical usage::

    scanner = InstallationScanner()
    installations = await scanner.scan("com.apple.Aperture", "/Applications")
    if installations is None:
        ...  # superseded by a newer scan
"""

from __future__ import annotations

import os
import asyncio
from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from legacyfit.models.installation import DiscoveredInstallation
from legacyfit.utils.bundle import BundleInfoReader
from legacyfit.utils.logger import get_logger
from legacyfit.constants import APP_BUNDLE_SUFFIX, DEFAULT_SEARCH_ROOT, MAX_SEARCH_DEPTH

logger = get_logger("scanner")

__all__ = [
    "FilesystemSearch",
    "InstallationScanner",
    "MetadataSearch",
    "ScanHandle",
    "SearchEvent",
    "SearchEventKind",
    "SearchHit",
    "SearchSession",
]


# ---------------------------------------------------------------------------
# Search backend interface
# ---------------------------------------------------------------------------


class SearchEventKind(str, Enum):
    """Kinds of event a running search delivers."""

    PROGRESS = "progress"
    UPDATE = "update"
    FINISHED = "finished"


@dataclass(frozen=True)
class SearchHit:
    """A bundle the search backend matched."""

    path: str
    bundle_id: str


@dataclass(frozen=True)
class SearchEvent:
    """One event from a running search.

    ``UPDATE`` events carry new hits; the ``FINISHED`` event carries the
    complete result set known at that point.
    """

    kind: SearchEventKind
    hits: Tuple[SearchHit, ...] = ()


class SearchSession:
    """A running metadata search.

    Backends post events with :meth:`post`; the scanner consumes them with
    :meth:`events`. Once :meth:`stop` is called, later events are dropped
    and any pending consumer is released.
    """

    def __init__(self, contains: str, scope: str) -> None:
        self.contains = contains
        self.scope = scope
        self.task: Optional["asyncio.Task[None]"] = None
        self._queue: "asyncio.Queue[Optional[SearchEvent]]" = asyncio.Queue()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def post(self, event: SearchEvent) -> None:
        if not self._stopped:
            self._queue.put_nowait(event)

    def stop(self) -> None:
        if not self._stopped:
            self._stopped = True
            self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[SearchEvent]:
        """Yield events until ``FINISHED`` is delivered or the session stops."""
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
            if event.kind is SearchEventKind.FINISHED:
                return

    def __repr__(self) -> str:
        return f"SearchSession(contains={self.contains!r}, scope={self.scope!r})"


class MetadataSearch(Protocol):
    """A live bundle search such as a filesystem index query."""

    def start_search(self, contains: str, scope: str) -> SearchSession:
        ...

    def stop_search(self, session: SearchSession) -> None:
        ...


# ---------------------------------------------------------------------------
# Default backend: walk the search root
# ---------------------------------------------------------------------------


class FilesystemSearch:
    """Search backend that walks *scope* for ``.app`` bundles.

    Bundles are not descended into. Directories that cannot be listed are
    skipped.

    Args:
        reader: Reader used to obtain each bundle's identifier.
        max_depth: How many directory levels below *scope* to visit.
    """

    def __init__(
        self,
        reader: Optional[BundleInfoReader] = None,
        max_depth: int = MAX_SEARCH_DEPTH,
    ) -> None:
        self.reader = reader or BundleInfoReader()
        self.max_depth = max_depth

    def start_search(self, contains: str, scope: str) -> SearchSession:
        session = SearchSession(contains, scope)
        session.task = asyncio.get_running_loop().create_task(self._run(session))
        return session

    def stop_search(self, session: SearchSession) -> None:
        session.stop()
        if session.task is not None and not session.task.done():
            session.task.cancel()

    async def _run(self, session: SearchSession) -> None:
        """Walk the scope and post events; always ends *session*.

        Directory listing and plist parsing run in worker threads. If the
        walk fails, the session is stopped without a ``FINISHED`` event so
        that waiting consumers are released.
        """
        try:
            session.post(SearchEvent(SearchEventKind.PROGRESS))
            hits: List[SearchHit] = []

            bundles = await asyncio.to_thread(
                lambda: list(iter_app_bundles(Path(session.scope), self.max_depth))
            )
            for bundle_path in bundles:
                info = await asyncio.to_thread(self.reader.try_read, bundle_path)
                if info is not None and session.contains in info.bundle_id:
                    hit = SearchHit(path=str(bundle_path), bundle_id=info.bundle_id)
                    hits.append(hit)
                    session.post(SearchEvent(SearchEventKind.UPDATE, (hit,)))

            logger.debug("Search for %r under %s found %d bundle(s)", session.contains, session.scope, len(hits))
            session.post(SearchEvent(SearchEventKind.FINISHED, tuple(hits)))
        except Exception:
            logger.exception("Search for %r under %s failed", session.contains, session.scope)
        finally:
            session.stop()


def iter_app_bundles(root: Path, max_depth: int = MAX_SEARCH_DEPTH) -> Iterator[Path]:
    """Yield ``.app`` directories below *root*, in sorted order per level."""
    if root.suffix == APP_BUNDLE_SUFFIX and root.is_dir():
        yield root
        return

    pending: List[Tuple[Path, int]] = [(root, 0)]
    while pending:
        directory, depth = pending.pop(0)
        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", directory, exc)
            continue

        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue
            path = Path(entry.path)
            if path.suffix == APP_BUNDLE_SUFFIX:
                yield path
            elif depth + 1 < max_depth:
                pending.append((path, depth + 1))


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanHandle:
    """Identity of one scan. Compared by identity, never by value."""

    generation: int
    bundle_filter: str
    search_root: str


class InstallationScanner:
    """Discovers installed bundles matching a bundle identifier filter.

    Args:
        search: Metadata search backend. Defaults to :class:`FilesystemSearch`.
        reader: Bundle metadata reader used for the final re-read.
    """

    def __init__(
        self,
        search: Optional[MetadataSearch] = None,
        reader: Optional[BundleInfoReader] = None,
    ) -> None:
        self.reader = reader or BundleInfoReader()
        self.search: MetadataSearch = search or FilesystemSearch()
        self._generation = 0
        self._current: Optional[ScanHandle] = None
        self._session: Optional[SearchSession] = None

    @property
    def current(self) -> Optional[ScanHandle]:
        return self._current

    def is_current(self, handle: ScanHandle) -> bool:
        return handle is self._current

    def start(self, bundle_filter: str, search_root: str = DEFAULT_SEARCH_ROOT) -> ScanHandle:
        """Start a scan, dropping interest in any scan still running."""
        self.cancel()
        self._generation += 1
        handle = ScanHandle(self._generation, bundle_filter, search_root)
        logger.debug("Starting scan %d for %r under %s", handle.generation, bundle_filter, search_root)
        self._session = self.search.start_search(bundle_filter, search_root)
        self._current = handle
        return handle

    def cancel(self) -> None:
        """Stop event delivery for the current scan and forget its handle."""
        if self._session is not None:
            self.search.stop_search(self._session)
            self._session = None
        if self._current is not None:
            logger.debug("Cancelled scan %d", self._current.generation)
        self._current = None

    async def results(self, handle: ScanHandle) -> Optional[List[DiscoveredInstallation]]:
        """Wait for *handle*'s completion and return what it found.

        Returns:
            The discovered installations, or ``None`` if *handle* was
            superseded or cancelled before its completion arrived.
        """
        session = self._session
        if not self.is_current(handle) or session is None:
            logger.debug("Ignoring results request for stale scan %d", handle.generation)
            return None

        hits: Dict[str, SearchHit] = {}
        finished = False
        async for event in session.events():
            if not self.is_current(handle):
                break
            for hit in event.hits:
                hits.setdefault(hit.path, hit)
            if event.kind is SearchEventKind.FINISHED:
                finished = True

        if not finished or not self.is_current(handle):
            logger.debug("Discarding completion of stale scan %d", handle.generation)
            return None

        self.search.stop_search(session)
        self._session = None
        installations = await asyncio.to_thread(
            self._read_installations, list(hits.values()), handle.bundle_filter
        )
        if not self.is_current(handle):
            logger.debug("Discarding results of scan %d superseded during re-read", handle.generation)
            return None
        return installations

    async def scan(
        self,
        bundle_filter: str,
        search_root: str = DEFAULT_SEARCH_ROOT,
    ) -> Optional[List[DiscoveredInstallation]]:
        """:meth:`start` a scan and await its :meth:`results`."""
        return await self.results(self.start(bundle_filter, search_root))

    def _read_installations(
        self,
        hits: Iterable[SearchHit],
        bundle_filter: str,
    ) -> List[DiscoveredInstallation]:
        installations: List[DiscoveredInstallation] = []
        for hit in hits:
            # The bundle may have been replaced since the search saw it.
            info = self.reader.try_read(hit.path)
            if info is None:
                continue
            if bundle_filter not in info.bundle_id:
                logger.debug("Bundle at %s no longer matches %r", hit.path, bundle_filter)
                continue
            installations.append(
                DiscoveredInstallation(
                    bundle_id=info.bundle_id,
                    path=hit.path,
                    short_version=info.short_version,
                    full_version=info.full_version,
                )
            )
        logger.info("Found %d installation(s) matching %r", len(installations), bundle_filter)
        return installations
