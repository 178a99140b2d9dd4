"""Per-user workflow state.

A :class:`WorkflowSession` is the explicit context object that ties the
selected target, the catalog snapshot taken at selection time and the
installation scanner together. Selecting a different target drops interest
in any scan still running, so a late completion for the old target can
never change what the session reports.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass
from typing import List, Optional, Union

from legacyfit.constants import DEFAULT_SEARCH_ROOT
from legacyfit.core.catalog import CatalogStore, CompatibilityCatalog
from legacyfit.core.resolver import EligibilityResolver
from legacyfit.core.router import WorkflowRouter
from legacyfit.core.scanner import InstallationScanner
from legacyfit.exceptions import BundleReadError
from legacyfit.models.installation import DiscoveredInstallation
from legacyfit.models.outcome import ClassificationOutcome, ManualSelectionInvalid
from legacyfit.models.stage import WorkflowStage
from legacyfit.models.target import ApplicationTarget
from legacyfit.utils.logger import get_logger

logger = get_logger("session")

__all__ = ["LocateResult", "WorkflowSession"]


@dataclass(frozen=True)
class LocateResult:
    """What one locate pass found and decided."""

    installations: List[DiscoveredInstallation]
    outcome: ClassificationOutcome
    stage: WorkflowStage


class WorkflowSession:
    """Holds the selected target and drives locate → resolve → route.

    Args:
        store: Known targets.
        scanner: Installation scanner; a default one is created if omitted.
        search_root: Where scans look for installed bundles.

    Example::

        session = WorkflowSession(CatalogStore())
        session.select_target("aperture")
        result = await session.locate()
        print(result.stage.name)
    """

    def __init__(
        self,
        store: CatalogStore,
        scanner: Optional[InstallationScanner] = None,
        search_root: str = DEFAULT_SEARCH_ROOT,
    ) -> None:
        self.store = store
        self.scanner = scanner or InstallationScanner()
        self.search_root = search_root

        self._target: Optional[ApplicationTarget] = None
        self._catalog: Optional[CompatibilityCatalog] = None
        self.last_result: Optional[LocateResult] = None

    # ------------------------------------------------------------------
    # Target selection
    # ------------------------------------------------------------------

    @property
    def target(self) -> Optional[ApplicationTarget]:
        return self._target

    @property
    def catalog(self) -> Optional[CompatibilityCatalog]:
        return self._catalog

    def select_target(self, key: str) -> ApplicationTarget:
        """Select *key*, cancelling any outstanding scan.

        The catalog is captured now; a later store refresh only takes effect
        on the next selection.

        Raises:
            UnknownTargetError: *key* is not in the store.
        """
        target = self.store.get(key)
        self.cancel()
        self._target = target
        self._catalog = CompatibilityCatalog(target)
        logger.debug("Selected target %s", target.key)
        return target

    def cancel(self) -> None:
        """Back out of the current step; late scan results are ignored."""
        self.scanner.cancel()
        self.last_result = None

    def _require_catalog(self) -> CompatibilityCatalog:
        if self._catalog is None:
            raise RuntimeError("No target selected; call select_target() first")
        return self._catalog

    # ------------------------------------------------------------------
    # Workflow steps
    # ------------------------------------------------------------------

    async def locate(self) -> Optional[LocateResult]:
        """Scan for the selected target and decide the next stage.

        Returns:
            The result, or ``None`` if the scan was superseded (another
            locate, a target change or :meth:`cancel`) before it finished.
        """
        catalog = self._require_catalog()
        target = catalog.target
        installations = await self.scanner.scan(target.existing_bundle_id, self.search_root)
        if installations is None or self._catalog is not catalog:
            return None

        outcome = EligibilityResolver(catalog).resolve(installations)
        stage = WorkflowRouter(target).route(outcome)
        logger.info("%s: %s → %s", target.key, outcome.kind, stage.name)

        self.last_result = LocateResult(installations, outcome, stage)
        return self.last_result

    def inspect(self, bundle_path: Union[str, Path]) -> LocateResult:
        """Validate a bundle located by hand and decide the next stage.

        An unreadable bundle is reported as an invalid selection.
        """
        catalog = self._require_catalog()
        path = str(bundle_path)

        try:
            info = self.scanner.reader.read_fresh(path)
        except BundleReadError as exc:
            logger.info("Cannot read selected bundle: %s", exc)
            outcome: ClassificationOutcome = ManualSelectionInvalid(path=path, bundle_id="", short_version="")
            installations: List[DiscoveredInstallation] = []
        else:
            installation = DiscoveredInstallation(
                bundle_id=info.bundle_id,
                path=path,
                short_version=info.short_version,
                full_version=info.full_version,
            )
            installations = [installation]
            outcome = EligibilityResolver(catalog).validate_manual_selection(installation)

        stage = WorkflowRouter(catalog.target).route(outcome)
        self.last_result = LocateResult(installations, outcome, stage)
        return self.last_result
