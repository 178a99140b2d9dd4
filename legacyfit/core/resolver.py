"""Patch eligibility resolution for legacyfit.

:class:`EligibilityResolver` turns the installations found by one scan into
exactly one :class:`~legacyfit.models.outcome.ClassificationOutcome`.

Precedence, in a single pass over the candidates:

1. **Already patched** short-circuits: the first patched candidate wins
   regardless of what else is installed.
2. **Compatible** candidates: the first one found is kept; later
   compatible candidates are ignored.
3. **Incompatible** candidates: the first version seen is tracked, unless
   it cannot be fixed by a minor update and a later one can, in which case
   the later one replaces it.

After the pass a compatible candidate yields :class:`CompatibleUnpatched`,
or :class:`CompatibleOutdatedBuild` when its build predates the latest
compatible build. Without one the tracked incompatible version yields
:class:`IncompatibleTooNew` or :class:`IncompatibleTooOld`, and no
candidates at all yields :class:`NotInstalled`.

Candidate order comes from filesystem enumeration and is not meaningful;
the tie-breaks above are what make the result deterministic for a given
order.
"""

from __future__ import annotations

from typing import Iterable, Optional

from legacyfit.core.catalog import CompatibilityCatalog
from legacyfit.models.installation import DiscoveredInstallation
from legacyfit.models.outcome import (
    AlreadyPatched,
    ClassificationOutcome,
    CompatibleOutdatedBuild,
    CompatibleUnpatched,
    IncompatibleTooNew,
    IncompatibleTooOld,
    ManualSelectionInvalid,
    NotInstalled,
)
from legacyfit.utils.logger import get_logger

logger = get_logger("resolver")

__all__ = ["EligibilityResolver", "resolve", "validate_manual_selection"]


class EligibilityResolver:
    """Classifies scan results against one target's catalog.

    Args:
        catalog: Compatibility data of the selected target.

    Example::

        >>> resolver = EligibilityResolver(CompatibilityCatalog(target))
        >>> resolver.resolve([])
        NotInstalled()
    """

    def __init__(self, catalog: CompatibilityCatalog) -> None:
        self.catalog = catalog

    def resolve(self, candidates: Iterable[DiscoveredInstallation]) -> ClassificationOutcome:
        """Return the single outcome for *candidates*.

        Never raises for classification reasons; an empty iterable is
        :class:`NotInstalled`.
        """
        catalog = self.catalog
        compatible: Optional[DiscoveredInstallation] = None
        incompatible_version: Optional[str] = None
        incompatible_is_minor = False

        for candidate in candidates:
            if catalog.is_already_patched(
                candidate.bundle_id,
                candidate.full_version,
                candidate.short_version,
            ):
                logger.debug("Already patched: %s", candidate)
                return AlreadyPatched(path=candidate.path)

            if catalog.is_compatible(candidate.short_version):
                logger.debug("Compatible: %s", candidate)
                if compatible is None:
                    compatible = candidate
                continue

            logger.debug("Incompatible: %s", candidate)
            if incompatible_version is None:
                incompatible_version = candidate.short_version
                incompatible_is_minor = catalog.requires_only_minor_update(candidate.short_version)
            elif not incompatible_is_minor and catalog.requires_only_minor_update(candidate.short_version):
                incompatible_version = candidate.short_version
                incompatible_is_minor = True

        if compatible is not None:
            if catalog.is_outdated_build(compatible.full_version):
                return CompatibleOutdatedBuild(
                    path=compatible.path,
                    full_version=compatible.full_version,
                    short_version=compatible.short_version,
                )
            return CompatibleUnpatched(
                path=compatible.path,
                full_version=compatible.full_version,
                short_version=compatible.short_version,
            )

        if incompatible_version is None:
            return NotInstalled()

        if catalog.is_too_new(incompatible_version):
            return IncompatibleTooNew(short_version=incompatible_version)
        return IncompatibleTooOld(
            short_version=incompatible_version,
            only_needs_minor_update=incompatible_is_minor,
        )

    def validate_manual_selection(self, installation: DiscoveredInstallation) -> ClassificationOutcome:
        """Check a bundle the user located by hand.

        The selection is accepted when its build or marketing version is a
        compatible version and its identifier belongs to the target.
        """
        target = self.catalog.target
        versions = target.compatible_versions
        matches_version = (
            bool(installation.full_version) and installation.full_version in versions
        ) or (bool(installation.short_version) and installation.short_version in versions)

        bundle_id = installation.bundle_id
        matches_id = bool(bundle_id) and (
            bundle_id in target.existing_bundle_id
            or bool(target.patched_bundle_id and bundle_id in target.patched_bundle_id)
        )

        if matches_version and matches_id:
            return CompatibleUnpatched(
                path=installation.path,
                full_version=installation.full_version,
                short_version=installation.short_version,
            )

        logger.info("Rejected manual selection %s for %s", installation, target.key)
        return ManualSelectionInvalid(
            path=installation.path,
            bundle_id=bundle_id,
            short_version=installation.short_version,
        )


def resolve(
    candidates: Iterable[DiscoveredInstallation],
    catalog: CompatibilityCatalog,
) -> ClassificationOutcome:
    """Shorthand for ``EligibilityResolver(catalog).resolve(candidates)``."""
    return EligibilityResolver(catalog).resolve(candidates)


def validate_manual_selection(
    installation: DiscoveredInstallation,
    catalog: CompatibilityCatalog,
) -> ClassificationOutcome:
    return EligibilityResolver(catalog).validate_manual_selection(installation)
