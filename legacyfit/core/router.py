"""Outcome → workflow stage mapping.

:class:`WorkflowRouter` is a pure function of the selected target and a
classification outcome: the same inputs always produce an equal stage, and
nothing is displayed or recorded while routing. Presentation is left to the
caller, which receives named message parameters and no formatted text.

=========================  ==================================
Outcome                    Stage
=========================  ==================================
AlreadyPatched             ShowCompletion
CompatibleUnpatched        ProceedToAuthenticate
CompatibleOutdatedBuild    OfferOptionalUpdate
IncompatibleTooOld         ShowGuidance (too old)
IncompatibleTooNew         ShowGuidance (too new)
ManualSelectionInvalid     ShowGuidance (invalid selection)
NotInstalled               ShowGuidance (not installed), or
                           ProceedToAuthenticate for targets
                           that install themselves
=========================  ==================================
"""

from __future__ import annotations

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
from legacyfit.models.stage import (
    GuidanceParams,
    GuidanceReason,
    OfferOptionalUpdate,
    OptionalUpdateParams,
    ProceedToAuthenticate,
    ShowCompletion,
    ShowGuidance,
    WorkflowStage,
)
from legacyfit.models.target import ApplicationTarget
from legacyfit.utils.version_utils import get_update_type

__all__ = ["WorkflowRouter", "route", "DOWNLOAD_UPDATE_ACTION"]

#: Primary action when a vendor minor update fixes the installed version.
DOWNLOAD_UPDATE_ACTION = "download_update"


class WorkflowRouter:
    """Selects the next workflow stage for one target.

    Args:
        target: The application the user selected.
    """

    __slots__ = ("target",)

    def __init__(self, target: ApplicationTarget) -> None:
        self.target = target

    def route(self, outcome: ClassificationOutcome) -> WorkflowStage:
        """Return the stage that follows *outcome*.

        Raises:
            TypeError: *outcome* is not a known outcome variant.
        """
        if isinstance(outcome, AlreadyPatched):
            return ShowCompletion(path=outcome.path)

        if isinstance(outcome, CompatibleUnpatched):
            return ProceedToAuthenticate(
                path=outcome.path,
                full_version=outcome.full_version,
                short_version=outcome.short_version,
            )

        if isinstance(outcome, CompatibleOutdatedBuild):
            return self._optional_update(outcome)

        if isinstance(outcome, IncompatibleTooOld):
            return self._guidance(
                GuidanceReason.TOO_OLD,
                found_version=outcome.short_version,
                only_requires_minor_update=outcome.only_needs_minor_update,
            )

        if isinstance(outcome, IncompatibleTooNew):
            return self._guidance(GuidanceReason.TOO_NEW, found_version=outcome.short_version)

        if isinstance(outcome, ManualSelectionInvalid):
            return self._guidance(
                GuidanceReason.INVALID_SELECTION,
                found_version=outcome.short_version,
                selected_path=outcome.path,
            )

        if isinstance(outcome, NotInstalled):
            if self.target.default_install_path is not None:
                return ProceedToAuthenticate(path=self.target.default_install_path)
            return self._guidance(GuidanceReason.NOT_INSTALLED)

        raise TypeError(f"Unknown outcome: {outcome!r}")

    # ------------------------------------------------------------------
    # Parameter builders
    # ------------------------------------------------------------------

    def _guidance(
        self,
        reason: GuidanceReason,
        *,
        found_version: str = "",
        only_requires_minor_update: bool = False,
        selected_path: str = "",
    ) -> ShowGuidance:
        target = self.target
        if only_requires_minor_update:
            primary_action = DOWNLOAD_UPDATE_ACTION
        elif reason is GuidanceReason.INVALID_SELECTION:
            primary_action = ""
        else:
            primary_action = target.acquire_action

        update_type = get_update_type(found_version or None, target.latest_user_facing_version)

        return ShowGuidance(
            params=GuidanceParams(
                reason=reason,
                target_name=target.name,
                found_version=found_version,
                compatible_version=target.latest_compatible_version or "",
                user_facing_version=target.latest_user_facing_version,
                only_requires_minor_update=only_requires_minor_update,
                primary_action=primary_action,
                allows_manual_locate=reason is not GuidanceReason.INVALID_SELECTION,
                update_type=update_type,
                selected_path=selected_path,
            )
        )

    def _optional_update(self, outcome: CompatibleOutdatedBuild) -> OfferOptionalUpdate:
        target = self.target
        compatible_build = target.latest_compatible_version or ""
        return OfferOptionalUpdate(
            params=OptionalUpdateParams(
                target_name=target.name,
                path=outcome.path,
                installed_version=outcome.short_version,
                installed_build=outcome.full_version,
                recommended_version=target.latest_user_facing_version,
                compatible_build=compatible_build,
                update_type=get_update_type(outcome.full_version, compatible_build),
                update_action=target.update_action,
            )
        )


def route(outcome: ClassificationOutcome, target: ApplicationTarget) -> WorkflowStage:
    """Shorthand for ``WorkflowRouter(target).route(outcome)``."""
    return WorkflowRouter(target).route(outcome)
