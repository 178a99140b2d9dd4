"""
Workflow stages and their message parameters.

A :class:`WorkflowStage` tells the presentation layer what to show next.
Stages carry named, unformatted parameters only; turning them into text
(and translating that text) is the caller's job.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import asdict, dataclass
from typing import Any, Dict


class GuidanceReason(str, Enum):
    """Why the user needs guidance instead of proceeding."""

    TOO_OLD = "too_old"
    TOO_NEW = "too_new"
    NOT_INSTALLED = "not_installed"
    INVALID_SELECTION = "invalid_selection"


@dataclass(frozen=True)
class GuidanceParams:
    """
    Parameters for a guidance message.

    Attributes:
        reason: What went wrong.
        target_name: Display name of the application.
        found_version: Version found on disk (empty when nothing was found).
        compatible_version: Latest compatible version or build.
        user_facing_version: Marketing version to show alongside it.
        only_requires_minor_update: A vendor minor update makes the found
            version compatible; no reinstall is needed.
        primary_action: Suggested first action: ``"download_update"``, the
            target's acquire action, or empty.
        allows_manual_locate: Whether "locate manually" should be offered.
        update_type: Size of the jump from ``found_version`` to
            ``user_facing_version`` (``"major"``, ``"minor"``, ...).
        selected_path: Bundle path chosen by hand, for invalid selections.
    """

    reason: GuidanceReason
    target_name: str
    found_version: str = ""
    compatible_version: str = ""
    user_facing_version: str = ""
    only_requires_minor_update: bool = False
    primary_action: str = ""
    allows_manual_locate: bool = True
    update_type: str = "unknown"
    selected_path: str = ""

    @property
    def shows_build_number(self) -> bool:
        """True when the found marketing version equals the recommended one,
        so only the build number can tell them apart."""
        return bool(self.found_version) and self.found_version == self.user_facing_version


@dataclass(frozen=True)
class OptionalUpdateParams:
    """
    Parameters for the "update recommended before unlocking" prompt.

    Attributes:
        target_name: Display name of the application.
        path: Installed bundle the user may unlock without updating.
        installed_version: Installed marketing version.
        installed_build: Installed build (full) version.
        recommended_version: Marketing version to update to.
        compatible_build: Latest compatible build.
        update_type: Size of the jump (``"patch"``, ``"update"``, ...).
        update_action: How the update is applied (target's update action).
    """

    target_name: str
    path: str
    installed_version: str
    installed_build: str
    recommended_version: str
    compatible_build: str
    update_type: str = "unknown"
    update_action: str = ""

    @property
    def shows_build_number(self) -> bool:
        return self.installed_version == self.recommended_version


@dataclass(frozen=True)
class WorkflowStage:
    """Base class of every workflow stage."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_json(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"stage": self.name}
        entry.update(asdict(self))
        return entry


@dataclass(frozen=True)
class ProceedToAuthenticate(WorkflowStage):
    """Ask for privileges and patch the bundle at ``path``."""

    path: str
    full_version: str = ""
    short_version: str = ""


@dataclass(frozen=True)
class ShowGuidance(WorkflowStage):
    """Explain why the workflow cannot continue and what to do."""

    params: GuidanceParams


@dataclass(frozen=True)
class OfferOptionalUpdate(WorkflowStage):
    """Recommend an update; the user may still proceed without it."""

    params: OptionalUpdateParams


@dataclass(frozen=True)
class ShowCompletion(WorkflowStage):
    """The bundle at ``path`` is already unlocked."""

    path: str
