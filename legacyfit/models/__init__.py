"""
Unified data model exports for legacyfit.

Example:
    >>> from legacyfit.models import ApplicationTarget, NotInstalled, ShowGuidance
"""

from __future__ import annotations

from legacyfit.models.target import ApplicationTarget
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

__all__ = [
    "ApplicationTarget",
    "DiscoveredInstallation",
    # Outcomes
    "ClassificationOutcome",
    "AlreadyPatched",
    "CompatibleUnpatched",
    "CompatibleOutdatedBuild",
    "IncompatibleTooOld",
    "IncompatibleTooNew",
    "NotInstalled",
    "ManualSelectionInvalid",
    # Stages
    "WorkflowStage",
    "ProceedToAuthenticate",
    "ShowGuidance",
    "OfferOptionalUpdate",
    "ShowCompletion",
    "GuidanceParams",
    "GuidanceReason",
    "OptionalUpdateParams",
]
