"""
Classification outcomes for legacyfit.

Resolving a scan against a target produces exactly one
:class:`ClassificationOutcome`. Each variant is a frozen dataclass carrying
only the data its workflow stage needs; callers dispatch on the concrete
type (see :class:`~legacyfit.core.router.WorkflowRouter`).

Variants:

- :class:`AlreadyPatched`
- :class:`CompatibleUnpatched`
- :class:`CompatibleOutdatedBuild`
- :class:`IncompatibleTooOld`
- :class:`IncompatibleTooNew`
- :class:`NotInstalled`
- :class:`ManualSelectionInvalid` (manual location only)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ClassificationOutcome:
    """Base class of every outcome variant."""

    @property
    def kind(self) -> str:
        """Snake-case variant name, used for JSON output and logging."""
        name = type(self).__name__
        return "".join(
            f"_{ch.lower()}" if ch.isupper() and i else ch.lower()
            for i, ch in enumerate(name)
        )

    def to_json(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"outcome": self.kind}
        entry.update(asdict(self))
        return entry


@dataclass(frozen=True)
class AlreadyPatched(ClassificationOutcome):
    """An installation already carries the patch."""

    path: str


@dataclass(frozen=True)
class CompatibleUnpatched(ClassificationOutcome):
    """A supported version is installed and can be patched."""

    path: str
    full_version: str
    short_version: str


@dataclass(frozen=True)
class CompatibleOutdatedBuild(ClassificationOutcome):
    """A supported version is installed, but its build predates the latest
    compatible build; an optional update is recommended before patching."""

    path: str
    full_version: str
    short_version: str


@dataclass(frozen=True)
class IncompatibleTooOld(ClassificationOutcome):
    """Only versions older than the supported range are installed."""

    short_version: str
    only_needs_minor_update: bool = False


@dataclass(frozen=True)
class IncompatibleTooNew(ClassificationOutcome):
    """Only versions newer than anything the patch supports are installed."""

    short_version: str


@dataclass(frozen=True)
class NotInstalled(ClassificationOutcome):
    """No matching installation was found."""


@dataclass(frozen=True)
class ManualSelectionInvalid(ClassificationOutcome):
    """A bundle chosen by hand is not a supported copy of the target."""

    path: str
    bundle_id: str
    short_version: str
