"""
Version comparison utilities for legacyfit.

Application bundles carry free-form dotted version strings (``"12.9.5.5"``,
``"1700.67"``, ``"11.4\\x00\\x00"``) that are not reliably PEP 440. Ordering
decisions therefore use :func:`compare`, a numeric-aware segment comparison.
:func:`get_update_type` labels the size of an update with ``packaging`` once
both sides have been normalized.

Machine model identifiers (``"MacBookPro15,4"``) have their own comparator,
:func:`is_newer_model`.
"""

from __future__ import annotations

import re
from enum import Enum
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from packaging.version import InvalidVersion, Version, parse

from legacyfit.constants import MAX_VERSION_SEGMENTS


class Ordering(Enum):
    """Result of comparing two version strings."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    def reverse(self) -> "Ordering":
        return Ordering(-self.value)


# ---------------------------------------------------------------------------
# Dotted version strings
# ---------------------------------------------------------------------------

_TRAILING_JUNK = re.compile(r"[\s\x00-\x1f\x7f]+$")


def _compare_segment(left: str, right: str) -> Ordering:
    if left.isdigit() and right.isdigit():
        a, b = int(left), int(right)
    else:
        a, b = left, right  # type: ignore[assignment]
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def compare(a: str, b: str) -> Ordering:
    """Compare two dotted version strings segment by segment.

    Segments are compared as integers when both are digit-only and lexically
    otherwise. When one version is a prefix of the other, the shorter one is
    older.

    Examples:
        >>> compare("12.10", "12.9")
        <Ordering.GREATER: 1>
        >>> compare("12.6", "12.6.5")
        <Ordering.LESS: -1>
    """
    left = a.split(".")
    right = b.split(".")

    for seg_a, seg_b in zip(left, right):
        result = _compare_segment(seg_a, seg_b)
        if result is not Ordering.EQUAL:
            return result

    if len(left) < len(right):
        return Ordering.LESS
    if len(left) > len(right):
        return Ordering.GREATER
    return Ordering.EQUAL


def normalize(version: str) -> str:
    """Strip trailing control characters and keep at most three segments.

    Without stripping, ``"11.4\\x00\\x00"`` would compare as newer than
    ``"11.4"``; without truncation, a build qualifier such as ``"12.9.5.5"``
    would compare as newer than ``"12.9.5"``.

    Idempotent: ``normalize(normalize(v)) == normalize(v)``.
    """
    cleaned = _TRAILING_JUNK.sub("", version.replace("\x00", "")).lstrip()
    segments = cleaned.split(".")
    if len(segments) > MAX_VERSION_SEGMENTS:
        cleaned = ".".join(segments[:MAX_VERSION_SEGMENTS])
    return _TRAILING_JUNK.sub("", cleaned)


def is_newer(version: str, other: str) -> bool:
    """Return True if normalized *version* is strictly newer than *other*."""
    return compare(normalize(version), normalize(other)) is Ordering.GREATER


def is_older(version: str, other: str) -> bool:
    """Return True if normalized *version* is strictly older than *other*."""
    return compare(normalize(version), normalize(other)) is Ordering.LESS


# ---------------------------------------------------------------------------
# Update classification (PEP 440 based)
# ---------------------------------------------------------------------------


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the semantic update type between two versions.

    Both versions are passed through :func:`normalize` before parsing.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"``, ``"update"`` or ``"unknown"``.

    Examples:
        >>> get_update_type("10.7", "11.4")
        'major'
        >>> get_update_type(None, "3.6")
        'new'
        >>> get_update_type("9.6", "9.6.1")
        'patch'
    """
    if current_version is None and target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if target_version is None:
        return "unknown"

    try:
        current = _parse_version(normalize(current_version))
        target = _parse_version(normalize(target_version))
    except InvalidVersion:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    return _classify_upgrade(current, target)


def _parse_version(value: str) -> Version:
    parsed = parse(value)
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _classify_upgrade(current: Version, target: Version) -> str:
    current_release = _normalize_release(current)
    target_release = _normalize_release(target)

    for label, old, new in zip(("major", "minor", "patch"), current_release, target_release):
        if old != new:
            return label

    # Pre-release → release, or a fourth segment
    return "update"


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    release = tuple(version.release) + (0, 0, 0)
    return release[0], release[1], release[2]


# ---------------------------------------------------------------------------
# Machine model identifiers
# ---------------------------------------------------------------------------

_MODEL_PATTERN = re.compile(r"^(?P<prefix>\D*)(?P<generation>\d+),(?P<submodel>\d+)$")


@dataclass(frozen=True)
class MachineModel:
    """A parsed hardware model identifier such as ``MacBookPro15,4``."""

    type_prefix: str
    generation: int
    submodel: int

    def __str__(self) -> str:
        return f"{self.type_prefix}{self.generation},{self.submodel}"


def machine_type(identifier: str) -> str:
    """Return the family prefix of *identifier* (text before the first digit)."""
    match = re.match(r"^\D*", identifier.strip())
    return match.group(0) if match else ""


def parse_machine_model(identifier: str) -> Optional[MachineModel]:
    """Parse ``"<prefix><generation>,<submodel>"``; ``None`` if malformed."""
    match = _MODEL_PATTERN.match(identifier.strip())
    if match is None:
        return None
    return MachineModel(
        type_prefix=match.group("prefix"),
        generation=int(match.group("generation")),
        submodel=int(match.group("submodel")),
    )


def is_newer_model(identifier: str, other: str) -> bool:
    """Return True if *identifier* is a later model of the same family.

    Models of different families, or identifiers that fail to parse, are
    never reported as newer.

    Examples:
        >>> is_newer_model("MacBookPro16,1", "MacBookPro15,4")
        True
        >>> is_newer_model("iMac20,1", "MacBookPro15,4")
        False
    """
    this = parse_machine_model(identifier)
    that = parse_machine_model(other)
    if this is None or that is None:
        return False
    if this.type_prefix != that.type_prefix:
        return False
    return (this.generation, this.submodel) > (that.generation, that.submodel)


def shipped_after(identifier: str, reference_models: Iterable[str]) -> bool:
    """Return True if *identifier* postdates its family in *reference_models*.

    A model whose family appears nowhere in the reference set is treated as
    newer: the reference set lists every family that existed at the time.
    """
    family_seen = False
    family = machine_type(identifier)
    for reference in reference_models:
        if is_newer_model(identifier, reference):
            return True
        if family == machine_type(reference):
            family_seen = True
    return not family_seen
