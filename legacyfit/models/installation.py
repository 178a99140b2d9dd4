"""
Discovered installation data model for legacyfit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DiscoveredInstallation:
    """
    One application bundle located on disk during a scan.

    Instances are created fresh for every scan pass and are never reused by
    a later pass; the same path may hold a different version after an
    install or update.

    Attributes:
        bundle_id: ``CFBundleIdentifier`` read from the bundle.
        path: Absolute path of the ``.app`` bundle.
        short_version: ``CFBundleShortVersionString`` (marketing version).
        full_version: ``CFBundleVersion`` (build); empty when unreadable.
    """

    bundle_id: str
    path: str
    short_version: str
    full_version: str = ""

    def to_json(self) -> Dict[str, Any]:
        return {
            "bundle_id": self.bundle_id,
            "path": self.path,
            "short_version": self.short_version,
            "full_version": self.full_version,
        }

    def __str__(self) -> str:
        build = f" ({self.full_version})" if self.full_version else ""
        return f"{self.bundle_id} {self.short_version}{build} at {self.path}"
