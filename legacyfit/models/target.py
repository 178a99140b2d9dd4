"""
Application target data model for legacyfit.

An :class:`ApplicationTarget` describes one application (or one variant of
an application, such as a specific iTunes release) that the unlock workflow
knows how to handle: what to search for on disk, which versions the patch
supports, and how the user can obtain or update the application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

#: Ways of obtaining an application that is not installed.
ACQUIRE_ACTIONS = ("", "app_store", "dvd", "download")

#: Ways of applying a vendor minor update.
UPDATE_ACTIONS = ("", "kb_article", "download", "pro_update")


@dataclass(frozen=True)
class ApplicationTarget:
    """
    One application the workflow can locate and unlock.

    Attributes:
        key: Stable identifier used on the command line and in catalogs.
        name: Display name handed to the presentation layer.
        existing_bundle_id: Bundle identifier to search for on disk.
        patched_bundle_id: Bundle identifier written by the patch.
        compatible_versions: Versions the patch supports, most recent first.
            The first entry is the canonical latest compatible version and
            may be a build number rather than a marketing version.
        latest_user_facing_version: Marketing version used in messages.
        patched_versions: Version strings written by the patch.
        latest_update_version: Version bound reachable through a vendor
            minor update. ``None`` means the latest compatible version.
        acquire_action: How to obtain the application (see
            :data:`ACQUIRE_ACTIONS`).
        update_action: How to apply a minor update (see
            :data:`UPDATE_ACTIONS`).
        default_install_path: Set for targets the workflow installs itself;
            a missing installation then proceeds straight to authentication.
    """

    key: str
    name: str
    existing_bundle_id: str
    patched_bundle_id: str
    compatible_versions: Tuple[str, ...]
    latest_user_facing_version: str
    patched_versions: Tuple[str, ...] = ()
    latest_update_version: Optional[str] = None
    acquire_action: str = ""
    update_action: str = ""
    default_install_path: Optional[str] = None

    @property
    def latest_compatible_version(self) -> Optional[str]:
        """The first (most recent) compatible version, if any."""
        return self.compatible_versions[0] if self.compatible_versions else None

    @property
    def supports_patching(self) -> bool:
        """True when at least one compatible version is known."""
        return bool(self.compatible_versions)

    @property
    def installs_itself(self) -> bool:
        return self.default_install_path is not None

    def to_json(self) -> Dict[str, Any]:
        """Serialize the target to a JSON-compatible dictionary."""
        entry: Dict[str, Any] = {
            "key": self.key,
            "name": self.name,
            "existing_bundle_id": self.existing_bundle_id,
            "patched_bundle_id": self.patched_bundle_id,
            "compatible_versions": list(self.compatible_versions),
            "latest_user_facing_version": self.latest_user_facing_version,
        }
        if self.patched_versions:
            entry["patched_versions"] = list(self.patched_versions)
        if self.latest_update_version:
            entry["latest_update_version"] = self.latest_update_version
        if self.acquire_action:
            entry["acquire_action"] = self.acquire_action
        if self.update_action:
            entry["update_action"] = self.update_action
        if self.default_install_path:
            entry["default_install_path"] = self.default_install_path
        return entry

    def __str__(self) -> str:
        return f"{self.name} {self.latest_user_facing_version} ({self.key})"
