from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from legacyfit.models import ApplicationTarget

MakeApp = Callable[..., Path]


@pytest.fixture
def make_app(tmp_path: Path) -> MakeApp:
    """Factory building fake ``.app`` bundles under ``tmp_path``.

    Example::

        path = make_app("Applications/Aperture.app", "com.apple.Aperture", "3.6", "3.6")
    """

    def _make(
        relative: str,
        bundle_id: Optional[str],
        short_version: Optional[str] = None,
        full_version: Optional[str] = None,
        *,
        extra: Optional[Dict[str, Any]] = None,
        binary: bool = False,
    ) -> Path:
        bundle = tmp_path / relative
        contents = bundle / "Contents"
        contents.mkdir(parents=True, exist_ok=True)

        info: Dict[str, Any] = {}
        if bundle_id is not None:
            info["CFBundleIdentifier"] = bundle_id
        if short_version is not None:
            info["CFBundleShortVersionString"] = short_version
        if full_version is not None:
            info["CFBundleVersion"] = full_version
        info.update(extra or {})

        with open(contents / "Info.plist", "wb") as fh:
            plistlib.dump(info, fh, fmt=plistlib.FMT_BINARY if binary else plistlib.FMT_XML)
        return bundle

    return _make


@pytest.fixture
def itunes_target() -> ApplicationTarget:
    """A single-version target in the shape of the iTunes entries."""
    return ApplicationTarget(
        key="itunes-11.4",
        name="iTunes",
        existing_bundle_id="com.launcher.iTunes",
        patched_bundle_id="com.apple.intentionally-left-unused",
        compatible_versions=("11.4",),
        latest_user_facing_version="11.4",
    )


@pytest.fixture
def iphoto_target() -> ApplicationTarget:
    return ApplicationTarget(
        key="iphoto",
        name="iPhoto",
        existing_bundle_id="com.apple.iPhoto",
        patched_bundle_id="com.apple.iPhoto9",
        compatible_versions=("9.6.1", "9.6"),
        latest_user_facing_version="9.6.1",
        patched_versions=("99.9",),
        acquire_action="app_store",
        update_action="kb_article",
    )


@pytest.fixture
def minor_update_target() -> ApplicationTarget:
    """Target where versions between 5.3 and 5.5 are fixed by a minor update."""
    return ApplicationTarget(
        key="keynote-test",
        name="Keynote",
        existing_bundle_id="com.apple.iWork.Keynote",
        patched_bundle_id="com.apple.iWork.Keynote5",
        compatible_versions=("5.3", "5.2"),
        latest_user_facing_version="5.3",
        patched_versions=("1171",),
        latest_update_version="5.5",
        acquire_action="download",
        update_action="download",
    )
