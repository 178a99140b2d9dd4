from __future__ import annotations

import pytest

from legacyfit.models import ApplicationTarget, DiscoveredInstallation


@pytest.mark.unit
class TestApplicationTarget:
    """Tests for ApplicationTarget properties and serialization."""

    def test_latest_compatible_version(self, iphoto_target: ApplicationTarget) -> None:
        assert iphoto_target.latest_compatible_version == "9.6.1"
        assert iphoto_target.supports_patching is True
        assert iphoto_target.installs_itself is False

    def test_without_compatible_versions(self) -> None:
        target = ApplicationTarget(
            key="empty",
            name="Empty",
            existing_bundle_id="com.example.Empty",
            patched_bundle_id="",
            compatible_versions=(),
            latest_user_facing_version="",
        )

        assert target.latest_compatible_version is None
        assert target.supports_patching is False

    def test_installs_itself(self, itunes_target: ApplicationTarget) -> None:
        target = ApplicationTarget(
            **{**itunes_target.__dict__, "default_install_path": "/Applications/iTunes.app"}
        )

        assert target.installs_itself is True
        assert target.to_json()["default_install_path"] == "/Applications/iTunes.app"

    def test_to_json_omits_empty_optional_fields(self, itunes_target: ApplicationTarget) -> None:
        assert itunes_target.to_json() == {
            "key": "itunes-11.4",
            "name": "iTunes",
            "existing_bundle_id": "com.launcher.iTunes",
            "patched_bundle_id": "com.apple.intentionally-left-unused",
            "compatible_versions": ["11.4"],
            "latest_user_facing_version": "11.4",
        }

    def test_to_json_full(self, minor_update_target: ApplicationTarget) -> None:
        data = minor_update_target.to_json()

        assert data["compatible_versions"] == ["5.3", "5.2"]
        assert data["patched_versions"] == ["1171"]
        assert data["latest_update_version"] == "5.5"
        assert data["acquire_action"] == "download"
        assert data["update_action"] == "download"

    def test_str(self, iphoto_target: ApplicationTarget) -> None:
        assert str(iphoto_target) == "iPhoto 9.6.1 (iphoto)"


@pytest.mark.unit
class TestDiscoveredInstallation:
    def test_to_json(self) -> None:
        item = DiscoveredInstallation("com.apple.iPhoto", "/Applications/iPhoto.app", "9.6.1", "9.6.1")

        assert item.to_json() == {
            "bundle_id": "com.apple.iPhoto",
            "path": "/Applications/iPhoto.app",
            "short_version": "9.6.1",
            "full_version": "9.6.1",
        }

    def test_str(self) -> None:
        with_build = DiscoveredInstallation("com.apple.iWork.Keynote", "/K.app", "5.3", "1170")
        without_build = DiscoveredInstallation("com.apple.iWork.Keynote", "/K.app", "5.3")

        assert str(with_build) == "com.apple.iWork.Keynote 5.3 (1170) at /K.app"
        assert str(without_build) == "com.apple.iWork.Keynote 5.3 at /K.app"
