"""Unit tests for legacyfit.core.catalog.

Test Coverage:
- CompatibilityCatalog version queries (compatible, patched, too new,
  minor update window, outdated build)
- CatalogStore lookups, document merging and atomic rejection
- Remote refresh through a mocked HTTP client
"""

from __future__ import annotations

import json
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from legacyfit.core.catalog import CatalogStore, CompatibilityCatalog, fetch_catalog_document
from legacyfit.core.targets import BUILTIN_TARGETS
from legacyfit.exceptions import CatalogError, NetworkError, UnknownTargetError
from legacyfit.models import ApplicationTarget


@pytest.mark.unit
class TestCompatibilityCatalog:
    """Tests for per-target version queries."""

    def test_is_compatible_is_exact_membership(self, iphoto_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(iphoto_target)

        assert catalog.is_compatible("9.6.1")
        assert catalog.is_compatible("9.6")
        assert not catalog.is_compatible("9.6.0")
        assert not catalog.is_compatible("9.6.1 ")

    def test_is_already_patched_by_bundle_id(self, iphoto_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(iphoto_target)

        assert catalog.is_already_patched("com.apple.iPhoto9", "9.6.1", "9.6.1")
        assert not catalog.is_already_patched("com.apple.iPhoto", "9.6.1", "9.6.1")

    def test_is_already_patched_by_marker_version(self, iphoto_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(iphoto_target)

        assert catalog.is_already_patched("com.apple.iPhoto", "99.9", "9.6.1")
        assert catalog.is_already_patched("com.apple.iPhoto", "", "99.9")

    def test_empty_versions_are_not_markers(self) -> None:
        target = ApplicationTarget(
            key="t",
            name="T",
            existing_bundle_id="com.example.T",
            patched_bundle_id="",
            compatible_versions=("1.0",),
            latest_user_facing_version="1.0",
            patched_versions=("",),
        )

        assert not CompatibilityCatalog(target).is_already_patched("com.example.T", "", "")

    def test_latest_update_version_falls_back(self, itunes_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(itunes_target)

        assert catalog.latest_compatible_version == "11.4"
        assert catalog.latest_update_version == "11.4"

    def test_is_too_new(self, minor_update_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(minor_update_target)

        assert catalog.is_too_new("5.6")
        assert catalog.is_too_new("6.0")
        assert not catalog.is_too_new("5.4")
        assert not catalog.is_too_new("5.1")

    def test_is_too_new_without_update_window(self, itunes_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(itunes_target)

        assert catalog.is_too_new("11.5")
        assert catalog.is_too_new("12.0")
        assert not catalog.is_too_new("10.7")

    def test_requires_only_minor_update(self, minor_update_target: ApplicationTarget) -> None:
        catalog = CompatibilityCatalog(minor_update_target)

        assert catalog.requires_only_minor_update("5.4")
        assert catalog.requires_only_minor_update("5.4.2")
        assert not catalog.requires_only_minor_update("5.3")
        assert not catalog.requires_only_minor_update("5.5")
        assert not catalog.requires_only_minor_update("5.1")

    def test_no_minor_window_without_latest_update(self, itunes_target: ApplicationTarget) -> None:
        assert not CompatibilityCatalog(itunes_target).requires_only_minor_update("11.3")

    def test_is_outdated_build(self) -> None:
        catalog = CompatibilityCatalog(CatalogStore().get("keynote-09"))

        assert catalog.is_outdated_build("1160")
        assert not catalog.is_outdated_build("1170")
        assert not catalog.is_outdated_build("")

    def test_repr(self, itunes_target: ApplicationTarget) -> None:
        assert repr(CompatibilityCatalog(itunes_target)) == "CompatibilityCatalog(target='itunes-11.4')"


@pytest.mark.unit
class TestCatalogStore:
    """Tests for CatalogStore lookups and document merging."""

    def test_defaults_to_builtin_targets(self) -> None:
        store = CatalogStore()

        assert len(store) == len(BUILTIN_TARGETS)
        assert "aperture" in store
        assert "itunes-12.9.5" in store
        assert store.revision == 0

    def test_get_unknown_target(self) -> None:
        with pytest.raises(UnknownTargetError) as exc_info:
            CatalogStore().get("garageband")

        assert exc_info.value.target == "garageband"

    def test_catalog_for(self) -> None:
        catalog = CatalogStore().catalog_for("aperture")

        assert isinstance(catalog, CompatibilityCatalog)
        assert catalog.target.name == "Aperture"

    def test_snapshot_is_read_only(self) -> None:
        snapshot = CatalogStore().snapshot()

        with pytest.raises(TypeError):
            snapshot["aperture"] = None  # type: ignore[index]

    def test_apply_document_overrides_and_extends(self) -> None:
        store = CatalogStore()
        before = store.snapshot()
        document: Dict[str, Any] = {
            "targets": {
                "aperture": {"compatible_versions": ["3.6.1", "3.6"]},
                "garageband-6": {
                    "name": "GarageBand",
                    "existing_bundle_id": "com.apple.garageband",
                    "compatible_versions": ["6.0.5"],
                    "latest_user_facing_version": "6.0.5",
                },
            }
        }

        assert store.apply_document(document) == 2

        assert store.revision == 1
        assert store.get("aperture").compatible_versions == ("3.6.1", "3.6")
        assert store.get("aperture").patched_bundle_id == "com.apple.Aperture3"
        assert store.get("garageband-6").patched_bundle_id == ""
        assert "iphoto" in store
        # Earlier snapshots are unaffected by the swap
        assert before["aperture"].compatible_versions == ("3.6",)
        assert "garageband-6" not in before

    def test_malformed_document_leaves_store_unchanged(self) -> None:
        store = CatalogStore()
        before = store.snapshot()
        document = {
            "targets": {
                "aperture": {"compatible_versions": ["3.7"]},
                "iphoto": {"compatible_versions": "9.6.1"},
            }
        }

        with pytest.raises(CatalogError) as exc_info:
            store.apply_document(document, source="test.json")

        assert exc_info.value.target == "iphoto"
        assert exc_info.value.source == "test.json"
        assert store.snapshot() is before
        assert store.revision == 0
        assert store.get("aperture").compatible_versions == ("3.6",)


@pytest.mark.unit
class TestRefresh:
    """Tests for fetching and applying a remote catalog."""

    @pytest.mark.asyncio
    async def test_refresh_applies_remote_document(self) -> None:
        body = json.dumps({"targets": {"iphoto": {"latest_update_version": "9.6.2"}}}).encode()
        client = MagicMock()
        client.get_content = AsyncMock(return_value=body)
        store = CatalogStore()

        count = await store.refresh(client, "https://example.org/catalog.json")

        assert count == 1
        assert store.get("iphoto").latest_update_version == "9.6.2"
        client.get_content.assert_awaited_once_with("https://example.org/catalog.json")

    @pytest.mark.asyncio
    async def test_refresh_network_error_propagates(self) -> None:
        client = MagicMock()
        client.get_content = AsyncMock(side_effect=NetworkError("boom", url="https://x"))
        store = CatalogStore()

        with pytest.raises(NetworkError):
            await store.refresh(client, "https://x")

        assert store.revision == 0

    @pytest.mark.asyncio
    async def test_fetch_rejects_non_mapping(self) -> None:
        client = MagicMock()
        client.get_content = AsyncMock(return_value=b"[1, 2, 3]")

        with pytest.raises(CatalogError, match="must be a mapping"):
            await fetch_catalog_document(client, "https://example.org/catalog.json")
