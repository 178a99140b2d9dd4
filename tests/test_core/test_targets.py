from __future__ import annotations

import json
import plistlib

import pytest

from legacyfit.core.targets import (
    BUILTIN_TARGETS,
    decode_catalog_document,
    parse_catalog_document,
)
from legacyfit.exceptions import CatalogError

DOCUMENT = {"targets": {"aperture": {"compatible_versions": ["3.6"]}}}


@pytest.mark.unit
class TestBuiltinTargets:
    def test_keys_are_unique(self) -> None:
        keys = [target.key for target in BUILTIN_TARGETS]

        assert len(keys) == len(set(keys))

    def test_every_target_is_patchable(self) -> None:
        for target in BUILTIN_TARGETS:
            assert target.compatible_versions, target.key
            assert target.latest_user_facing_version, target.key

    def test_itunes_variants_install_themselves(self) -> None:
        itunes = [target for target in BUILTIN_TARGETS if target.key.startswith("itunes-")]

        assert [target.key for target in itunes] == [
            "itunes-12.9.5",
            "itunes-12.6.5",
            "itunes-11.4",
            "itunes-10.7",
        ]
        assert all(target.installs_itself for target in itunes)


@pytest.mark.unit
class TestDecodeCatalogDocument:
    def test_json(self) -> None:
        assert decode_catalog_document(json.dumps(DOCUMENT).encode()) == DOCUMENT

    def test_xml_plist(self) -> None:
        assert decode_catalog_document(plistlib.dumps(DOCUMENT)) == DOCUMENT

    def test_binary_plist(self) -> None:
        content = plistlib.dumps(DOCUMENT, fmt=plistlib.FMT_BINARY)

        assert decode_catalog_document(content) == DOCUMENT

    def test_leading_whitespace(self) -> None:
        assert decode_catalog_document(b"\n  " + json.dumps(DOCUMENT).encode()) == DOCUMENT

    @pytest.mark.parametrize(
        "content",
        [
            b"{not json",
            b"<?xml version='1.0'?><plist><dict><key>a</key>",
            b"<?xml version='1.0'?><plist><dict><key>targets</key><date>x</date></dict></plist>",
            b"\xff\xfe",
        ],
        ids=["bad-json", "truncated-plist", "bad-date", "not-utf8"],
    )
    def test_undecodable(self, content: bytes) -> None:
        with pytest.raises(CatalogError, match="Cannot decode") as exc_info:
            decode_catalog_document(content, source="remote")

        assert exc_info.value.source == "remote"

    def test_root_must_be_mapping(self) -> None:
        with pytest.raises(CatalogError, match="must be a mapping"):
            decode_catalog_document(b'"just a string"')


@pytest.mark.unit
class TestParseCatalogDocument:
    """Tests for catalog document validation."""

    def _base(self):
        return {target.key: target for target in BUILTIN_TARGETS}

    def test_partial_override(self) -> None:
        parsed = parse_catalog_document(
            {"targets": {"iphoto": {"latest_update_version": "9.6.2", "extra": 1}}},
            self._base(),
        )

        target = parsed["iphoto"]
        assert target.latest_update_version == "9.6.2"
        assert target.compatible_versions == ("9.6.1", "9.6")

    def test_new_target(self) -> None:
        parsed = parse_catalog_document(
            {
                "targets": {
                    "motion-4": {
                        "name": "Motion 4",
                        "existing_bundle_id": "com.apple.motion",
                        "patched_bundle_id": "com.apple.motion4",
                        "compatible_versions": ["4.0.3"],
                        "latest_user_facing_version": "4.0.3",
                        "acquire_action": "dvd",
                        "default_install_path": None,
                    }
                }
            }
        )

        target = parsed["motion-4"]
        assert target.key == "motion-4"
        assert target.acquire_action == "dvd"
        assert target.default_install_path is None

    def test_new_target_missing_fields(self) -> None:
        with pytest.raises(CatalogError, match="missing fields: existing_bundle_id"):
            parse_catalog_document(
                {
                    "targets": {
                        "motion-4": {
                            "name": "Motion 4",
                            "compatible_versions": ["4.0.3"],
                            "latest_user_facing_version": "4.0.3",
                        }
                    }
                }
            )

    @pytest.mark.parametrize(
        "document",
        [
            {},
            {"targets": {}},
            {"targets": ["aperture"]},
        ],
        ids=["no-targets", "empty-targets", "targets-not-mapping"],
    )
    def test_missing_targets_table(self, document) -> None:
        with pytest.raises(CatalogError, match="no targets table"):
            parse_catalog_document(document)

    @pytest.mark.parametrize(
        "entry,field_name",
        [
            ({"name": 7}, "name"),
            ({"latest_update_version": 9.6}, "latest_update_version"),
            ({"compatible_versions": []}, "compatible_versions"),
            ({"compatible_versions": ["9.6", ""]}, "compatible_versions"),
            ({"patched_versions": "99.9"}, "patched_versions"),
            ({"acquire_action": "floppy"}, "acquire_action"),
            ({"update_action": "magic"}, "update_action"),
        ],
        ids=["name", "update-version", "empty-list", "empty-entry", "not-list", "acquire", "update"],
    )
    def test_invalid_fields(self, entry, field_name: str) -> None:
        with pytest.raises(CatalogError) as exc_info:
            parse_catalog_document({"targets": {"iphoto": entry}}, self._base())

        assert exc_info.value.target == "iphoto"
        assert exc_info.value.field_name == field_name

    def test_entry_must_be_mapping(self) -> None:
        with pytest.raises(CatalogError, match="must be a mapping"):
            parse_catalog_document({"targets": {"iphoto": "9.6.1"}}, self._base())
