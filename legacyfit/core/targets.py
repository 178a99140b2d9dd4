"""Built-in application targets and catalog document parsing.

The built-in table covers every application the unlock workflow supports.
A remote catalog document can add targets or override fields of existing
ones; it is validated as a whole before anything is applied.

Document layout (JSON or property list)::

    {
        "targets": {
            "aperture": {
                "compatible_versions": ["3.6"],
                "latest_user_facing_version": "3.6"
            },
            "new-app": {
                "name": "New App",
                "existing_bundle_id": "com.example.NewApp",
                "compatible_versions": ["2.1", "2.0"],
                "latest_user_facing_version": "2.1"
            }
        }
    }

Other top-level keys are ignored.
"""

from __future__ import annotations

import json
import plistlib
import dataclasses
from typing import Any, Dict, List, Mapping, Optional, Tuple

from legacyfit.exceptions import CatalogError
from legacyfit.utils.logger import get_logger
from legacyfit.models.target import ACQUIRE_ACTIONS, UPDATE_ACTIONS, ApplicationTarget

logger = get_logger("targets")

__all__ = [
    "BUILTIN_TARGETS",
    "decode_catalog_document",
    "parse_catalog_document",
]

ITUNES_INSTALL_PATH = "/Applications/iTunes.app"
ITUNES_LAUNCHER_BUNDLE_ID = "com.launcher.iTunes"


def _itunes(version: str) -> ApplicationTarget:
    # The installed launcher is created by the workflow itself, so finding it
    # at the supported version means the work is already done.
    return ApplicationTarget(
        key=f"itunes-{version}",
        name="iTunes",
        existing_bundle_id=ITUNES_LAUNCHER_BUNDLE_ID,
        patched_bundle_id="com.apple.intentionally-left-unused",
        compatible_versions=(version,),
        latest_user_facing_version=version,
        patched_versions=(version,),
        default_install_path=ITUNES_INSTALL_PATH,
    )


BUILTIN_TARGETS: Tuple[ApplicationTarget, ...] = (
    ApplicationTarget(
        key="aperture",
        name="Aperture",
        existing_bundle_id="com.apple.Aperture",
        patched_bundle_id="com.apple.Aperture3",
        compatible_versions=("3.6",),
        latest_user_facing_version="3.6",
        patched_versions=("99.9",),
        acquire_action="app_store",
        update_action="kb_article",
    ),
    ApplicationTarget(
        key="iphoto",
        name="iPhoto",
        existing_bundle_id="com.apple.iPhoto",
        patched_bundle_id="com.apple.iPhoto9",
        compatible_versions=("9.6.1", "9.6"),
        latest_user_facing_version="9.6.1",
        patched_versions=("99.9",),
        acquire_action="app_store",
        update_action="kb_article",
    ),
    _itunes("12.9.5"),
    _itunes("12.6.5"),
    _itunes("11.4"),
    _itunes("10.7"),
    ApplicationTarget(
        key="final-cut-pro-7",
        name="Final Cut Pro 7",
        existing_bundle_id="com.apple.FinalCutPro",
        patched_bundle_id="com.apple.FinalCutPro7",
        compatible_versions=("7.0.3", "7.0.2", "7.0.1", "7.0"),
        latest_user_facing_version="7.0.3",
        patched_versions=("7.0.4",),
        acquire_action="dvd",
        update_action="pro_update",
    ),
    ApplicationTarget(
        key="logic-pro-9",
        name="Logic Pro 9",
        existing_bundle_id="com.apple.logic.pro",
        patched_bundle_id="com.apple.logic.pro9",
        compatible_versions=(
            "1700.67",
            "9.1.8",
            "9.1.7",
            "9.1.6",
            "9.1.5",
            "9.1.4",
            "9.1.3",
            "9.1.2",
            "9.1.1",
            "9.1.0",
            "9.1",
            "9.0.2",
            "9.0.1",
            "9.0.0",
            "9.0",
        ),
        latest_user_facing_version="9.1.8",
        patched_versions=("1700.68",),
        acquire_action="dvd",
        update_action="download",
    ),
    ApplicationTarget(
        key="keynote-09",
        name="Keynote ’09",
        existing_bundle_id="com.apple.iWork.Keynote",
        patched_bundle_id="com.apple.iWork.Keynote5",
        compatible_versions=(
            "1170",
            "5.3",
            "5.2",
            "5.1.1",
            "5.1",
            "5.0.5",
            "5.0.4",
            "5.0.3",
            "5.0.2",
            "5.0.1",
            "5.0",
        ),
        latest_user_facing_version="5.3",
        patched_versions=("1171",),
        acquire_action="download",
        update_action="download",
    ),
)


# ---------------------------------------------------------------------------
# Document decoding
# ---------------------------------------------------------------------------


def decode_catalog_document(content: bytes, *, source: Optional[str] = None) -> Dict[str, Any]:
    """Decode raw catalog bytes as a property list or JSON object.

    Property lists (XML or binary) are recognised by their header; anything
    else is parsed as JSON.

    Raises:
        CatalogError: The content is neither, or its root is not a mapping.
    """
    stripped = content.lstrip()
    try:
        if stripped.startswith((b"<?xml", b"<!DOCTYPE plist", b"<plist", b"bplist")):
            document = plistlib.loads(stripped)
        else:
            document = json.loads(stripped.decode("utf-8"))
    except Exception as exc:
        # plistlib raises assorted exception types on malformed content
        raise CatalogError(
            f"Cannot decode catalog document: {exc}",
            source=source,
        ) from exc

    if not isinstance(document, dict):
        raise CatalogError("Catalog document root must be a mapping", source=source)
    return document


# ---------------------------------------------------------------------------
# Document validation
# ---------------------------------------------------------------------------

_STRING_FIELDS = (
    "name",
    "existing_bundle_id",
    "patched_bundle_id",
    "latest_user_facing_version",
    "acquire_action",
    "update_action",
)
_OPTIONAL_STRING_FIELDS = ("latest_update_version", "default_install_path")
_LIST_FIELDS = ("compatible_versions", "patched_versions")
_REQUIRED_FOR_NEW = (
    "name",
    "existing_bundle_id",
    "compatible_versions",
    "latest_user_facing_version",
)


def _string_list(value: Any, *, key: str, field_name: str, source: Optional[str]) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise CatalogError(
            f"{field_name} must be a list of strings, got {type(value).__name__}",
            target=key,
            field_name=field_name,
            source=source,
        )
    items: List[str] = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise CatalogError(
                f"{field_name} entries must be non-empty strings",
                target=key,
                field_name=field_name,
                source=source,
            )
        items.append(item)
    return tuple(items)


def _parse_entry(
    key: str,
    entry: Any,
    base: Optional[ApplicationTarget],
    source: Optional[str],
) -> ApplicationTarget:
    if not isinstance(entry, dict):
        raise CatalogError(
            f"Target entry must be a mapping, got {type(entry).__name__}",
            target=key,
            source=source,
        )

    if base is None:
        missing = [name for name in _REQUIRED_FOR_NEW if name not in entry]
        if missing:
            raise CatalogError(
                f"New target is missing fields: {', '.join(missing)}",
                target=key,
                source=source,
            )

    values: Dict[str, Any] = {}

    for field_name in _STRING_FIELDS:
        if field_name in entry:
            value = entry[field_name]
            if not isinstance(value, str):
                raise CatalogError(
                    f"{field_name} must be a string, got {type(value).__name__}",
                    target=key,
                    field_name=field_name,
                    source=source,
                )
            values[field_name] = value

    for field_name in _OPTIONAL_STRING_FIELDS:
        if field_name in entry:
            value = entry[field_name]
            if value is not None and not isinstance(value, str):
                raise CatalogError(
                    f"{field_name} must be a string, got {type(value).__name__}",
                    target=key,
                    field_name=field_name,
                    source=source,
                )
            values[field_name] = value or None

    for field_name in _LIST_FIELDS:
        if field_name in entry:
            values[field_name] = _string_list(
                entry[field_name], key=key, field_name=field_name, source=source
            )

    if "compatible_versions" in values and not values["compatible_versions"]:
        raise CatalogError(
            "compatible_versions must not be empty",
            target=key,
            field_name="compatible_versions",
            source=source,
        )

    if values.get("acquire_action", "") not in ACQUIRE_ACTIONS:
        raise CatalogError(
            f"Unknown acquire_action: {values['acquire_action']}",
            target=key,
            field_name="acquire_action",
            source=source,
        )
    if values.get("update_action", "") not in UPDATE_ACTIONS:
        raise CatalogError(
            f"Unknown update_action: {values['update_action']}",
            target=key,
            field_name="update_action",
            source=source,
        )

    ignored = set(entry) - set(_STRING_FIELDS) - set(_OPTIONAL_STRING_FIELDS) - set(_LIST_FIELDS)
    if ignored:
        logger.debug("Ignoring unknown fields for %s: %s", key, ", ".join(sorted(ignored)))

    if base is not None:
        return dataclasses.replace(base, **values)
    values.setdefault("patched_bundle_id", "")
    return ApplicationTarget(key=key, **values)


def parse_catalog_document(
    document: Mapping[str, Any],
    base: Optional[Mapping[str, ApplicationTarget]] = None,
    *,
    source: Optional[str] = None,
) -> Dict[str, ApplicationTarget]:
    """Validate *document* and return the targets it defines.

    Entries whose key exists in *base* only need the fields they override.
    Nothing is returned unless every entry validates.

    Args:
        document: Decoded catalog document.
        base: Targets currently in effect.
        source: Document origin, for error messages.

    Returns:
        ``key → target`` for every entry in the document.

    Raises:
        CatalogError: The document has no ``targets`` table or any entry is
            invalid.
    """
    base = base or {}
    targets = document.get("targets")
    if not isinstance(targets, dict) or not targets:
        raise CatalogError("Catalog document has no targets table", source=source)

    parsed: Dict[str, ApplicationTarget] = {}
    for key, entry in targets.items():
        if not isinstance(key, str) or not key:
            raise CatalogError("Target keys must be non-empty strings", source=source)
        parsed[key] = _parse_entry(key, entry, base.get(key), source)
    return parsed
