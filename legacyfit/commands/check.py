"""Check command implementation for legacyfit.

Locates an installed copy of a target application and reports the next
workflow stage.

The command orchestrates the core components:

1. **CatalogStore** — built-in targets, optionally merged with the remote
   catalog configured as ``catalog_url``.
2. **InstallationScanner** — finds bundles whose identifier matches the
   target and re-reads their metadata.
3. **EligibilityResolver** — classifies what was found.
4. **WorkflowRouter** — picks the next stage and its message parameters.

Typical usage::

    $ legacyfit check aperture
    $ legacyfit check logic-pro-9 --search-root /Volumes/Studio/Applications
    $ legacyfit check iphoto --format json > report.json

Exit status is 0 when the application can be unlocked now (or already is)
and 1 when the user has to act first.
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from legacyfit.exceptions import CatalogError, LegacyFitError
from legacyfit.context import pass_context, LegacyFitContext
from legacyfit.core import CatalogStore, LocateResult, WorkflowSession
from legacyfit.models import (
    ApplicationTarget,
    GuidanceReason,
    OfferOptionalUpdate,
    ProceedToAuthenticate,
    ShowCompletion,
    ShowGuidance,
    WorkflowStage,
)
from legacyfit.utils import (
    HTTPClient,
    colorize_update_type,
    get_logger,
    get_raw_console,
    print_details,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.check")

#: Stages after which the workflow can continue without user action.
READY_STAGES = (ProceedToAuthenticate, ShowCompletion)


@click.command()
@click.argument("target")
@click.option(
    "--search-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to search for installed applications.",
)
@click.option(
    "--refresh-catalog/--no-refresh-catalog",
    default=None,
    help="Merge the configured remote catalog before checking.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(
    ctx: LegacyFitContext,
    target: str,
    search_root: Optional[Path],
    refresh_catalog: Optional[bool],
    format: str,
) -> None:
    """Locate TARGET and show what has to happen before it can be unlocked.

    TARGET is a key from ``legacyfit targets``, such as ``aperture`` or
    ``itunes-12.9.5``.

    \b
    Exits:
      0  the application can be unlocked, or already is
      1  an update, reinstall or manual location is needed, or an error
         occurred
    """
    try:
        result = asyncio.run(_check_async(ctx, target, search_root, refresh_catalog, format))
        sys.exit(0 if isinstance(result.stage, READY_STAGES) else 1)

    except LegacyFitError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in check command")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def load_store(ctx: LegacyFitContext, refresh_catalog: Optional[bool]) -> CatalogStore:
    """Build the target store, merging the remote catalog when enabled.

    A malformed remote document is reported and ignored; the built-in
    targets stay in effect.

    Raises:
        NetworkError: The remote catalog could not be downloaded.
    """
    config = ctx.config
    store = CatalogStore()
    refresh = config.refresh_catalog if refresh_catalog is None else refresh_catalog

    if not refresh:
        return store

    if not config.catalog_url:
        print_warning("Catalog refresh requested but no catalog_url is configured")
        return store

    async with HTTPClient() as http:
        try:
            await store.refresh(http, config.catalog_url)
        except CatalogError as e:
            print_warning(f"Ignoring remote catalog: {e}")
            logger.debug("Catalog rejected", exc_info=True)

    return store


async def _check_async(
    ctx: LegacyFitContext,
    target: str,
    search_root: Optional[Path],
    refresh_catalog: Optional[bool],
    format: str,
) -> LocateResult:
    store = await load_store(ctx, refresh_catalog)
    root = str(search_root) if search_root is not None else ctx.config.search_root

    session = WorkflowSession(store, search_root=root)
    selected = session.select_target(target)
    logger.info("Looking for %s under %s", selected.name, root)

    result = await session.locate()
    if result is None:
        raise LegacyFitError("Scan did not complete", {"target": target})

    if format == "json":
        display_json(selected, result)
    else:
        display_result(selected, result)
    return result


# ---------------------------------------------------------------------------
# Display renderers (shared with ``inspect``)
# ---------------------------------------------------------------------------


def display_json(target: ApplicationTarget, result: LocateResult) -> None:
    """Render a locate result as JSON for machine consumption.

    Example::

        {
          "target": {"key": "aperture", ...},
          "installations": [{"path": "/Applications/Aperture.app", ...}],
          "outcome": {"outcome": "compatible_unpatched", ...},
          "stage": {"stage": "ProceedToAuthenticate", ...}
        }
    """
    data: Dict[str, Any] = {
        "target": target.to_json(),
        "installations": [item.to_json() for item in result.installations],
        "outcome": result.outcome.to_json(),
        "stage": result.stage.to_json(),
    }
    print(json.dumps(data, indent=2))


def display_result(target: ApplicationTarget, result: LocateResult) -> None:
    """Render a locate result for humans: what was found, then what's next."""
    if result.installations:
        rows: List[Dict[str, Any]] = [
            {
                "Path": item.path,
                "Bundle ID": item.bundle_id,
                "Version": item.short_version or "-",
                "Build": item.full_version or "-",
            }
            for item in result.installations
        ]
        print_table(
            rows,
            title=f"{target.name} installations",
            column_styles={
                "Path": {"style": "bold cyan"},
                "Bundle ID": {"style": "dim"},
                "Version": {"justify": "center"},
                "Build": {"justify": "center", "style": "dim"},
            },
        )

    _announce(target, result.stage)
    get_raw_console().print()
    print_details(stage_details(result.stage), title=result.stage.name)


def _announce(target: ApplicationTarget, stage: WorkflowStage) -> None:
    name = target.name
    if isinstance(stage, ShowCompletion):
        print_success(f"{name} is already unlocked")
    elif isinstance(stage, ProceedToAuthenticate):
        if stage.short_version:
            print_success(f"{name} {stage.short_version} can be unlocked")
        else:
            print_success(f"{name} will be set up at {stage.path}")
    elif isinstance(stage, OfferOptionalUpdate):
        params = stage.params
        print_warning(
            f"Updating {name} to {params.recommended_version} is recommended before unlocking"
        )
    elif isinstance(stage, ShowGuidance):
        params = stage.params
        version = params.found_version or "unknown"
        messages = {
            GuidanceReason.TOO_OLD: f"{name} {version} is too old to be unlocked",
            GuidanceReason.TOO_NEW: f"{name} {version} is too new to be unlocked",
            GuidanceReason.NOT_INSTALLED: f"{name} is not installed",
            GuidanceReason.INVALID_SELECTION: f"The selected app is not a supported copy of {name}",
        }
        print_error(messages[params.reason])


def stage_details(stage: WorkflowStage) -> Sequence[Tuple[str, Any]]:
    """Return ``(label, value)`` rows describing *stage*."""
    if isinstance(stage, ShowCompletion):
        return [("Path", stage.path)]

    if isinstance(stage, ProceedToAuthenticate):
        return [
            ("Path", stage.path),
            ("Version", stage.short_version),
            ("Build", stage.full_version),
        ]

    if isinstance(stage, OfferOptionalUpdate):
        update = stage.params
        recommended = update.recommended_version
        if update.shows_build_number:
            recommended = f"{recommended} (build {update.compatible_build})"
        return [
            ("Path", update.path),
            ("Installed", f"{update.installed_version} (build {update.installed_build})"),
            ("Recommended", recommended),
            ("Update type", colorize_update_type(update.update_type)),
            ("Update via", update.update_action),
        ]

    if isinstance(stage, ShowGuidance):
        guidance = stage.params
        compatible = guidance.user_facing_version
        if guidance.shows_build_number:
            compatible = f"{compatible} (build {guidance.compatible_version})"
        return [
            ("Reason", guidance.reason.value),
            ("Selected", guidance.selected_path),
            ("Found", guidance.found_version),
            ("Compatible", compatible),
            ("Minor update only", "yes" if guidance.only_requires_minor_update else ""),
            ("Next step", guidance.primary_action),
            ("Update type", colorize_update_type(guidance.update_type) if guidance.found_version else ""),
            ("Locate manually", "yes" if guidance.allows_manual_locate else "no"),
        ]

    return []
