"""Targets command implementation for legacyfit.

Lists every application target legacyfit knows about, after merging the
configured remote catalog when ``--refresh-catalog`` is given.

Typical usage::

    $ legacyfit targets
    $ legacyfit targets --format json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict, List

from legacyfit.core import CatalogStore
from legacyfit.exceptions import LegacyFitError
from legacyfit.models import ApplicationTarget
from legacyfit.context import pass_context, LegacyFitContext
from legacyfit.commands.check import load_store
from legacyfit.utils import get_logger, print_error, print_table

logger = get_logger("commands.targets")

_ACQUIRE_LABELS = {
    "app_store": "App Store",
    "dvd": "Install disc",
    "download": "Download",
    "": "-",
}


@click.command()
@click.option(
    "--refresh-catalog/--no-refresh-catalog",
    default=None,
    help="Merge the configured remote catalog first.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def targets(ctx: LegacyFitContext, refresh_catalog: bool, format: str) -> None:
    """List the applications legacyfit can locate and unlock."""
    try:
        store = asyncio.run(load_store(ctx, refresh_catalog))
    except LegacyFitError as e:
        print_error(f"{e}")
        sys.exit(1)

    # One snapshot so the listing cannot mix two catalog revisions
    known = list(store.snapshot().values())
    if format == "json":
        print(json.dumps([target.to_json() for target in known], indent=2))
    else:
        _display_table(known, store)


def _display_table(known: List[ApplicationTarget], store: CatalogStore) -> None:
    data: List[Dict[str, Any]] = [
        {
            "Key": target.key,
            "Name": target.name,
            "Bundle ID": target.existing_bundle_id,
            "Latest": target.latest_user_facing_version,
            "Compatible": ", ".join(target.compatible_versions),
            "Get it from": _ACQUIRE_LABELS.get(target.acquire_action, target.acquire_action),
        }
        for target in known
    ]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Key": {"style": "bold cyan", "no_wrap": True},
        "Name": {"no_wrap": True},
        "Bundle ID": {"style": "dim"},
        "Latest": {"justify": "center", "style": "bold green"},
    }

    print_table(
        data,
        title="Supported Applications",
        caption=f"catalog revision {store.revision}",
        column_styles=column_styles,
    )
