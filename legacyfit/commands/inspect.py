"""Inspect command implementation for legacyfit.

Validates an application bundle the user located by hand, for example a
copy kept outside ``/Applications``. The bundle is accepted when its
version is one of the target's compatible versions and its identifier
belongs to the target.

Typical usage::

    $ legacyfit inspect /Volumes/Backup/iPhoto.app --target iphoto
"""

from __future__ import annotations

import sys
import click
import asyncio
from pathlib import Path

from legacyfit.core import WorkflowSession
from legacyfit.exceptions import LegacyFitError
from legacyfit.models import ProceedToAuthenticate
from legacyfit.context import pass_context, LegacyFitContext
from legacyfit.commands.check import display_json, display_result, load_store
from legacyfit.utils import get_logger, print_error

logger = get_logger("commands.inspect")


@click.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--target",
    "-t",
    "target_key",
    required=True,
    help="Target key the bundle should be a copy of.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def inspect(ctx: LegacyFitContext, path: Path, target_key: str, format: str) -> None:
    """Check whether the bundle at PATH can be unlocked as TARGET.

    Exits 0 when the bundle is accepted and 1 otherwise.
    """
    try:
        store = asyncio.run(load_store(ctx, None))
        session = WorkflowSession(store, search_root=ctx.config.search_root)
        target = session.select_target(target_key)

        logger.info("Inspecting %s as %s", path, target.key)
        result = session.inspect(path)

        if format == "json":
            display_json(target, result)
        else:
            display_result(target, result)

        sys.exit(0 if isinstance(result.stage, ProceedToAuthenticate) else 1)

    except LegacyFitError as e:
        print_error(f"{e}")
        sys.exit(1)
