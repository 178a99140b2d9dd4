"""Model command implementation for legacyfit.

Reports whether a Mac model identifier postdates the last models of each
family that shipped with macOS Mojave. Several legacy applications behave
differently on such machines.

Typical usage::

    $ legacyfit model MacBookPro16,1
    $ legacyfit model "$(sysctl -n hw.model)" --format json
"""

from __future__ import annotations

import json
import click
from typing import Optional

from legacyfit.constants import LAST_MODELS_FOR_MOJAVE
from legacyfit.context import pass_context, LegacyFitContext
from legacyfit.utils import get_logger, print_details, print_success, print_warning
from legacyfit.utils.version_utils import MachineModel, machine_type, parse_machine_model, shipped_after

logger = get_logger("commands.model")


def _reference_for(model: MachineModel) -> Optional[str]:
    family = model.type_prefix
    for reference in LAST_MODELS_FOR_MOJAVE:
        if machine_type(reference) == family:
            return reference
    return None


@click.command()
@click.argument("identifier")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def model(ctx: LegacyFitContext, identifier: str, format: str) -> None:
    """Check whether IDENTIFIER (e.g. ``MacBookPro15,4``) is newer than Mojave.

    A family with no Mojave-era model at all counts as newer.
    """
    parsed = parse_machine_model(identifier)
    if parsed is None:
        raise click.BadParameter(
            f"{identifier!r} is not a model identifier like 'MacBookPro15,4'",
            param_hint="IDENTIFIER",
        )

    newer = shipped_after(str(parsed), LAST_MODELS_FOR_MOJAVE)
    reference = _reference_for(parsed)
    logger.debug("Model %s: reference=%s newer=%s", parsed, reference, newer)

    if format == "json":
        print(
            json.dumps(
                {
                    "model": str(parsed),
                    "family": parsed.type_prefix,
                    "reference_model": reference,
                    "newer_than_mojave": newer,
                },
                indent=2,
            )
        )
        return

    if newer:
        print_warning(f"{parsed} shipped after the last Mojave-era {parsed.type_prefix}")
    else:
        print_success(f"{parsed} is a Mojave-era model or older")
    print_details([("Family", parsed.type_prefix), ("Last Mojave model", reference or "none")])
