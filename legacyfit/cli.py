"""
Command-line interface for legacyfit.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from legacyfit.config import load_config
from legacyfit.__version__ import __version__
from legacyfit.context import LegacyFitContext
from legacyfit.exceptions import ConfigError, LegacyFitError
from legacyfit.utils.logger import get_logger, level_for_verbosity, setup_logging
from legacyfit.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="LEGACYFIT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="LEGACYFIT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="legacyfit",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """legacyfit — find a legacy Mac app and decide how to unlock it.

    \b
    Available commands:
      legacyfit targets            List supported applications
      legacyfit check TARGET       Locate TARGET and show the next step
      legacyfit inspect PATH       Validate a manually located bundle
      legacyfit model IDENTIFIER   Check a Mac model identifier

    \b
    Examples:
      legacyfit check aperture
      legacyfit check itunes-12.9.5 --format json
      legacyfit -v inspect /Volumes/Backup/iPhoto.app --target iphoto

    Use ``legacyfit COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    legacyfit_ctx = LegacyFitContext()
    legacyfit_ctx.config_path = config or loaded_config.source_path
    legacyfit_ctx.color = color
    legacyfit_ctx.verbose = verbose
    legacyfit_ctx.config = loaded_config
    ctx.obj = legacyfit_ctx

    logger.debug("legacyfit v%s", __version__)
    logger.debug("Config path: %s", legacyfit_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from legacyfit.commands.check import check  # noqa: E402
from legacyfit.commands.inspect import inspect  # noqa: E402
from legacyfit.commands.model import model  # noqa: E402
from legacyfit.commands.targets import targets  # noqa: E402

cli.add_command(targets)
cli.add_command(check)
cli.add_command(inspect)
cli.add_command(model)


def main() -> int:
    """Main entry point for the legacyfit CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error, or a stage that needs action
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except LegacyFitError as exc:
        print_error(str(exc))
        logger.debug(
            "LegacyFitError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
