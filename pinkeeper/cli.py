"""
``pinkeeper`` command-line entry point.

The group callback applies the global options (color, verbosity,
configuration file) and stores the result in a
:class:`~pinkeeper.context.PinKeeperContext` for the subcommands.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from pinkeeper.config import load_config
from pinkeeper.__version__ import __version__
from pinkeeper.context import PinKeeperContext
from pinkeeper.exceptions import ConfigError, PinKeeperError
from pinkeeper.utils.logger import get_logger, setup_logging
from pinkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="PINKEEPER_CONFIG",
    help="Configuration file (default: pinkeeper.toml or [tool.pinkeeper]).",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Show diagnostics: -v for info, -vv for debug.",
)
@click.option(
    "--color/--no-color",
    default=True,
    envvar="PINKEEPER_COLOR",
    help="Colorize terminal output.",
)
@click.version_option(__version__, prog_name="pinkeeper", message="%(prog)s %(version)s")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int, color: bool) -> None:
    """Pin requirements to the newest version a pin policy allows.

    \b
    Examples:
      pinkeeper pin
      pinkeeper pin --policy minor
      pinkeeper pin flask --policy available --dry-run
    """
    _apply_color(color)
    _configure_logging(verbose)

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    state = PinKeeperContext()
    state.config_path = config or settings.source_path
    state.verbose = verbose
    state.color = color
    state.config = settings
    ctx.obj = state

    logger.debug("pinkeeper %s, config %s", __version__, state.config_path or "<defaults>")
    logger.debug("Settings: %s", settings.to_log_dict())


def _apply_color(color: bool) -> None:
    """Export the color choice as NO_COLOR and rebuild the console."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


def _configure_logging(verbose: int) -> None:
    level = _VERBOSITY_LEVELS[min(max(verbose, 0), len(_VERBOSITY_LEVELS) - 1)]
    setup_logging(level=level, verbose=level == logging.DEBUG)
    logger.debug("Logging at %s level", logging.getLevelName(level))


from pinkeeper.commands.pin import pin  # noqa: E402

cli.add_command(pin)


def main() -> int:
    """Run the CLI and translate the outcome into a process exit code.

    0 on success, 1 on errors, 2 on usage errors, 130 when interrupted.
    """
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1
    except PinKeeperError as exc:
        print_error(str(exc))
        logger.debug("Unhandled %s", type(exc).__name__, exc_info=True)
        return 1
    except (KeyboardInterrupt, click.exceptions.Abort):
        print_warning("Operation cancelled by user")
        return 130
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
