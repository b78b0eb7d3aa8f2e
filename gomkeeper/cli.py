"""
Command-line interface for gomkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import click

from gomkeeper.config import load_config
from gomkeeper.__version__ import __version__
from gomkeeper.context import GomKeeperContext
from gomkeeper.exceptions import GomKeeperError
from gomkeeper.utils.logger import get_logger, setup_logging
from gomkeeper.utils.console import print_error, print_warning, reset_console
from gomkeeper.commands.gen import gen
from gomkeeper.commands.lock import lock
from gomkeeper.commands.scan import scan

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="GOMKEEPER_CONFIG",
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
    envvar="GOMKEEPER_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="gomkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Record and pin the Go dependencies of a source tree.

    \b
    Available commands:
      gomkeeper gen gomfile        Scan imports and write a Gomfile
      gomkeeper gen travis-yml     Write a stock .travis.yml
      gomkeeper lock               Pin the Gomfile into Gomfile.lock
      gomkeeper scan               List external imports

    Use ``gomkeeper COMMAND --help`` for command-specific options.
    """
    setup_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reset_console()

    loaded_config = load_config(config)
    loaded_config.apply_environment()

    gomkeeper_ctx = GomKeeperContext()
    gomkeeper_ctx.config_path = config or loaded_config.source_path
    gomkeeper_ctx.color = color
    gomkeeper_ctx.verbose = verbose
    gomkeeper_ctx.config = loaded_config
    ctx.obj = gomkeeper_ctx

    logger.debug("gomkeeper v%s", __version__)
    logger.debug("Config path: %s", gomkeeper_ctx.config_path)
    logger.debug("Effective configuration: %s", loaded_config.to_log_dict())


cli.add_command(gen)
cli.add_command(lock)
cli.add_command(scan)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the gomkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli.main(
            args=list(argv) if argv is not None else None,
            prog_name="gomkeeper",
            standalone_mode=False,
        )
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("Operation cancelled by user")
        return 130

    except GomKeeperError as exc:
        print_error(str(exc))
        logger.debug("%s details: %s", type(exc).__name__, exc.details or "<none>", exc_info=True)
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
