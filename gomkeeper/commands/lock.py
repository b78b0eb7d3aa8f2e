"""Pin the Gomfile to the revisions checked out in the vendor tree.

Reads the Gomfile, keeps the entries that apply to the active groups and
target OS, records each one's checked-out revision in ``Gomfile.lock``, and
then strips VCS metadata from the vendor tree so it can be committed.

    $ gomkeeper lock
    $ gomkeeper lock --group production --goos linux
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import click

from gomkeeper.context import pass_context, GomKeeperContext
from gomkeeper.core import BuildContext, LockGenerator, parse_gomfile
from gomkeeper.constants import GOMFILE_LOCK_NAME, GOMFILE_NAME
from gomkeeper.utils import get_logger, print_success, print_warning

logger = get_logger("commands.lock")


@click.command()
@click.option(
    "--gomfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=GOMFILE_NAME,
    show_default=True,
    help="Manifest to read.",
)
@click.option(
    "--lockfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=GOMFILE_LOCK_NAME,
    show_default=True,
    help="Lock file to create; must not exist yet.",
)
@click.option(
    "--vendor-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Vendor directory (default: from config or GOM_VENDOR_NAME).",
)
@click.option(
    "--group",
    "-g",
    "groups",
    multiple=True,
    help="Active group; repeat for several (default: from config).",
)
@click.option(
    "--goos",
    default=None,
    help="Target operating system (default: GOOS or the host OS).",
)
@pass_context
def lock(
    ctx: GomKeeperContext,
    gomfile: Path,
    lockfile: Path,
    vendor_dir: Optional[Path],
    groups: Tuple[str, ...],
    goos: Optional[str],
) -> None:
    """Generate Gomfile.lock from the Gomfile and the vendor tree.

    Entries whose repository cannot report a revision are written without
    a commit and listed as warnings; they never fail the command.
    """
    config = ctx.config
    context = BuildContext.create(
        groups=groups or config.groups,
        goos=goos or config.goos,
    )
    vendor = vendor_dir.resolve() if vendor_dir else config.vendor_path(Path.cwd())
    logger.debug("Vendor: %s | groups: %s | goos: %s", vendor, sorted(context.groups), context.goos)

    dependencies = parse_gomfile(gomfile)
    result = LockGenerator(vendor, context).generate(dependencies, lockfile)

    print_success(f"{lockfile.name} is generated")
    for dep in result.unpinned:
        print_warning(f"{dep.name}: no revision found, left unpinned")
