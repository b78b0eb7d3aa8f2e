"""Commands that create project files.

    $ gomkeeper gen gomfile          # scan imports, write Gomfile
    $ gomkeeper gen travis-yml       # write a stock .travis.yml

Both refuse to overwrite an existing file.
"""

from __future__ import annotations

from pathlib import Path

import click

from gomkeeper.context import pass_context, GomKeeperContext
from gomkeeper.core import ImportScanner, PackageResolver, generate_gomfile, write_travis_yml
from gomkeeper.core.filters import host_goos
from gomkeeper.constants import GOMFILE_NAME
from gomkeeper.utils import get_logger, print_success

logger = get_logger("commands.gen")


@click.group()
def gen() -> None:
    """Generate a Gomfile or CI configuration."""


def build_scanner(ctx: GomKeeperContext, project_dir: Path) -> ImportScanner:
    """Scanner resolving packages through the vendor tree and GOPATH."""
    config = ctx.config
    resolver = PackageResolver(
        config.source_roots(project_dir),
        goos=config.goos or host_goos(),
    )
    return ImportScanner(resolver)


@gen.command("gomfile")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@pass_context
def gen_gomfile(ctx: GomKeeperContext, directory: Path) -> None:
    """Scan DIRECTORY's imports and write its Gomfile.

    Every import path containing a '.' is treated as external and followed
    transitively through the vendor tree and GOPATH.
    """
    project_dir = directory.resolve()
    scanner = build_scanner(ctx, project_dir)

    deps = generate_gomfile(project_dir / GOMFILE_NAME, scanner, project_dir)
    print_success(f"{GOMFILE_NAME} is generated ({len(deps)} dependencies)")


@gen.command("travis-yml")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
def gen_travis_yml(directory: Path) -> None:
    """Write a .travis.yml that installs and tests with gom."""
    target = write_travis_yml(directory)
    print_success(f"{target.name} is generated")
