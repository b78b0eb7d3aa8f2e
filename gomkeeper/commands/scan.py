"""List the external imports of a source tree.

Read-only counterpart of ``gen gomfile``: shows what would be written
without creating anything.

    $ gomkeeper scan
    $ gomkeeper scan ./cmd/server --format json
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from gomkeeper.context import pass_context, GomKeeperContext
from gomkeeper.commands.gen import build_scanner
from gomkeeper.core import locate_vcs_root
from gomkeeper.constants import VENDOR_SRC_DIR
from gomkeeper.utils import get_console, get_logger, print_table

logger = get_logger("commands.scan")


@click.command()
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def scan(ctx: GomKeeperContext, directory: Path, output_format: str) -> None:
    """Show the external dependencies imported from DIRECTORY."""
    project_dir = directory.resolve()
    names = build_scanner(ctx, project_dir).sorted_dependencies(".", project_dir)

    vendor_src = ctx.config.vendor_path(project_dir) / VENDOR_SRC_DIR
    rows = []
    for name in names:
        root = locate_vcs_root(vendor_src, name)
        rows.append(
            {
                "Import path": name,
                "VCS": root.backend.kind if root else "",
                "Root": root.path.relative_to(vendor_src).as_posix() if root else "",
            }
        )

    console = get_console()
    if output_format == "json":
        payload = [
            {
                "import_path": row["Import path"],
                "vcs": row["VCS"] or None,
                "root": row["Root"] or None,
            }
            for row in rows
        ]
        console.print_json(json.dumps(payload))
    elif output_format == "simple":
        for row in rows:
            console.print(row["Import path"], markup=False, highlight=False)
    else:
        print_table(
            rows,
            headers=["Import path", "VCS", "Root"],
            title=f"External dependencies of {project_dir.name}",
            caption=f"{len(rows)} package(s)",
        )
