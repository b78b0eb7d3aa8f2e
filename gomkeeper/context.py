"""
Shared context object for gomkeeper CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from gomkeeper.config import GomKeeperConfig


class GomKeeperContext:
    """Per-invocation state shared by all subcommands.

    Attributes:
        config_path: Path to the gomkeeper configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration with environment overrides applied.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: GomKeeperConfig = GomKeeperConfig()


#: Click decorator for injecting :class:`GomKeeperContext` into commands.
pass_context = click.make_pass_decorator(GomKeeperContext, ensure=True)
