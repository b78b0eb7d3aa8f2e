from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from gomkeeper.config import GomKeeperConfig
from gomkeeper.context import GomKeeperContext, pass_context


@pytest.mark.unit
class TestGomKeeperContext:
    def test_defaults(self) -> None:
        ctx = GomKeeperContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert isinstance(ctx.config, GomKeeperConfig)

    def test_instances_do_not_share_config(self) -> None:
        first, second = GomKeeperContext(), GomKeeperContext()
        first.config.groups.append("test")

        assert second.config.groups == ["development"]

    def test_slots_reject_unknown_attributes(self) -> None:
        with pytest.raises(AttributeError):
            GomKeeperContext().vendor = "x"  # type: ignore[attr-defined]


@pytest.mark.unit
class TestPassContext:
    def test_injects_existing_object(self) -> None:
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: GomKeeperContext) -> None:
            seen.append(ctx)

        obj = GomKeeperContext()
        result = CliRunner().invoke(cmd, [], obj=obj)

        assert result.exit_code == 0
        assert seen == [obj]

    def test_creates_object_when_missing(self) -> None:
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: GomKeeperContext) -> None:
            seen.append(ctx)

        CliRunner().invoke(cmd, [])

        assert isinstance(seen[0], GomKeeperContext)
