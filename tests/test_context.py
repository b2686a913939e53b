from __future__ import annotations

from pathlib import Path

import click
import pytest

from pinkeeper.config import PinKeeperConfig
from pinkeeper.context import PinKeeperContext, pass_context
from pinkeeper.models.version import PinPolicy


@pytest.mark.unit
class TestPinKeeperContext:
    def test_defaults(self) -> None:
        ctx = PinKeeperContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config is None

    def test_holds_loaded_config(self) -> None:
        ctx = PinKeeperContext()
        ctx.config_path = Path("pinkeeper.toml")
        ctx.config = PinKeeperConfig(policy=PinPolicy.MINOR)

        assert ctx.config.policy is PinPolicy.MINOR
        assert ctx.config_path.name == "pinkeeper.toml"

    def test_rejects_unknown_attributes(self) -> None:
        ctx = PinKeeperContext()

        with pytest.raises(AttributeError):
            ctx.policy = "minor"  # type: ignore[attr-defined]


@pytest.mark.unit
class TestPassContext:
    def test_injects_existing_context(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: PinKeeperContext) -> PinKeeperContext:
            return ctx

        click_ctx = click.Context(click.Command("pin"))
        existing = PinKeeperContext()
        existing.verbose = 2
        click_ctx.obj = existing

        assert click_ctx.invoke(command) is existing

    def test_creates_context_when_missing(self) -> None:
        @click.command()
        @pass_context
        def command(ctx: PinKeeperContext) -> PinKeeperContext:
            return ctx

        result = click.Context(click.Command("pin")).invoke(command)

        assert isinstance(result, PinKeeperContext)
        assert result.config is None
