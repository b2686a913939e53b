"""State handed from the ``pinkeeper`` group to the ``pin`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from pinkeeper.config import PinKeeperConfig


class PinKeeperContext:
    """Global options plus the configuration they resolved to.

    ``config`` stays ``None`` when a command is invoked without the
    group callback (as in unit tests); commands then fall back to a
    default :class:`PinKeeperConfig`.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose = 0
        self.color = True
        self.config: Optional[PinKeeperConfig] = None


pass_context = click.make_pass_decorator(PinKeeperContext, ensure=True)
