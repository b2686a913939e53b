"""Package version for pinkeeper, read by ``pyproject.toml`` tooling and ``--version``."""

__version__ = "0.1.0"
