"""Allow ``python -m pinkeeper pin ...`` as an alias of the ``pinkeeper`` script."""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not start.

    Usually a missing runtime dependency (click, rich, packaging, tomli)
    in the active environment.
    """
    print("pinkeeper CLI could not be loaded.", file=sys.stderr)
    print(f"Python version : {sys.version.split()[0]}", file=sys.stderr)
    print(f"ImportError: {exc}", file=sys.stderr)


def main() -> int:
    try:
        from pinkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
