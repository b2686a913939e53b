"""Pin command implementation for pinkeeper.

Rewrites the manifest so that each locked package is pinned to the
newest version allowed by the selected pin policy:

- ``available``: any newer version
- ``minor``: a newer minor release within the locked major version
- ``patch``: a newer patch release within the locked major.minor series

Typical usage::

    # Pin every locked package to its newest patch release
    $ pinkeeper pin

    # Pin one package to the newest release of any kind
    $ pinkeeper pin flask --policy available

    # Show what would change without writing requirements.in
    $ pinkeeper pin --policy minor --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import click

from pinkeeper.config import PinKeeperConfig
from pinkeeper.context import pass_context, PinKeeperContext
from pinkeeper.core import CommandRegistry, LockFile, ManifestFile, PinningEngine
from pinkeeper.exceptions import PinKeeperError
from pinkeeper.models import PinPolicy, UpdateDecision
from pinkeeper.utils import (
    colorize_update_type,
    get_logger,
    get_update_type,
    print_error,
    print_success,
    print_table,
)

logger = get_logger("commands.pin")


@click.command()
@click.argument("name", required=False)
@click.option(
    "--policy",
    "-p",
    type=click.Choice([policy.value for policy in PinPolicy], case_sensitive=False),
    default=None,
    help="Which versions may be chosen (default: from config, else 'patch').",
)
@click.option(
    "--manifest",
    "-m",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Requirements file to rewrite (default: requirements.in).",
)
@click.option(
    "--lock",
    "-l",
    "lock_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Lock file with the current versions (default: requirements.txt).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report the new pins without writing the manifest.",
)
@click.option(
    "--backup/--no-backup",
    default=None,
    help="Back up the manifest before rewriting it.",
)
@pass_context
def pin(
    ctx: PinKeeperContext,
    name: Optional[str],
    policy: Optional[str],
    manifest: Optional[Path],
    lock_file: Optional[Path],
    dry_run: bool,
    backup: Optional[bool],
) -> None:
    """Pin NAME (or every locked package) to the newest allowed version.

    Versions are looked up with the configured registry query command
    and compared with the version recorded in the lock file. When at
    least one package changed, re-run pip-compile for the listed
    packages to refresh the lock file.
    """
    config = ctx.config or PinKeeperConfig()

    selected_policy = PinPolicy.from_string(policy) if policy else config.policy
    manifest_path = manifest or Path(config.manifest)
    lock_path = lock_file or Path(config.lock_file)
    make_backup = config.backup if backup is None else backup

    logger.info(
        "Pinning %s with %s policy (manifest=%s, lock=%s)",
        name or "all locked packages",
        selected_policy,
        manifest_path,
        lock_path,
    )

    try:
        engine = PinningEngine(
            selected_policy,
            manifest=ManifestFile(manifest_path),
            lock=LockFile(lock_path),
            registry=CommandRegistry(
                config.query_command,
                config.batch_query_command,
                timeout=config.query_timeout,
            ),
            dry_run=dry_run,
            backup=make_backup,
        )
        decisions = engine.run(name)
    except PinKeeperError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    _display_pins(decisions, dry_run)

    if engine.backup_path:
        logger.info("Created backup: %s", engine.backup_path)


def _display_pins(decisions: List[UpdateDecision], dry_run: bool) -> None:
    """Summarise the new pins as a Rich table."""
    updated = [decision for decision in decisions if decision.updated]
    if not updated:
        return

    rows = []
    for decision in updated:
        change = get_update_type(decision.current, decision.target)
        rows.append(
            {
                "Package": decision.name,
                "Locked": str(decision.current),
                "Pinned": f"[bold green]{decision.target}[/bold green]",
                "Change": colorize_update_type(change),
            }
        )

    print_table(
        rows,
        title="New Pins (Dry Run)" if dry_run else "New Pins",
        column_styles={
            "Package": {"style": "bold cyan", "no_wrap": True},
            "Locked": {"justify": "center", "style": "dim"},
            "Pinned": {"justify": "center"},
            "Change": {"justify": "center"},
        },
    )

    if not dry_run:
        print_success(f"Pinned {len(updated)} package(s)")
