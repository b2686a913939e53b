"""Pinning engine for pinkeeper.

:class:`PinningEngine` ties the pieces together for one run:

1. choose the target packages (one explicit name, or everything locked)
2. warm the :class:`VersionCache` with one batch query when there is more
   than one target
3. for every target that is both locked and declared in the manifest,
   ask the :class:`PolicyFilter` for an upgrade and record it in the
   manifest
4. write the manifest once, only if something changed

No per-package outcome is fatal: packages that are not locked are
skipped, packages without a newer allowed version are reported, and a
failed registry query reads as "no versions".

Typical usage::

    engine = PinningEngine(
        PinPolicy.MINOR,
        manifest=ManifestFile("requirements.in"),
        lock=LockFile("requirements.txt"),
        registry=CommandRegistry(),
    )
    decisions = engine.run()
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from pinkeeper.constants import FOLLOW_UP_COMMAND
from pinkeeper.core.lockfile import LockFile
from pinkeeper.core.manifest import ManifestFile
from pinkeeper.core.policy import PolicyFilter
from pinkeeper.core.version_cache import RegistryQuery, VersionCache
from pinkeeper.models.version import PinPolicy, UpdateDecision
from pinkeeper.utils.console import MUTED, print_status
from pinkeeper.utils.logger import get_logger

logger = get_logger("pinner")

__all__ = ["PinningEngine", "follow_up_command"]


def follow_up_command(names: List[str]) -> str:
    """Return the command that re-locks the given packages.

    Example::

        >>> follow_up_command(["flask", "click"])
        'pip-compile -P flask -P click'
    """
    return FOLLOW_UP_COMMAND.format(args=" ".join(f"-P {name}" for name in names))


class PinningEngine:
    """Pin manifest entries to the newest version a policy allows.

    Args:
        policy: Pin policy applied to every package in the run.
        manifest: Manifest receiving the new pins.
        lock: Source of the currently locked versions.
        registry: Backend listing published versions.
        reporter: Callable printing user-facing progress; accepts a
            message and an optional ``style`` display hint.
        dry_run: Record and report updates without writing the manifest.
        backup: Create a timestamped manifest backup before writing.
    """

    def __init__(
        self,
        policy: PinPolicy,
        *,
        manifest: ManifestFile,
        lock: LockFile,
        registry: RegistryQuery,
        reporter: Callable[..., None] = print_status,
        dry_run: bool = False,
        backup: bool = False,
    ) -> None:
        self.policy = policy
        self.manifest = manifest
        self.lock = lock
        self.reporter = reporter
        self.dry_run = dry_run
        self.backup = backup

        self.cache = VersionCache(registry, reporter=reporter)
        self.filter = PolicyFilter(self.cache)
        self.backup_path: Optional[Path] = None

    def run(self, name: Optional[str] = None) -> List[UpdateDecision]:
        """Pin ``name``, or every locked package when ``name`` is ``None``.

        Returns:
            One decision per package that is locked and declared in the
            manifest, in processing order.
        """
        targets = [name] if name else self.lock.names()
        if len(targets) > 1:
            self.cache.preload(targets)

        decisions: List[UpdateDecision] = []
        for target in targets:
            decision = self.pin(target)
            if decision is not None:
                decisions.append(decision)

        updated = [decision.name for decision in decisions if decision.updated]

        self.reporter("Done")
        if updated:
            self.reporter(f'You may want to run: "{follow_up_command(updated)}"')
            self._persist()

        return decisions

    def pin(self, name: str) -> Optional[UpdateDecision]:
        """Choose and record a new pin for a single package.

        Returns:
            ``None`` when the package is not locked or not declared in
            the manifest; an :class:`UpdateDecision` otherwise.
        """
        locked = self.lock.get(name)
        if locked is None:
            logger.info("%s is not in the lock file; skipping", name)
            return None

        entry = self.manifest.find_by_name(locked.name)
        if entry is None:
            logger.info("%s is not declared in %s; skipping", name, self.manifest.path)
            return None

        display = entry.display_name or locked.name
        candidate = self.filter.best_candidate(self.policy, display, locked.version)

        if candidate is None:
            self.reporter(
                f'No newer {self.policy} versions found for "{display}"',
                style=MUTED,
            )
            return UpdateDecision.no_newer_version(locked.name, locked.version)

        self.reporter(f'Updating "{display}" from {locked.version} to {candidate}')
        self.manifest.update(entry, str(candidate))
        return UpdateDecision(name=locked.name, current=locked.version, target=candidate)

    def _persist(self) -> None:
        if self.dry_run:
            self.reporter("Dry run mode - manifest not written", style=MUTED)
            return
        self.backup_path = self.manifest.write(backup=self.backup)
