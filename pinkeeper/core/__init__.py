"""
Core functionality exports for pinkeeper.

    from pinkeeper.core import PinningEngine, VersionCache

The version selection engine (:class:`VersionCache`, :class:`PolicyFilter`,
:class:`PinningEngine`) lives here together with the collaborators it
reads from and writes to (:class:`LockFile`, :class:`ManifestFile`,
:class:`CommandRegistry`).
"""

from __future__ import annotations

from pinkeeper.core.parser import RequirementsParser
from pinkeeper.core.registry import CommandRegistry
from pinkeeper.core.lockfile import LockFile
from pinkeeper.core.manifest import ManifestFile
from pinkeeper.core.version_cache import VersionCache
from pinkeeper.core.policy import PolicyFilter, select_candidate
from pinkeeper.core.pinner import PinningEngine, follow_up_command

__all__ = [
    "CommandRegistry",
    "LockFile",
    "ManifestFile",
    "PinningEngine",
    "PolicyFilter",
    "RequirementsParser",
    "VersionCache",
    "follow_up_command",
    "select_candidate",
]
