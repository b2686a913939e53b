"""Pin policy filtering.

Given the versions a registry published for a package and the version
currently locked, :class:`PolicyFilter` picks the upgrade target allowed
by a :class:`~pinkeeper.models.version.PinPolicy`:

============  ===========================================================
Policy        Candidate must be newer and
============  ===========================================================
available     (no further constraint)
minor         keep the major version, raise the minor version
patch         keep major and minor, raise the last segment
============  ===========================================================

The first qualifying version **in registry order** is returned, not the
numerically greatest one. Registries list newest releases first, so this
is normally the latest allowed version; an unsorted listing would make
it an arbitrary one.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from pinkeeper.core.version_cache import VersionCache
from pinkeeper.models.version import PinPolicy, Version
from pinkeeper.utils.logger import get_logger
from pinkeeper.utils.version_utils import is_higher

logger = get_logger("policy")

__all__ = ["PolicyFilter", "select_candidate"]


def _any_newer(candidate: Version, current: Version) -> bool:
    return True


def _same_major(candidate: Version, current: Version) -> bool:
    return candidate.major == current.major and candidate.minor > current.minor


def _same_minor(candidate: Version, current: Version) -> bool:
    return (
        candidate.major == current.major
        and candidate.minor == current.minor
        and candidate.patch > current.patch
    )


POLICY_CONSTRAINTS: Dict[PinPolicy, Callable[[Version, Version], bool]] = {
    PinPolicy.AVAILABLE: _any_newer,
    PinPolicy.MINOR: _same_major,
    PinPolicy.PATCH: _same_minor,
}


def newer_versions(versions: Iterable[Version], current: Version) -> List[Version]:
    """Return the versions strictly higher than ``current``, order kept."""
    return [version for version in versions if is_higher(version, current)]


def select_candidate(
    policy: PinPolicy,
    versions: Iterable[Version],
    current: Version,
) -> Optional[Version]:
    """Return the first version in ``versions`` that ``policy`` allows.

    Example::

        >>> versions = [Version.parse(v) for v in ("2.4.0", "2.3.9", "3.0.0")]
        >>> str(select_candidate(PinPolicy.MINOR, versions, Version.parse("2.3.4")))
        '2.4.0'
    """
    constraint = POLICY_CONSTRAINTS[policy]
    for candidate in newer_versions(versions, current):
        if constraint(candidate, current):
            return candidate
    return None


class PolicyFilter:
    """Choose upgrade targets using versions from a :class:`VersionCache`."""

    def __init__(self, cache: VersionCache) -> None:
        self.cache = cache

    def best_candidate(
        self,
        policy: PinPolicy,
        name: str,
        current: Version,
    ) -> Optional[Version]:
        """Return the version ``name`` should be pinned to, or ``None``."""
        candidate = select_candidate(policy, self.cache.versions_for(name), current)
        logger.debug(
            "%s policy for %s (current %s): %s",
            policy,
            name,
            current,
            candidate if candidate is not None else "no candidate",
        )
        return candidate
