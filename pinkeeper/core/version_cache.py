"""Per-run cache of published versions.

Each :class:`VersionCache` belongs to one pinning run. Every package name
is queried at most once: either lazily through :meth:`VersionCache.versions_for`
or in bulk through :meth:`VersionCache.preload`.

Versions are kept in the order the registry printed them; nothing here
sorts them.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Protocol, Sequence

from packaging.utils import canonicalize_name

from pinkeeper.models.version import Version
from pinkeeper.utils.console import print_status
from pinkeeper.utils.logger import get_logger
from pinkeeper.utils.version_utils import parse_batch_versions, parse_version_list

logger = get_logger("version_cache")

__all__ = ["RegistryQuery", "VersionCache"]


class RegistryQuery(Protocol):
    """What the cache needs from a registry backend."""

    @property
    def supports_batch(self) -> bool: ...

    def query(self, name: str) -> str: ...

    def query_many(self, names: Sequence[str]) -> str: ...


class VersionCache:
    """Memoized mapping of package name to published versions.

    Args:
        registry: Backend used to list published versions.
        reporter: Callable printing user-facing progress messages.
    """

    def __init__(
        self,
        registry: RegistryQuery,
        reporter: Callable[..., None] = print_status,
    ) -> None:
        self.registry = registry
        self.reporter = reporter
        self._versions: Dict[str, List[Version]] = {}

    def versions_for(self, name: str) -> List[Version]:
        """Return the published versions of ``name``, querying on first use.

        A failed or empty query is cached as an empty list.
        """
        key = canonicalize_name(name)
        cached = self._versions.get(key)
        if cached is not None:
            return cached

        self.reporter(f'Searching for versions of "{name}" ...')
        versions = parse_version_list(self.registry.query(name))
        logger.debug("Found %d version(s) for %s", len(versions), name)

        self._versions[key] = versions
        return versions

    def preload(self, names: Iterable[str]) -> None:
        """Fill the cache for many packages with a single batch query.

        Names already cached are skipped. Names that the batch output does
        not mention stay uncached and are queried individually on first
        access.
        """
        pending: List[str] = []
        for name in names:
            if not self.is_cached(name) and name not in pending:
                pending.append(name)

        if not pending:
            return

        if not self.registry.supports_batch:
            logger.debug(
                "Registry has no batch query; %d package(s) will be queried lazily",
                len(pending),
            )
            return

        self.reporter(f"Searching for versions of {', '.join(pending)} ...")
        found = parse_batch_versions(self.registry.query_many(pending), pending)

        for name, versions in found.items():
            self._versions[canonicalize_name(name)] = versions

        missing = [name for name in pending if name not in found]
        if missing:
            logger.debug("Batch query did not cover: %s", ", ".join(missing))

    def is_cached(self, name: str) -> bool:
        return canonicalize_name(name) in self._versions
