"""Lock file reader for pinkeeper.

Reads the versions a project is currently resolved to from a
``pip-compile`` or ``pip freeze`` style file. Only entries pinned with
``==`` (or ``===``) are considered locked; anything else is ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

from packaging.utils import canonicalize_name

from pinkeeper.core.parser import RequirementsParser
from pinkeeper.exceptions import InvalidVersionError
from pinkeeper.models.version import LockedDependency, Version
from pinkeeper.utils.logger import get_logger

logger = get_logger("lockfile")

__all__ = ["LockFile"]


class LockFile:
    """Read-only view of a lock file.

    The file is parsed on first access and the result kept for the
    lifetime of the instance.

    Args:
        path: Location of the lock file.
        parser: Parser to use; a fresh :class:`RequirementsParser` by default.

    Example::

        >>> lock = LockFile("requirements.txt")
        >>> lock.get("Flask").version.segments
        (2, 3, 3)
    """

    def __init__(
        self,
        path: Union[str, Path],
        parser: Optional[RequirementsParser] = None,
    ) -> None:
        self.path = Path(path)
        self.parser = parser or RequirementsParser()
        self._locked: Optional[Dict[str, LockedDependency]] = None

    def locked_dependencies(self) -> Dict[str, LockedDependency]:
        """Return every pinned dependency, keyed by canonical name.

        Raises:
            FileOperationError: The lock file is missing or unreadable.
            ParseError: A line is not valid PEP 508 syntax.
        """
        if self._locked is None:
            self._locked = self._load()
        return self._locked

    def get(self, name: str) -> Optional[LockedDependency]:
        return self.locked_dependencies().get(canonicalize_name(name))

    def names(self):
        """Locked dependency names in file order."""
        return list(self.locked_dependencies())

    def _load(self) -> Dict[str, LockedDependency]:
        locked: Dict[str, LockedDependency] = {}

        for requirement in self.parser.parse_file(self.path):
            pinned = requirement.pinned_version
            if pinned is None:
                logger.debug(
                    "Ignoring unpinned lock entry %s on line %d",
                    requirement.name,
                    requirement.line_number,
                )
                continue

            try:
                version = Version.parse(pinned)
            except InvalidVersionError:
                logger.debug("Ignoring %s: unparseable version %r", requirement.name, pinned)
                continue

            locked.setdefault(
                requirement.name,
                LockedDependency(name=requirement.name, version=version),
            )

        logger.debug("Loaded %d locked dependencies from %s", len(locked), self.path)
        return locked
