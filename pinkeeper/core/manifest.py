"""Dependency manifest store for pinkeeper.

:class:`ManifestFile` wraps the editable requirements file
(``requirements.in``). Updates are recorded in memory with
:meth:`ManifestFile.update` and only reach the disk when
:meth:`ManifestFile.write` is called. Lines that are not updated are
written back byte for byte.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from packaging.utils import canonicalize_name

from pinkeeper.core.parser import RequirementsParser
from pinkeeper.models.requirement import Requirement
from pinkeeper.utils.filesystem import safe_read_file, safe_write_file
from pinkeeper.utils.logger import get_logger

logger = get_logger("manifest")

__all__ = ["ManifestFile"]


class ManifestFile:
    """Editable requirements file with pending version pins.

    Args:
        path: Location of the manifest.
        parser: Parser to use; a fresh :class:`RequirementsParser` by default.

    Raises:
        FileOperationError: The manifest is missing or unreadable.
        ParseError: A line is not valid PEP 508 syntax.
    """

    def __init__(
        self,
        path: Union[str, Path],
        parser: Optional[RequirementsParser] = None,
    ) -> None:
        self.path = Path(path)
        self.parser = parser or RequirementsParser()

        self._lines: List[str] = []
        self._entries: Dict[str, Requirement] = {}
        self._load(safe_read_file(self.path))

        self._pending: Dict[str, Tuple[Requirement, str]] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> Optional[Requirement]:
        """Return the manifest entry for ``name``, if declared."""
        return self._entries.get(canonicalize_name(name))

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update(self, requirement: Requirement, version: str) -> None:
        """Record that ``requirement`` should be pinned to ``version``.

        Nothing is written until :meth:`write` is called. Recording a
        second version for the same entry replaces the first.
        """
        self._pending[requirement.name] = (requirement, version)
        logger.debug("Pending pin: %s==%s", requirement.name, version)

    def render(self) -> str:
        """Return the manifest text with all pending pins applied."""
        replacements: Dict[int, Tuple[Requirement, str]] = {
            requirement.line_number: (requirement, version)
            for requirement, version in self._pending.values()
        }

        rendered: List[str] = []
        line_index = 0
        while line_index < len(self._lines):
            line_number = line_index + 1
            replacement = replacements.get(line_number)
            if replacement is None:
                rendered.append(self._lines[line_index])
                line_index += 1
                continue

            requirement, version = replacement
            last_line = self._lines[line_index + requirement.line_span - 1]
            ending = last_line[len(last_line.rstrip("\r\n")) :]
            rendered.append(
                requirement.pin_version(version, preserve_trailing_newline=False) + ending
            )
            line_index += requirement.line_span

        return "".join(rendered)

    def write(self, *, backup: bool = False) -> Optional[Path]:
        """Persist pending pins to disk.

        Args:
            backup: Copy the current manifest to a timestamped backup first.

        Returns:
            Path of the backup, if one was created.

        Raises:
            FileOperationError: The manifest could not be written.
        """
        if not self.has_pending:
            logger.debug("No pending changes for %s", self.path)
            return None

        content = self.render()
        backup_path = safe_write_file(self.path, content, create_backup=backup)

        # The written content becomes the new baseline
        self._load(content)
        written = len(self._pending)
        self._pending.clear()

        logger.info("Wrote %d pin(s) to %s", written, self.path)
        return backup_path

    def _load(self, content: str) -> None:
        self._lines = content.splitlines(keepends=True)
        self._entries = {}
        for requirement in self.parser.parse_string(
            content, source_file_path=str(self.path)
        ):
            if requirement.name in self._entries:
                logger.debug(
                    "Duplicate entry for %s on line %d ignored",
                    requirement.name,
                    requirement.line_number,
                )
                continue
            self._entries[requirement.name] = requirement
