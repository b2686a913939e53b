"""
Reader for pip-style requirements files.

Both the hand-edited manifest (``requirements.in``) and the compiled
lock file (``requirements.txt``) go through :class:`RequirementsParser`.
Only entries that name a package by index version become
:class:`~pinkeeper.models.requirement.Requirement` objects; these are
skipped silently:

- blank lines and ``#`` comments
- option lines such as ``-r base.in``, ``-e .`` or ``--index-url ...``
- direct URLs, ``name @ url`` references and local paths

``--hash`` values (inline or on ``\\``-continued lines, as
``pip-compile --generate-hashes`` writes them) are collected onto the
entry they belong to.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from packaging.requirements import InvalidRequirement
from packaging.requirements import Requirement as Pep508Requirement
from packaging.utils import canonicalize_name

from pinkeeper.constants import LINE_CONTINUATION, OPTION_PREFIX
from pinkeeper.exceptions import ParseError
from pinkeeper.models.requirement import Requirement
from pinkeeper.utils.filesystem import safe_read_file
from pinkeeper.utils.logger import get_logger

__all__ = ["RequirementsParser"]

_HASH_OPTION = re.compile(r"--hash[=\s]+(\S+)")

# "#" followed by one of these belongs to a URL, not a comment.
_URL_FRAGMENTS = ("egg=", "subdirectory=", "sha1=", "sha256=")

_ARCHIVE_SUFFIXES = (".whl", ".zip", ".tar.gz")


class RequirementsParser:
    """Turns requirements text into :class:`Requirement` entries.

    Entries remember the physical line they start on and how many lines
    they occupy, which is what the manifest writer needs to replace them.
    """

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def parse_file(self, file_path: Union[str, Path]) -> List[Requirement]:
        """Parse the requirements file at ``file_path``.

        Raises:
            FileOperationError: The file is missing or unreadable.
            ParseError: An entry is not valid PEP 508.
        """
        return self.parse_string(safe_read_file(file_path), source_file_path=str(file_path))

    def parse_string(
        self,
        requirements_content: str,
        source_file_path: Optional[str] = None,
    ) -> List[Requirement]:
        """
        Example::

            >>> text = "flask>=2.0\\n# c\\nrequests\\n"
            >>> [r.name for r in RequirementsParser().parse_string(text)]
            ['flask', 'requests']
        """
        entries: List[Requirement] = []
        for first_line, span, text in _logical_lines(requirements_content):
            entry = self.parse_line(text, first_line, source_file_path)
            if entry is not None:
                entry.line_span = span
                entries.append(entry)

        where = f" from {source_file_path}" if source_file_path else ""
        self.logger.debug("Parsed %d requirement(s)%s", len(entries), where)
        return entries

    def parse_line(
        self,
        line_text: str,
        line_number: int,
        source_file_path: Optional[str] = None,
    ) -> Optional[Requirement]:
        """Parse one logical line; ``None`` means there is nothing to pin.

        Raises:
            ParseError: The line is not valid PEP 508.
        """
        body, comment = _split_comment(line_text.strip())
        hashes = _HASH_OPTION.findall(body)
        body = _HASH_OPTION.sub("", body).strip()

        if not body or body.startswith(OPTION_PREFIX):
            return None
        if _is_url_or_path(body):
            self.logger.debug("Skipping URL or path on line %d", line_number)
            return None

        try:
            spec = Pep508Requirement(body)
        except InvalidRequirement as exc:
            raise ParseError(
                f"Invalid requirement syntax: {exc}",
                line_number=line_number,
                line_content=body,
                file_path=source_file_path,
            ) from exc

        if spec.url:
            self.logger.debug("Skipping direct reference %s", spec.name)
            return None

        return Requirement(
            name=canonicalize_name(spec.name),
            display_name=spec.name,
            specs=[(item.operator, item.version) for item in spec.specifier],
            extras=sorted(spec.extras),
            markers=str(spec.marker) if spec.marker else None,
            hashes=hashes,
            comment=comment,
            line_number=line_number,
            raw_line=line_text,
        )


def _split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Separate ``line`` into its requirement text and inline comment.

    >>> _split_comment("requests>=2.25  # http")
    ('requests>=2.25', 'http')
    """
    if line.startswith("#"):
        return "", line[1:].strip() or None

    position = line.find("#")
    while position != -1:
        before, after = line[:position], line[position + 1 :]
        scheme = before.rfind("://")
        inside_url = scheme != -1 and " " not in before[scheme:]
        if not after.startswith(_URL_FRAGMENTS) and not inside_url:
            return before.strip(), after.strip()
        position = line.find("#", position + 1)
    return line, None


def _logical_lines(content: str) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(first_line_number, line_count, text)`` per logical line.

    A trailing ``\\`` joins a line to the next one; comment lines never
    continue.
    """
    pending: List[str] = []
    start = 0

    for number, raw in enumerate(content.splitlines(), start=1):
        if not pending:
            start = number
        text = raw.rstrip()
        continued = text.endswith(LINE_CONTINUATION) and not text.lstrip().startswith("#")
        pending.append(text[: -len(LINE_CONTINUATION)] if continued else text)
        if continued:
            continue
        yield start, number - start + 1, " ".join(part.strip() for part in pending)
        pending = []

    if pending:
        yield start, len(pending), " ".join(part.strip() for part in pending)


def _is_url_or_path(spec: str) -> bool:
    """``https://...``, ``./pkg``, ``/abs/dir`` or a bare archive file name."""
    if "://" in spec.split("@", 1)[0]:
        return True
    first = spec.split()[0]
    return first.startswith((".", "/", "~")) or first.endswith(_ARCHIVE_SUFFIXES)
