"""
One entry of a pip requirements file.

Both the manifest (``requirements.in``) and the lock file
(``requirements.txt``) are parsed into :class:`Requirement` objects by
:class:`~pinkeeper.core.parser.RequirementsParser`. The manifest store
uses :meth:`Requirement.pin_version` to produce the replacement line.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from pinkeeper.constants import EXACT_PIN_OPERATORS, PIN_OPERATOR


@dataclass
class Requirement:
    """
    A parsed requirement together with where it sits in its file.

    Attributes:
        name: Canonical (PEP 503) package name, used for lookups.
        display_name: The name as the user wrote it; used when rendering.
        specs: ``(operator, version)`` pairs in file order.
        extras: Requested extras.
        markers: PEP 508 environment marker, without the ``;``.
        hashes: ``--hash`` values, e.g. ``sha256:...``.
        comment: Inline comment text after ``#``.
        line_number: First physical line of the entry (1-based).
        line_span: Physical lines covered, counting ``\\`` continuations.
        raw_line: The logical line as read.
    """

    name: str
    specs: List[Tuple[str, str]] = field(default_factory=list)
    extras: List[str] = field(default_factory=list)
    markers: Optional[str] = None
    hashes: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    line_number: int = 0
    raw_line: Optional[str] = None
    display_name: Optional[str] = None
    line_span: int = 1

    @property
    def pinned_version(self) -> Optional[str]:
        """Version of the first ``==``/``===`` specifier, if the entry is pinned."""
        return next(
            (version for operator, version in self.specs if operator in EXACT_PIN_OPERATORS),
            None,
        )

    def to_string(self, *, include_hashes: bool = True, include_comment: bool = True) -> str:
        """Render the entry as a single requirements-file line (no newline)."""
        parts = [self.display_name or self.name]
        if self.extras:
            parts.append("[" + ",".join(sorted(self.extras)) + "]")
        parts.append(",".join(operator + version for operator, version in self.specs))
        if self.markers:
            parts.append(f" ; {self.markers}")
        if include_hashes:
            parts.extend(f" --hash={value}" for value in self.hashes)
        if include_comment and self.comment:
            parts.append(f"  # {self.comment}")
        return "".join(parts)

    def pin_version(
        self,
        new_version: str,
        *,
        preserve_trailing_newline: bool = True,
    ) -> str:
        """
        Return the line that pins this entry to ``new_version``.

        All existing specifiers collapse into one ``==`` pin. Extras,
        markers and the inline comment survive; hashes are dropped
        because they were computed for the previous version.

        Example::

            >>> Requirement(name="flask", specs=[(">=", "2.0")]).pin_version("2.3.3")
            'flask==2.3.3\\n'
        """
        pinned = replace(self, specs=[(PIN_OPERATOR, new_version)], hashes=[])
        line = pinned.to_string(include_hashes=False)
        return line + "\n" if preserve_trailing_newline else line

    def __str__(self) -> str:
        return self.to_string()
