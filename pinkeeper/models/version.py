"""
Version and pin policy data models for pinkeeper.

A :class:`Version` is the ordered sequence of integer segments found in
a version string. Only digit groups are kept, so ``"1.2.3"``,
``"v1.2.3"`` and ``"1.2.3-java"`` all share the segments ``(1, 2, 3)``.
Versions have no fixed arity; positions beyond the end read as ``0``.
"""

from __future__ import annotations

import re
import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from pinkeeper.exceptions import InvalidVersionError

_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class Version:
    """
    Immutable parsed version.

    Attributes:
        raw: Version string exactly as it was reported.
        segments: Integer segments in positional order.
    """

    raw: str
    segments: Tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse a version string into its numeric segments.

        Args:
            text: Version string, e.g. ``"2.31.0"``.

        Returns:
            Parsed :class:`Version`.

        Raises:
            InvalidVersionError: ``text`` contains no digits.

        Example::

            >>> Version.parse("1.0.0.rc1").segments
            (1, 0, 0, 1)
        """
        raw = text.strip()
        digits = _DIGITS.findall(raw)
        if not digits:
            raise InvalidVersionError(text)
        return cls(raw=raw, segments=tuple(int(d) for d in digits))

    def segment(self, index: int) -> int:
        """Return the segment at ``index``, or ``0`` when it is absent.

        Negative indexes count from the end, like sequence indexing.
        """
        try:
            return self.segments[index]
        except IndexError:
            return 0

    @property
    def major(self) -> int:
        return self.segment(0)

    @property
    def minor(self) -> int:
        return self.segment(1)

    @property
    def patch(self) -> int:
        """Last segment of the version (``0`` for an empty version)."""
        return self.segment(-1)

    def __str__(self) -> str:
        return self.raw


class PinPolicy(enum.Enum):
    """Which version segments must stay fixed when picking an upgrade."""

    AVAILABLE = "available"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def from_string(cls, value: str) -> "PinPolicy":
        """Look up a policy by its (case-insensitive) name.

        Raises:
            ValueError: ``value`` does not name a policy.
        """
        normalized = value.strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        choices = ", ".join(p.value for p in cls)
        raise ValueError(f"Unknown pin policy {value!r} (expected one of: {choices})")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LockedDependency:
    """A dependency as currently resolved in the lock file."""

    name: str
    version: Version


class DecisionReason(enum.Enum):
    """Why no update was produced for a dependency."""

    NO_NEWER_VERSION = "no_newer_version"


@dataclass(frozen=True)
class UpdateDecision:
    """
    Outcome of pinning a single dependency.

    Attributes:
        name: Canonical dependency name.
        current: Version found in the lock file.
        target: Version chosen for the manifest, or ``None``.
        reason: Set when ``target`` is ``None``.
    """

    name: str
    current: Version
    target: Optional[Version] = None
    reason: Optional[DecisionReason] = None

    @property
    def updated(self) -> bool:
        return self.target is not None

    @classmethod
    def no_newer_version(cls, name: str, current: Version) -> "UpdateDecision":
        return cls(name=name, current=current, reason=DecisionReason.NO_NEWER_VERSION)
