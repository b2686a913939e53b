"""
Version comparison and registry output parsing for pinkeeper.

This module contains the ordinal comparison used to rank versions and
the parsers that turn raw registry query output into ordered lists of
:class:`~pinkeeper.models.version.Version` objects.

Two output shapes are understood:

* single-package output, where one line carries the comma separated
  version list (``pip index versions`` prints
  ``Available versions: 2.31.0, 2.30.0, ...``; ``gem query`` prints
  ``rails (7.1.3, 7.1.2)``). Other lines, such as pip's ``INSTALLED:``
  and ``LATEST:`` footers, are ignored.
* batch output, one line per package: ``name (1.2.0, 1.1.0, 1.0.0)``
"""

from __future__ import annotations

import re
from itertools import zip_longest
from typing import Dict, Iterable, List, Optional, Sequence, Union

from packaging.utils import canonicalize_name

from pinkeeper.exceptions import InvalidVersionError
from pinkeeper.models.version import Version

SegmentsLike = Union[Version, Sequence[int]]

_AVAILABLE_LINE = re.compile(r"^\s*Available versions:(.*)$", re.MULTILINE | re.IGNORECASE)

# ``name (v1, v2, ...)``
_PARENTHESISED_LINE = re.compile(
    r"^\s*[A-Za-z0-9_][\w.\-]*\s+\(([^()\n]*)\)\s*$",
    re.MULTILINE,
)

# Leading version literal of a token such as ``1.16.0-x86_64-linux``.
_LEADING_LITERAL = re.compile(r"^\s*([\d.]*\d[\w.\-]*)")

# PEP 503 treats runs of these as one separator.
_NAME_SEPARATORS = re.compile(r"[-_.]+")


def _segments(value: SegmentsLike) -> Sequence[int]:
    return value.segments if isinstance(value, Version) else value


def is_higher(candidate: SegmentsLike, current: SegmentsLike) -> bool:
    """Return ``True`` when ``candidate`` is strictly greater than ``current``.

    Segments are compared positionally after padding the shorter sequence
    with zeros, so ``1.2`` and ``1.2.0`` are equal.

    Examples:
        >>> is_higher([1, 2, 1], [1, 2])
        True
        >>> is_higher([1, 2], [1, 2, 0])
        False
    """
    for left, right in zip_longest(_segments(candidate), _segments(current), fillvalue=0):
        if left != right:
            return left > right
    return False


def parse_version_tokens(tokens: Iterable[str]) -> List[Version]:
    """Parse raw version tokens, dropping duplicates and unparseable ones.

    The first occurrence of each distinct version string wins, so the
    order reported by the registry is kept.
    """
    seen = set()
    versions: List[Version] = []
    for token in tokens:
        token = token.strip()
        if not token or token in seen:
            continue
        seen.add(token)
        try:
            versions.append(Version.parse(token))
        except InvalidVersionError:
            continue
    return versions


def _listed_tokens(text: str) -> List[str]:
    """Leading version literal of each comma separated token in ``text``."""
    tokens = []
    for token in text.split(","):
        literal = _LEADING_LITERAL.match(token)
        if literal:
            tokens.append(literal.group(1))
    return tokens


def _version_list_text(output: str) -> Optional[str]:
    available = _AVAILABLE_LINE.search(output)
    if available:
        return available.group(1)

    listed = [match.group(1) for match in _PARENTHESISED_LINE.finditer(output)]
    with_commas = [text for text in listed if "," in text]
    if with_commas or listed:
        return (with_commas or listed)[0]

    # Bare ``1.2.0, 1.1.0`` list
    for line in output.splitlines():
        if "," in line and all(_LEADING_LITERAL.match(part) for part in line.split(",")):
            return line
    return None


def parse_version_list(output: str) -> List[Version]:
    """Extract versions from a single-package registry query.

    Only the line holding the version list is read: pip's
    ``Available versions:`` line when present, otherwise a
    ``name (v1, v2, ...)`` line, otherwise a bare comma separated line.

    Args:
        output: Raw text printed by the query command.

    Returns:
        Distinct versions in the order they were printed. Empty when the
        output holds no version list.

    Example::

        >>> text = "requests (2.31.0)\\nAvailable versions: 2.31.0, 2.30.0"
        >>> [str(v) for v in parse_version_list(text)]
        ['2.31.0', '2.30.0']
    """
    text = _version_list_text(output) if output else None
    if text is None:
        return []
    return parse_version_tokens(_listed_tokens(text))


def _name_pattern(canonical_name: str) -> str:
    """Regex matching every PEP 503 spelling of ``canonical_name``."""
    return "[-_.]+".join(re.escape(part) for part in _NAME_SEPARATORS.split(canonical_name))


def parse_batch_versions(output: str, names: Iterable[str]) -> Dict[str, List[Version]]:
    """Extract per-package version lists from a batch registry query.

    Each package is matched on a line of the form
    ``name (v1, v2, ...)``; the match is anchored on the package name so
    that packages sharing a prefix do not bleed into each other. Names
    are compared in canonical form, so ``typing_extensions`` in the
    output answers a query for ``typing-extensions``.

    Args:
        output: Raw multi-line text printed by the batch query command.
        names: Package names that were queried.

    Returns:
        Mapping from the name as it appears in ``names`` to its versions.
        Names missing from the output are absent from the mapping.
    """
    wanted = {canonicalize_name(name): name for name in names}
    if not output or not wanted:
        return {}

    alternatives = "|".join(_name_pattern(canonical) for canonical in wanted)
    pattern = re.compile(
        rf"^({alternatives})\s+\(([^()\n]*)\)\s*$",
        re.MULTILINE | re.IGNORECASE,
    )

    found: Dict[str, List[Version]] = {}
    for match in pattern.finditer(output):
        name = wanted[canonicalize_name(match.group(1))]
        found[name] = parse_version_tokens(_listed_tokens(match.group(2)))
    return found


def get_update_type(current: Optional[Version], target: Optional[Version]) -> str:
    """Classify the change between two versions.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"`` or ``"unknown"``.

    Examples:
        >>> get_update_type(Version.parse("1.0.0"), Version.parse("2.0.0"))
        'major'
        >>> get_update_type(None, Version.parse("1.0.0"))
        'new'
    """
    if target is None:
        return "unknown"

    if current is None:
        return "new"

    if not is_higher(target, current):
        return "downgrade" if is_higher(current, target) else "same"

    if target.major != current.major:
        return "major"

    if target.minor != current.minor:
        return "minor"

    return "patch"
