"""
Unified data model exports for pinkeeper.

Example:
    >>> from pinkeeper.models import PinPolicy, Requirement, Version
"""

from __future__ import annotations

from pinkeeper.models.requirement import Requirement
from pinkeeper.models.version import (
    DecisionReason,
    LockedDependency,
    PinPolicy,
    UpdateDecision,
    Version,
)

__all__ = [
    "DecisionReason",
    "LockedDependency",
    "PinPolicy",
    "Requirement",
    "UpdateDecision",
    "Version",
]
