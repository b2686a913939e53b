"""Shared fixtures for the pinkeeper test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest


class FakeRegistry:
    """In-memory registry that records every query it receives.

    ``listings`` maps a package name to its versions, newest first; the
    single-package output mimics ``pip index versions``.
    """

    def __init__(
        self,
        listings: Optional[Dict[str, List[str]]] = None,
        batch_output: Optional[str] = None,
    ) -> None:
        self.listings = listings or {}
        self.batch_output = batch_output
        self.queries: List[str] = []
        self.batch_queries: List[List[str]] = []

    @property
    def supports_batch(self) -> bool:
        return self.batch_output is not None

    def query(self, name: str) -> str:
        self.queries.append(name)
        versions = self.listings.get(name)
        if not versions:
            return ""
        return f"{name} ({versions[0]})\nAvailable versions: {', '.join(versions)}\n"

    def query_many(self, names: Sequence[str]) -> str:
        self.batch_queries.append(list(names))
        return self.batch_output or ""


class RecordingReporter:
    """Reporter double collecting ``(message, style)`` pairs."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, Optional[str]]] = []

    def __call__(self, message: str, *, style: Optional[str] = None) -> None:
        self.messages.append((message, style))

    @property
    def texts(self) -> List[str]:
        return [message for message, _ in self.messages]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def write_file(tmp_path: Path):
    """Return a helper writing text files below ``tmp_path``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
