"""
File access for manifests and lock files.

Reads are size-limited and rewrites go through a temporary file in the
target directory followed by an atomic rename, so an interrupted run
never leaves a half-written ``requirements.in``. Every failure surfaces
as :class:`~pinkeeper.exceptions.FileOperationError`.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pinkeeper.constants import MAX_FILE_SIZE
from pinkeeper.exceptions import FileOperationError
from pinkeeper.utils.logger import get_logger

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _failure(
    path: Path, operation: str, message: str, cause: Optional[Exception] = None
) -> FileOperationError:
    return FileOperationError(
        message, file_path=str(path), operation=operation, original_error=cause
    )


def _require_file(path: Path, operation: str) -> Path:
    if not path.exists():
        raise _failure(path, operation, f"File not found: {path}")
    if not path.is_file():
        raise _failure(path, operation, f"Not a file: {path}")
    return path


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)


def _atomic_write(target: Path, content: str) -> None:
    """Replace ``target`` with ``content`` in one rename."""
    temp_name = None
    try:
        fd, temp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.")
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        Path(temp_name).replace(target)
    except OSError as exc:
        if temp_name is not None:
            _discard(Path(temp_name))
        raise _failure(target, "write", f"Atomic write failed: {exc}", exc) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Return the text of ``file_path`` with its line endings untouched.

    Raises:
        FileOperationError: Missing, not a regular file, larger than
            ``max_size`` bytes, or not decodable.
    """
    path = _require_file(Path(file_path), "read")

    byte_count = path.stat().st_size
    if max_size is not None and byte_count > max_size:
        raise _failure(path, "read", f"File too large: {byte_count} bytes (max {max_size})")

    try:
        with open(path, encoding=encoding, newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise _failure(path, "read", f"Failed to read file: {exc}", exc) from exc


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    create_backup: bool = False,
) -> Optional[Path]:
    """Atomically replace the content of ``file_path``.

    With ``create_backup`` an existing file is first copied aside by
    :func:`create_timestamped_backup`; the backup path is returned.
    """
    target = Path(file_path)
    backup = create_timestamped_backup(target) if create_backup and target.is_file() else None
    _atomic_write(target, content)
    logger.debug("Wrote %d characters to %s", len(content), target)
    return backup


def create_timestamped_backup(file_path: PathLike) -> Path:
    """Copy ``requirements.in`` to ``requirements.<YYYYmmdd_HHMMSS>.backup.in``."""
    source = _require_file(Path(file_path), "backup")
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup = source.with_name(f"{source.stem}.{stamp}.backup{source.suffix}")

    try:
        shutil.copy2(source, backup)
    except OSError as exc:
        raise _failure(source, "backup", f"Failed to create backup: {exc}", exc) from exc

    logger.debug("Backed up %s to %s", source, backup)
    return backup
