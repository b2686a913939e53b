"""
Shared helpers: Rich console output, logging, file access and version
comparison/parsing. The names below are the supported import surface.
"""

from __future__ import annotations

from pinkeeper.utils.console import (
    MUTED,
    colorize_update_type,
    print_error,
    print_status,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)
from pinkeeper.utils.filesystem import (
    create_timestamped_backup,
    safe_read_file,
    safe_write_file,
)
from pinkeeper.utils.logger import get_logger, setup_logging
from pinkeeper.utils.version_utils import (
    get_update_type,
    is_higher,
    parse_batch_versions,
    parse_version_list,
)

__all__ = [
    "MUTED",
    "colorize_update_type",
    "create_timestamped_backup",
    "get_logger",
    "get_update_type",
    "is_higher",
    "parse_batch_versions",
    "parse_version_list",
    "print_error",
    "print_status",
    "print_success",
    "print_table",
    "print_warning",
    "reconfigure_console",
    "safe_read_file",
    "safe_write_file",
    "setup_logging",
]
