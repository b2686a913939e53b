"""
Centralized constants for pinkeeper.

This module defines immutable configuration values used across pinkeeper,
including default file locations, registry query commands, requirement
file directives, and logging formats. All values are intended to be
treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Pin policy
# ---------------------------------------------------------------------------

#: Pin policy used when neither the CLI nor the config file selects one.
DEFAULT_POLICY: Final[str] = "patch"

# ---------------------------------------------------------------------------
# File locations
# ---------------------------------------------------------------------------

#: Editable dependency manifest (pip-tools input file).
DEFAULT_MANIFEST_FILE: Final[str] = "requirements.in"

#: Lock file holding the currently resolved versions.
DEFAULT_LOCK_FILE: Final[str] = "requirements.txt"

#: Whether a timestamped backup of the manifest is written before saving.
DEFAULT_BACKUP: Final[bool] = False

# ---------------------------------------------------------------------------
# Registry queries
# ---------------------------------------------------------------------------

#: Command listing the published versions of a single package.
#: ``{name}`` is replaced with the dependency name.
DEFAULT_QUERY_COMMAND: Final[str] = "pip index versions {name}"

#: Follow-up command suggested after the manifest has been rewritten.
#: ``{args}`` is replaced with one ``-P <name>`` pair per updated package.
FOLLOW_UP_COMMAND: Final[str] = "pip-compile {args}"

# ---------------------------------------------------------------------------
# Requirement file directives
# ---------------------------------------------------------------------------

#: Prefixes of requirement lines that carry options rather than packages.
OPTION_PREFIX: Final[str] = "-"

#: Line continuation marker used by pip-compile output.
LINE_CONTINUATION: Final[str] = "\\"

#: Version specifier operators that denote an exact pin.
EXACT_PIN_OPERATORS: Final[tuple] = ("==", "===")

#: Operator written to the manifest for a pinned version.
PIN_OPERATOR: Final[str] = "=="

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading requirement files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
