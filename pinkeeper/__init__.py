"""
pinkeeper: pin dependencies to the newest version a policy allows.

For every dependency recorded in a lock file, pinkeeper looks up the
versions published on the package index, keeps the ones that are newer
than the locked version and allowed by the selected pin policy, and
rewrites the dependency manifest to pin the chosen version.

Pin policies:
    • available: any newer version
    • minor: newer minor release within the same major version
    • patch: newer patch release within the same major.minor series
"""

from __future__ import annotations

from pinkeeper.__version__ import __version__
from pinkeeper.models import PinPolicy, Version
from pinkeeper.core import PinningEngine

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pinkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Pin requirements to the newest version allowed by a policy."

__all__ = [
    "__version__",
    "PinPolicy",
    "PinningEngine",
    "Version",
]
