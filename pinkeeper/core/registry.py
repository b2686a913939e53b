"""Registry queries for pinkeeper.

Published versions are discovered by running an external command, by
default ``pip index versions <name>``. The command's standard output is
handed back verbatim; parsing happens in
:mod:`pinkeeper.utils.version_utils`.

A failed query is not an error for the caller: a non-zero exit status,
a missing executable or a timeout all produce an empty string, which the
version cache records as "no versions available".

Typical usage::

    registry = CommandRegistry()
    text = registry.query("requests")

    batch = CommandRegistry(batch_query_command="gem query -ra {names}")
    text = batch.query_many(["rails", "rack"])
"""

from __future__ import annotations

import shlex
import subprocess
from typing import List, Optional, Sequence

from pinkeeper.exceptions import RegistryError
from pinkeeper.utils.logger import get_logger
from pinkeeper.constants import DEFAULT_QUERY_COMMAND

logger = get_logger("registry")

__all__ = ["CommandRegistry"]


class CommandRegistry:
    """Query published versions by running a command line.

    Args:
        query_command: Template for a single-package query; ``{name}`` is
            replaced with the package name.
        batch_query_command: Optional template for a multi-package query;
            ``{names}`` is replaced with the space separated names. The
            command must print one ``name (v1, v2, ...)`` line per package.
        timeout: Seconds to wait for a query before giving up. ``None``
            waits indefinitely.

    Raises:
        RegistryError: A template is missing its placeholder.
    """

    def __init__(
        self,
        query_command: str = DEFAULT_QUERY_COMMAND,
        batch_query_command: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if "{name}" not in query_command:
            raise RegistryError(
                "Query command must contain a '{name}' placeholder",
                command=query_command,
            )
        if batch_query_command is not None and "{names}" not in batch_query_command:
            raise RegistryError(
                "Batch query command must contain a '{names}' placeholder",
                command=batch_query_command,
            )

        self.query_command = query_command
        self.batch_query_command = batch_query_command
        self.timeout = timeout

    @property
    def supports_batch(self) -> bool:
        """Whether several packages can be looked up with one command."""
        return self.batch_query_command is not None

    def query(self, name: str) -> str:
        """Return the raw version listing for one package."""
        argv = [
            part.replace("{name}", name) for part in shlex.split(self.query_command)
        ]
        return self._run(argv)

    def query_many(self, names: Sequence[str]) -> str:
        """Return the raw version listing for several packages at once.

        Raises:
            RegistryError: No batch command is configured.
        """
        if self.batch_query_command is None:
            raise RegistryError("No batch query command configured")

        argv: List[str] = []
        for part in shlex.split(self.batch_query_command):
            if part == "{names}":
                argv.extend(names)
            else:
                argv.append(part.replace("{names}", " ".join(names)))
        return self._run(argv)

    def _run(self, argv: List[str]) -> str:
        """Run ``argv`` and return its stdout, or ``""`` on any failure."""
        command = shlex.join(argv)
        logger.debug("Running registry query: %s", command)

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("Registry query command not found: %s", argv[0])
            return ""
        except subprocess.TimeoutExpired:
            logger.warning(
                "Registry query timed out after %ss: %s", self.timeout, command
            )
            return ""
        except OSError as exc:
            logger.warning("Registry query failed to start: %s (%s)", command, exc)
            return ""

        if completed.returncode != 0:
            logger.debug(
                "%s",
                RegistryError(
                    "Registry query exited with a non-zero status",
                    command=command,
                    returncode=completed.returncode,
                    stderr=completed.stderr,
                ),
            )
            return ""

        return completed.stdout or ""
