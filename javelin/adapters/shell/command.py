"""
Subprocess runner — the single place where external commands are launched.

Installers, the editor extension command and the registry tools all go
through ``SubprocessRunner.run``. Output is captured, failures are
returned in a ProcessResult and never raised.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from javelin.adapters.base import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """Run commands with ``subprocess.run`` and capture their output.

    Args:
        timeout: Seconds before a command is abandoned. None waits forever,
            which is what silent installers usually need.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    def run(self, command: str, args: list[str]) -> ProcessResult:
        # Resolve through PATH/PATHEXT so wrappers like code.cmd are found
        executable = shutil.which(command) or command
        cmd = [executable, *args]

        logger.debug("Executing: %s", cmd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return ProcessResult(
                command=command,
                args=args,
                returncode=-1,
                error=f"Command timed out after {self._timeout}s",
            )
        except OSError as e:
            return ProcessResult(
                command=command,
                args=args,
                returncode=-1,
                error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode != 0:
            logger.debug("%s exited with %d: %s", command, result.returncode, result.stderr.strip())

        return ProcessResult(
            command=command,
            args=args,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            duration_ms=elapsed_ms,
        )
