"""
Synchronous subprocess helpers used by all host adapters.
"""

import logging
import shutil
import subprocess  # nosec B404
from dataclasses import dataclass
from typing import List, Optional

from src.i18n import _
from src.os_update.core.errors import ExternalCommandFailure

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result from subprocess execution, mimics subprocess.CompletedProcess."""

    returncode: int
    stdout: str
    stderr: str


def run_command(
    cmd: List[str],
    timeout: Optional[float] = None,
    capture: bool = True,
) -> ProcessResult:
    """
    Run a command and return its exit code and output.

    Args:
        cmd: Command to run as list of strings
        timeout: Timeout in seconds, None waits forever
        capture: Capture stdout/stderr instead of passing them through

    Returns:
        ProcessResult with returncode, stdout, stderr

    Raises:
        ExternalCommandFailure: If the command cannot be started or times out
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(  # nosec B603
            cmd,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as error:
        raise ExternalCommandFailure(
            _("Command timed out after %s seconds: %s") % (timeout, " ".join(cmd)),
            command=cmd,
        ) from error
    except OSError as error:
        raise ExternalCommandFailure(
            _("Failed to execute %s: %s") % (cmd[0], error), command=cmd
        ) from error

    return ProcessResult(
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def command_exists(name: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(name) is not None
