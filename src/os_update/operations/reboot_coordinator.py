"""
rebootmgr reboot coordinator adapter.
"""

import logging

from src.i18n import _
from src.os_update.core.command_runner import command_exists, run_command
from src.os_update.core.errors import ExternalCommandFailure
from src.os_update.core.types import RebootMethod

REBOOTMGRCTL = "rebootmgrctl"


class RebootmgrCoordinator:
    """Hands reboots over to rebootmgr so they happen in its maintenance window."""

    def __init__(self, rebootmgrctl: str = REBOOTMGRCTL):
        self.rebootmgrctl = rebootmgrctl
        self.logger = logging.getLogger(__name__)

    def is_installed(self) -> bool:
        """Check if rebootmgrctl is available."""
        return command_exists(self.rebootmgrctl)

    def is_active(self) -> bool:
        """Check if the rebootmgr daemon is running."""
        try:
            result = run_command(
                [self.rebootmgrctl, "is-active", "--quiet"], timeout=30
            )
        except ExternalCommandFailure as error:
            self.logger.debug("rebootmgrctl is-active failed: %s", error)
            return False
        return result.returncode == 0

    def is_available(self) -> bool:
        """Installed and active."""
        return self.is_installed() and self.is_active()

    def execute_reboot(self, method: RebootMethod) -> None:
        """Ask rebootmgr to schedule a reboot of the given kind."""
        command = [self.rebootmgrctl, method.value]
        self.logger.info(_("Executing %s"), " ".join(command))
        result = run_command(command, timeout=300)
        if result.returncode != 0:
            raise ExternalCommandFailure(
                _("%s failed with exit code %d: %s")
                % (" ".join(command), result.returncode, result.stderr.strip()),
                command=command,
                returncode=result.returncode,
            )
