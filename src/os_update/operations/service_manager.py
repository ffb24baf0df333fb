"""
systemd service manager adapter.
"""

import logging

from src.i18n import _
from src.os_update.core.command_runner import run_command
from src.os_update.core.errors import ExternalCommandFailure
from src.os_update.core.types import RebootMethod

SYSTEMCTL = "systemctl"


class SystemdServiceManager:
    """Restarts services and reboots the host through systemctl."""

    def __init__(self, systemctl: str = SYSTEMCTL):
        self.systemctl = systemctl
        self.logger = logging.getLogger(__name__)

    def restart(self, service_name: str) -> bool:
        """Restart a service. Failures are logged, never raised."""
        self.logger.info(_("Restarting service %s"), service_name)
        try:
            result = run_command([self.systemctl, "restart", service_name], timeout=300)
        except ExternalCommandFailure as error:
            self.logger.error(
                _("Failed to restart service %s: %s"), service_name, error
            )
            return False

        if result.returncode != 0:
            self.logger.error(
                _("Failed to restart service %s (exit code %d): %s"),
                service_name,
                result.returncode,
                result.stderr.strip(),
            )
            return False
        return True

    def daemon_reexec(self) -> bool:
        """Re-execute the service manager itself."""
        self.logger.info(_("Re-executing systemd"))
        try:
            result = run_command([self.systemctl, "daemon-reexec"], timeout=300)
        except ExternalCommandFailure as error:
            self.logger.error(_("Failed to re-execute systemd: %s"), error)
            return False
        if result.returncode != 0:
            self.logger.error(
                _("Failed to re-execute systemd (exit code %d)"), result.returncode
            )
            return False
        return True

    def execute_reboot(self, method: RebootMethod) -> None:
        """Reboot or soft-reboot the host."""
        command = [self.systemctl, method.value]
        self.logger.info(_("Executing %s"), " ".join(command))
        result = run_command(command, timeout=300)
        if result.returncode != 0:
            raise ExternalCommandFailure(
                _("%s failed with exit code %d: %s")
                % (" ".join(command), result.returncode, result.stderr.strip()),
                command=command,
                returncode=result.returncode,
            )
