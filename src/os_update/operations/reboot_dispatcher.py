"""
Reboot Dispatcher: decides who performs a required reboot.
"""

import logging

from src.i18n import _
from src.os_update.core.errors import ConfigurationError, CoordinatorUnavailable
from src.os_update.core.types import RebootDecision, RebootExecutionMode
from src.os_update.operations.reboot_coordinator import RebootmgrCoordinator
from src.os_update.operations.service_manager import SystemdServiceManager


class RebootDispatcher:
    """Routes a reboot decision to rebootmgr or systemd."""

    def __init__(
        self,
        coordinator: RebootmgrCoordinator,
        service_manager: SystemdServiceManager,
    ):
        self.coordinator = coordinator
        self.service_manager = service_manager
        self.logger = logging.getLogger(__name__)
        self._handlers = {
            RebootExecutionMode.AUTO: self._dispatch_auto,
            RebootExecutionMode.PREFER_COORDINATOR: self._dispatch_coordinator,
            RebootExecutionMode.DIRECT: self._dispatch_direct,
            RebootExecutionMode.SUPPRESSED: self._dispatch_suppressed,
        }

    def dispatch(self, decision: RebootDecision, mode: RebootExecutionMode) -> None:
        """Perform, delegate or only report the reboot."""
        if not decision.required:
            return
        handler = self._handlers.get(mode)
        if handler is None:
            raise ConfigurationError(_("Unknown reboot command: %s") % mode)
        handler(decision)

    def _dispatch_auto(self, decision: RebootDecision) -> None:
        if self.coordinator.is_available():
            self.coordinator.execute_reboot(decision.method)
        else:
            self.service_manager.execute_reboot(decision.method)

    def _dispatch_coordinator(self, decision: RebootDecision) -> None:
        if not self.coordinator.is_installed():
            raise CoordinatorUnavailable(_("rebootmgrctl is not installed"))
        if not self.coordinator.is_active():
            raise CoordinatorUnavailable(_("rebootmgr is not active"))
        self.coordinator.execute_reboot(decision.method)

    def _dispatch_direct(self, decision: RebootDecision) -> None:
        self.service_manager.execute_reboot(decision.method)

    def _dispatch_suppressed(self, decision: RebootDecision) -> None:
        self.logger.warning(
            _("A %s is required but reboots are disabled"), decision.method.value
        )
