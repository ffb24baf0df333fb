"""
Orchestrator: update, restart services, detect and dispatch reboots.
"""

import logging
from typing import Callable, Dict, Optional

from src.i18n import _
from src.os_update.collection.os_identity import read_os_release
from src.os_update.collection.reboot_detection import RebootNecessityDetector
from src.os_update.core.config import OsUpdateSettings
from src.os_update.core.errors import OsUpdateError
from src.os_update.core.types import RebootDecision, RebootMethod
from src.os_update.operations.package_manager import ZypperPackageManager
from src.os_update.operations.reboot_coordinator import RebootmgrCoordinator
from src.os_update.operations.reboot_dispatcher import RebootDispatcher
from src.os_update.operations.service_manager import SystemdServiceManager
from src.os_update.operations.service_restart import ServiceRestartClassifier
from src.os_update.operations.update_executor import UpdateExecutor

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class OsUpdateOrchestrator:  # pylint: disable=too-many-instance-attributes
    """Runs one complete update-and-reboot cycle for this host."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        settings: OsUpdateSettings,
        package_manager: Optional[ZypperPackageManager] = None,
        service_manager: Optional[SystemdServiceManager] = None,
        coordinator: Optional[RebootmgrCoordinator] = None,
        detector: Optional[RebootNecessityDetector] = None,
        os_release_reader: Callable[[], Dict[str, str]] = read_os_release,
    ):
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.package_manager = package_manager or ZypperPackageManager(
            settings.pkg_manager
        )
        self.service_manager = service_manager or SystemdServiceManager()
        self.coordinator = coordinator or RebootmgrCoordinator()
        self.detector = detector or RebootNecessityDetector()
        self.executor = UpdateExecutor(self.package_manager, os_release_reader)
        self.service_classifier = ServiceRestartClassifier(
            settings, self.service_manager
        )
        self.dispatcher = RebootDispatcher(self.coordinator, self.service_manager)

    def run(self) -> int:
        """Run all phases and return the process exit status."""
        try:
            return self._run()
        except OsUpdateError as error:
            self.logger.error("%s", error)
            return error.exit_code

    def _run(self) -> int:
        outcome = self.executor.run(self.settings.update_strategy)

        records = self.package_manager.list_processes_needing_restart()
        classification = self.service_classifier.process(records)

        decision = self.detector.detect().combine(classification.reboot_decision)
        if decision.required and self.settings.force_hard_reboot:
            decision = RebootDecision(required=True, method=RebootMethod.REBOOT)

        if decision.required:
            self.logger.info(_("System requires %s"), decision.method.value)
        else:
            self.logger.info(_("No reboot required"))
        self.dispatcher.dispatch(decision, self.settings.reboot_mode)

        if outcome.failed:
            return EXIT_FAILURE
        return EXIT_SUCCESS
