"""
Service Restart Classifier.

Services reported as using deleted files are split into excluded,
soft-reboot-triggering, hard-reboot-triggering and plain restart candidates.
The trigger lists and the exclusion list are independent: a service can
trigger a reboot and still be excluded from the direct restart.
"""

import logging
from typing import Iterable, List, Set

from src.i18n import _
from src.os_update.core.config import OsUpdateSettings
from src.os_update.core.types import ProcessRecord, ServiceClassificationSet
from src.os_update.operations.service_manager import SystemdServiceManager

SERVICE_MANAGER_PID = "1"


class ServiceRestartClassifier:
    """Classifies and restarts services after an update."""

    def __init__(
        self, settings: OsUpdateSettings, service_manager: SystemdServiceManager
    ):
        self.settings = settings
        self.service_manager = service_manager
        self.logger = logging.getLogger(__name__)

    def classify(self, services: Iterable[str]) -> ServiceClassificationSet:
        """Partition services; has no side effects."""
        excluded: Set[str] = set()
        soft: Set[str] = set()
        hard: Set[str] = set()
        candidates: Set[str] = set()

        for service in services:
            if not service:
                continue
            skip_restart = False
            if service in self.settings.services_triggering_soft_reboot:
                soft.add(service)
                skip_restart = True
            if service in self.settings.services_triggering_reboot:
                hard.add(service)
            if service in self.settings.ignore_services_from_restart:
                excluded.add(service)
                skip_restart = True
            if skip_restart or service == self.settings.self_service:
                continue
            candidates.add(service)

        return ServiceClassificationSet(
            excluded=frozenset(excluded),
            soft_reboot_triggering=frozenset(soft),
            hard_reboot_triggering=frozenset(hard),
            restart_candidates=frozenset(candidates),
        )

    def restart(self, classification: ServiceClassificationSet) -> List[str]:
        """Restart every candidate; returns the services that failed."""
        failed = []
        for service in sorted(classification.restart_candidates):
            if not self.service_manager.restart(service):
                failed.append(service)
        return failed

    def process(self, records: List[ProcessRecord]) -> ServiceClassificationSet:
        """Re-exec systemd if needed, classify services and restart them."""
        if self.settings.restart_services and any(
            record.pid == SERVICE_MANAGER_PID for record in records
        ):
            self.service_manager.daemon_reexec()

        services = []
        for record in records:
            if record.service and record.service not in services:
                services.append(record.service)
        classification = self.classify(services)

        for service in sorted(classification.soft_reboot_triggering):
            self.logger.info(_("Service %s requires a soft-reboot"), service)
        for service in sorted(classification.hard_reboot_triggering):
            self.logger.info(_("Service %s requires a reboot"), service)
        for service in sorted(classification.excluded):
            self.logger.info(_("Not restarting excluded service %s"), service)

        if not self.settings.restart_services:
            if classification.restart_candidates:
                self.logger.info(
                    _("Service restarts disabled, services needing a restart: %s"),
                    " ".join(sorted(classification.restart_candidates)),
                )
            return classification

        failed = self.restart(classification)
        if failed:
            self.logger.warning(
                _("Failed to restart services: %s"), " ".join(failed)
            )
        return classification
