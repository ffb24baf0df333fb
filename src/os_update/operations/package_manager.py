"""
zypper package manager adapter.
"""

import logging
from typing import List

from src.i18n import _
from src.os_update.core.command_runner import run_command
from src.os_update.core.errors import ConfigurationError
from src.os_update.core.types import ProcessRecord, UpdateStrategy

logger = logging.getLogger(__name__)

PS_HEADER_WORDS = ["PID", "PPID", "UID", "User", "Command", "Service"]


class ZypperPackageManager:
    """Runs zypper refresh/update operations and reads ``zypper ps``."""

    def __init__(self, binary: str = "zypper"):
        self.binary = binary
        self.logger = logging.getLogger(__name__)

    def _base_command(self) -> List[str]:
        return [self.binary, "--non-interactive"]

    def refresh(self) -> int:
        """Refresh repository metadata."""
        self.logger.info(_("Refreshing repositories..."))
        result = run_command(self._base_command() + ["refresh"], capture=False)
        return result.returncode

    def apply_command(self, strategy: UpdateStrategy) -> List[str]:
        """Build the update command line for a concrete strategy."""
        command = self._base_command() + ["--no-refresh"]
        if strategy is UpdateStrategy.SECURITY_ONLY:
            return command + [
                "patch",
                "--category",
                "security",
                "--auto-agree-with-licenses",
            ]
        if strategy is UpdateStrategy.UPDATE_TO_LATEST:
            return command + ["update", "--auto-agree-with-licenses"]
        if strategy is UpdateStrategy.DISTRIBUTION_UPGRADE:
            return command + ["dist-upgrade", "--auto-agree-with-licenses"]
        raise ConfigurationError(_("Unknown update command: %s") % strategy.value)

    def apply(self, strategy: UpdateStrategy) -> int:
        """Apply updates non-interactively and return zypper's exit code."""
        command = self.apply_command(strategy)
        self.logger.info(_("Updating system: %s"), " ".join(command))
        result = run_command(command, capture=False)
        return result.returncode

    def list_processes_needing_restart(self) -> List[ProcessRecord]:
        """Return the processes that still use deleted files."""
        result = run_command([self.binary, "ps", "-s"], timeout=300)
        if result.returncode != 0:
            self.logger.warning(
                _("zypper ps failed with exit code %d: %s"),
                result.returncode,
                result.stderr.strip(),
            )
            return []
        return self.parse_ps_output(result.stdout)

    def list_services_needing_restart(self) -> List[str]:
        """Return the unique service names in ``zypper ps`` order."""
        services: List[str] = []
        for record in self.list_processes_needing_restart():
            if record.service and record.service not in services:
                services.append(record.service)
        return services

    def parse_ps_output(self, output: str) -> List[ProcessRecord]:
        """Parse the table printed by ``zypper ps -s``."""
        records = []
        process_list_started = False
        for line in output.strip().split("\n"):
            if not process_list_started:
                if all(word in line for word in PS_HEADER_WORDS):
                    process_list_started = True
                continue

            columns = [column.strip() for column in line.split("|")]
            if len(columns) < 6 or not columns[0].isdigit():
                # separator line or trailing notes
                continue
            records.append(
                ProcessRecord(
                    pid=columns[0],
                    ppid=columns[1],
                    uid=columns[2],
                    user=columns[3],
                    command=columns[4],
                    service=columns[5],
                )
            )

        self.logger.debug("Processes requiring restart: %d", len(records))
        return records
