"""
Update Executor: refresh, then apply one update strategy and classify the
package manager's exit code.
"""

import logging
from typing import Callable, Dict, Optional

from src.i18n import _
from src.os_update.collection import exit_code_classifier
from src.os_update.collection.os_identity import resolve_strategy
from src.os_update.core.errors import ExternalCommandFailure
from src.os_update.core.types import ExitClassification, UpdateOutcome, UpdateStrategy
from src.os_update.operations.package_manager import ZypperPackageManager


class UpdateExecutor:
    """Runs the package update for one strategy."""

    def __init__(
        self,
        package_manager: ZypperPackageManager,
        os_release_reader: Optional[Callable[[], Dict[str, str]]] = None,
    ):
        self.package_manager = package_manager
        self.os_release_reader = os_release_reader
        self.logger = logging.getLogger(__name__)

    def run(self, strategy: UpdateStrategy) -> UpdateOutcome:
        """
        Refresh repositories and apply updates.

        Returns:
            UpdateOutcome for successful and tolerated runs

        Raises:
            ConfigurationError: unsupported OS while resolving "auto"
            ExternalCommandFailure: refresh failed or the update failed hard
        """
        if strategy is UpdateStrategy.AUTO:
            os_release = self.os_release_reader() if self.os_release_reader else None
            strategy = resolve_strategy(strategy, os_release)

        refresh_code = self.package_manager.refresh()
        if refresh_code != 0:
            raise ExternalCommandFailure(
                _("Refreshing repositories failed with exit code %d") % refresh_code,
                returncode=refresh_code,
            )

        code = self.package_manager.apply(strategy)
        outcome = exit_code_classifier.to_outcome(code)

        if outcome.fatal:
            raise ExternalCommandFailure(
                _("Updating the system failed with exit code %d") % code,
                returncode=code,
            )
        if outcome.failed:
            self.logger.error(
                _("Update completed with warnings (exit code %d), continuing"), code
            )
        elif outcome.classification is ExitClassification.SUCCESS_NEEDS_REBOOT:
            self.logger.info(
                _("Update succeeded, package manager advises a restart (exit code %d)"),
                code,
            )
        else:
            self.logger.info(_("Update succeeded"))
        return outcome
