"""
Reboot necessity detection.

Two strategies are supported:

- probe based: ``needs-restarting -r`` reports whether a reboot is needed and
  the sentinel file ``/run/reboot-needed`` selects soft or hard reboot;
- kernel based (no probe installed): the running kernel is compared with the
  installed kernel packages of the same flavor. This path only ever asks for
  a hard reboot.
"""

import logging
import platform
from typing import List, Optional, Tuple

from src.i18n import _
from src.os_update.core.command_runner import command_exists, run_command
from src.os_update.core.errors import ExternalCommandFailure
from src.os_update.core.types import RebootDecision, RebootMethod

logger = logging.getLogger(__name__)

REBOOT_PROBE = "needs-restarting"
REBOOT_PROBE_NEEDED = 1
SENTINEL_FILE = "/run/reboot-needed"
SOFT_REBOOT_TOKEN = "soft-reboot"


def split_kernel_release(release: str) -> Tuple[str, str]:
    """Split ``<version>-<flavor>``; no hyphen yields an empty flavor."""
    if "-" not in release:
        return release, ""
    version, flavor = release.rsplit("-", 1)
    return version, flavor


class RebootNecessityDetector:
    """Decides whether the host must be rebooted after an update."""

    def __init__(
        self,
        probe: str = REBOOT_PROBE,
        sentinel_file: str = SENTINEL_FILE,
    ):
        self.probe = probe
        self.sentinel_file = sentinel_file

    def detect(self) -> RebootDecision:
        """Return the reboot decision for the current host state."""
        if command_exists(self.probe):
            return self._detect_with_probe()
        logger.debug("%s not available, comparing kernel versions", self.probe)
        return self._detect_kernel_upgrade()

    def _detect_with_probe(self) -> RebootDecision:
        result = run_command([self.probe, "-r"], timeout=120)
        if result.returncode != REBOOT_PROBE_NEEDED:
            return RebootDecision()
        return RebootDecision(required=True, method=self._read_sentinel_method())

    def _read_sentinel_method(self) -> RebootMethod:
        """Pick the reboot method from the sentinel file."""
        content = self._read_sentinel()
        if not content:
            return RebootMethod.REBOOT
        if content == SOFT_REBOOT_TOKEN:
            return RebootMethod.SOFT_REBOOT
        logger.info(_("Hard reboot requested by %s: %s"), self.sentinel_file, content)
        return RebootMethod.REBOOT

    def _read_sentinel(self) -> Optional[str]:
        try:
            with open(self.sentinel_file, "r", encoding="utf-8") as sentinel:
                return sentinel.read().strip()
        except FileNotFoundError:
            return None
        except OSError as error:
            logger.warning(_("Cannot read %s: %s"), self.sentinel_file, error)
            return None

    def _detect_kernel_upgrade(self) -> RebootDecision:
        version, flavor = split_kernel_release(platform.release())
        if not flavor:
            logger.debug("Kernel release %s has no flavor, skipping", version)
            return RebootDecision()

        running = f"{version}.1.{platform.machine()}"
        for installed in self._installed_kernels(flavor):
            if installed > running:
                logger.info(
                    _("Newer kernel installed: %s (running %s)"), installed, running
                )
                return RebootDecision(required=True, method=RebootMethod.REBOOT)
        return RebootDecision()

    @staticmethod
    def _installed_kernels(flavor: str) -> List[str]:
        """List installed ``kernel-<flavor>`` packages as VERSION-RELEASE.ARCH."""
        try:
            result = run_command(
                [
                    "rpm",
                    "-q",
                    "--queryformat",
                    "%{VERSION}-%{RELEASE}.%{ARCH}\\n",
                    f"kernel-{flavor}",
                ],
                timeout=60,
            )
        except ExternalCommandFailure as error:
            logger.warning(_("Failed to query installed kernels: %s"), error)
            return []

        if result.returncode != 0:
            logger.debug("No kernel-%s packages installed", flavor)
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]
