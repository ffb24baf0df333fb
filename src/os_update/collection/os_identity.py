"""
Host identity lookup and resolution of the "auto" update strategy.
"""

import logging
import platform
from typing import Dict, Optional

from src.i18n import _
from src.os_update.core.errors import ConfigurationError
from src.os_update.core.types import UpdateStrategy

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"

# os-release NAME -> strategy used when UPDATE_CMD is "auto"
AUTO_STRATEGIES = {
    "SLES": UpdateStrategy.UPDATE_TO_LATEST,
    "openSUSE Leap": UpdateStrategy.UPDATE_TO_LATEST,
    "openSUSE Tumbleweed": UpdateStrategy.DISTRIBUTION_UPGRADE,
}


def read_os_release(path: Optional[str] = None) -> Dict[str, str]:
    """Read os-release key/value pairs."""
    if path is None:
        try:
            return platform.freedesktop_os_release()
        except OSError:
            path = OS_RELEASE_PATH

    os_release = {}
    try:
        with open(path, encoding="utf-8") as os_release_file:
            for line in os_release_file:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                os_release[key] = value.strip().strip("\"'")
    except OSError as error:
        logger.warning(_("Cannot read %s: %s"), path, error)
    return os_release


def resolve_strategy(
    strategy: UpdateStrategy, os_release: Optional[Dict[str, str]] = None
) -> UpdateStrategy:
    """
    Resolve AUTO to a concrete strategy based on the host OS name.

    Raises:
        ConfigurationError: if the OS is not supported
    """
    if strategy is not UpdateStrategy.AUTO:
        return strategy

    if os_release is None:
        os_release = read_os_release()
    name = os_release.get("NAME", "")

    resolved = AUTO_STRATEGIES.get(name)
    if resolved is None:
        raise ConfigurationError(_("Unsupported OS: %s") % (name or _("unknown")))

    logger.debug("Resolved update strategy for %s: %s", name, resolved.value)
    return resolved
