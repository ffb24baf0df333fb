"""
Configuration management for os-update.
Reads layered YAML configuration files and builds the immutable settings
object that is handed to every component.
"""

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import yaml

from src.i18n import _
from src.os_update.core.errors import ConfigurationError
from src.os_update.core.types import (
    RebootExecutionMode,
    RebootMethod,
    UpdateStrategy,
)

# Vendor files first, admin file last: later files override earlier ones.
DEFAULT_CONFIG_FILES = [
    "/usr/share/os-update/os-update.yaml",
    "/usr/etc/os-update.yaml",
    "/etc/os-update.yaml",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "pkg_manager": "zypper",
    "update_cmd": "auto",
    "reboot_cmd": "auto",
    "reboot_method": "auto",
    "restart_services": True,
    "ignore_services_from_restart": ["dbus"],
    "services_triggering_reboot": ["dbus"],
    "services_triggering_soft_reboot": [],
    "self_service": "os-update",
    "logging": {
        "level": "INFO|WARNING|ERROR|CRITICAL",
        "file": None,
        "syslog": True,
    },
    "i18n": {"language": "en"},
}


@dataclass(frozen=True)
class OsUpdateSettings:  # pylint: disable=too-many-instance-attributes
    """Immutable configuration for one os-update run."""

    pkg_manager: str = "zypper"
    update_strategy: UpdateStrategy = UpdateStrategy.AUTO
    reboot_mode: RebootExecutionMode = RebootExecutionMode.AUTO
    force_hard_reboot: bool = False
    restart_services: bool = True
    ignore_services_from_restart: FrozenSet[str] = frozenset({"dbus"})
    services_triggering_reboot: FrozenSet[str] = frozenset({"dbus"})
    services_triggering_soft_reboot: FrozenSet[str] = frozenset()
    self_service: str = "os-update"


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def parse_service_list(value: Any) -> FrozenSet[str]:
    """
    Normalize a service list.

    Accepts a YAML list or a space-separated string, as written in the
    classic shell-style configuration ("dbus sshd").
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items: Iterable[Any] = value.split()
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        raise ConfigurationError(_("Invalid service list: %r") % (value,))
    return frozenset(str(item).strip() for item in items if str(item).strip())


def parse_bool(value: Any) -> bool:
    """Interpret yes/no style booleans."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(_("Invalid boolean value: %r") % (value,))


def parse_update_strategy(value: str) -> UpdateStrategy:
    """Map an UPDATE_CMD token to an update strategy."""
    try:
        return UpdateStrategy(str(value).strip().lower())
    except ValueError as error:
        raise ConfigurationError(_("Unknown update command: %s") % value) from error


def parse_reboot_mode(value: str) -> RebootExecutionMode:
    """Map a REBOOT_CMD token to a reboot execution mode."""
    try:
        return RebootExecutionMode(str(value).strip().lower())
    except ValueError as error:
        raise ConfigurationError(_("Unknown reboot command: %s") % value) from error


def parse_reboot_method(value: str) -> bool:
    """Return True when REBOOT_METHOD forces hard reboots."""
    token = str(value).strip().lower()
    if token == "auto":
        return False
    if token == RebootMethod.REBOOT.value:
        return True
    raise ConfigurationError(_("Unknown reboot method: %s") % value)


class ConfigManager:
    """Loads and merges os-update configuration files."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        search_paths: Optional[List[str]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.search_paths = list(
            DEFAULT_CONFIG_FILES if search_paths is None else search_paths
        )
        if config_file:
            if not os.path.exists(config_file):
                raise ConfigurationError(
                    _("Configuration file '%s' not found") % config_file
                )
            self.search_paths.append(config_file)
        self.loaded_files: List[str] = []
        self.config_data: Dict[str, Any] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load defaults, then every existing file in order."""
        self.config_data = copy.deepcopy(DEFAULT_CONFIG)
        self.loaded_files = []
        for path in self.search_paths:
            if not os.path.exists(path):
                continue
            _merge(self.config_data, self._read_file(path))
            self.loaded_files.append(path)
            self.logger.debug("Loaded configuration from %s", path)

    @staticmethod
    def _read_file(path: str) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                _("Invalid YAML in configuration file %s: %s") % (path, e)
            ) from e
        except OSError as e:
            raise ConfigurationError(
                _("Failed to load configuration file %s: %s") % (path, e)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                _("Configuration file %s must contain a mapping") % path
            )
        # Accept the upper-case option names of the shell-style config too
        return {
            (key.lower() if isinstance(key, str) else key): value
            for key, value in data.items()
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the key (e.g., 'logging.level')
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        value = self.config_data
        try:
            for key in key_path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set_override(self, key: str, value: Any) -> None:
        """Apply a command-line override on top of the loaded files."""
        if value is not None:
            self.config_data[key] = value

    def get_log_levels(self) -> str:
        """Get pipe-separated logging levels configuration."""
        return self.get("logging.level", "INFO|WARNING|ERROR|CRITICAL")

    def get_log_file(self) -> Optional[str]:
        """Get log file path if specified."""
        return self.get("logging.file")

    def should_log_to_syslog(self) -> bool:
        """Check whether events go to the host log."""
        return parse_bool(self.get("logging.syslog", True))

    def get_language(self) -> str:
        """Get configured language/locale."""
        return self.get("i18n.language", "en")

    def build_settings(self) -> OsUpdateSettings:
        """Validate the merged configuration and freeze it."""
        return OsUpdateSettings(
            pkg_manager=str(self.get("pkg_manager", "zypper")),
            update_strategy=parse_update_strategy(self.get("update_cmd", "auto")),
            reboot_mode=parse_reboot_mode(self.get("reboot_cmd", "auto")),
            force_hard_reboot=parse_reboot_method(self.get("reboot_method", "auto")),
            restart_services=parse_bool(self.get("restart_services", True)),
            ignore_services_from_restart=parse_service_list(
                self.get("ignore_services_from_restart")
            ),
            services_triggering_reboot=parse_service_list(
                self.get("services_triggering_reboot")
            ),
            services_triggering_soft_reboot=parse_service_list(
                self.get("services_triggering_soft_reboot")
            ),
            self_service=str(self.get("self_service", "os-update")),
        )
