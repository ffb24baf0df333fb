"""
Pytest configuration and shared fixtures for os-update tests.
"""

from unittest.mock import Mock

import pytest

from src.os_update.core.config import OsUpdateSettings
from src.os_update.core.types import RebootDecision, UpdateStrategy

ZYPPER_PS_OUTPUT = """\
Loading repository data...
Reading installed packages...
The following running processes use deleted files:

PID  | PPID | UID | User | Command       | Service
-----+------+-----+------+---------------+--------
1    | 0    | 0   | root | systemd       |
812  | 1    | 499 | dbus | dbus-daemon   | dbus
1024 | 1    | 0   | root | sshd          | sshd
1290 | 1    | 0   | root | cron          | cron
1291 | 1290 | 0   | root | cron          | cron

You may wish to restart these processes.
See 'man zypper' for information about the meaning of values in the above table.
"""


@pytest.fixture
def settings():
    """Settings with the default trigger and exclusion lists."""
    return OsUpdateSettings(update_strategy=UpdateStrategy.UPDATE_TO_LATEST)


@pytest.fixture
def mock_package_manager():
    """Package manager whose commands all succeed."""
    package_manager = Mock()
    package_manager.refresh = Mock(return_value=0)
    package_manager.apply = Mock(return_value=0)
    package_manager.list_processes_needing_restart = Mock(return_value=[])
    return package_manager


@pytest.fixture
def mock_service_manager():
    """systemd adapter double."""
    service_manager = Mock()
    service_manager.restart = Mock(return_value=True)
    service_manager.daemon_reexec = Mock(return_value=True)
    service_manager.execute_reboot = Mock()
    return service_manager


@pytest.fixture
def mock_coordinator():
    """rebootmgr adapter double, installed and active."""
    coordinator = Mock()
    coordinator.is_installed = Mock(return_value=True)
    coordinator.is_active = Mock(return_value=True)
    coordinator.is_available = Mock(return_value=True)
    coordinator.execute_reboot = Mock()
    return coordinator


@pytest.fixture
def mock_detector():
    """Reboot detector that reports no reboot."""
    detector = Mock()
    detector.detect = Mock(return_value=RebootDecision())
    return detector


@pytest.fixture
def zypper_ps_output():
    """Sample ``zypper ps -s`` output."""
    return ZYPPER_PS_OUTPUT
