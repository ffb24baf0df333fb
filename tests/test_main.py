"""
Tests for the os-update command line and logging setup.
"""

# pylint: disable=redefined-outer-name

import logging
import logging.handlers
from unittest.mock import Mock, patch

import pytest
import yaml
from click.testing import CliRunner

from main import cli, setup_logging
from src.os_update.core.config import ConfigManager
from src.os_update.core.errors import ConfigurationError
from src.os_update.core.types import RebootExecutionMode, UpdateStrategy
from src.os_update.utils.logging_formatter import UTCTimestampFormatter


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def no_system_config():
    """Ignore any configuration installed on the test machine."""
    with patch("src.os_update.core.config.DEFAULT_CONFIG_FILES", []):
        yield


@pytest.fixture
def mock_orchestrator():
    """Replace the orchestrator and logging setup used by the CLI."""
    with patch("main.OsUpdateOrchestrator") as orchestrator_class, patch(
        "main.setup_logging"
    ):
        orchestrator_class.return_value.run = Mock(return_value=0)
        yield orchestrator_class


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after setup_logging() replaced its handlers."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.mark.usefixtures("no_system_config")
class TestCli:
    """Tests for the click command."""

    def test_exit_status_comes_from_orchestrator(self, runner, mock_orchestrator):
        """The orchestrator status is the process status."""
        mock_orchestrator.return_value.run.return_value = 1

        result = runner.invoke(cli, [])

        assert result.exit_code == 1

    def test_success(self, runner, mock_orchestrator):
        """A clean run exits 0 with default settings."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        settings = mock_orchestrator.call_args[0][0]
        assert settings.update_strategy is UpdateStrategy.AUTO
        assert settings.reboot_mode is RebootExecutionMode.AUTO

    def test_options_override_config(self, runner, mock_orchestrator, tmp_path):
        """Command-line options beat the config file."""
        config_file = tmp_path / "os-update.yaml"
        config_file.write_text(
            yaml.safe_dump({"update_cmd": "dup", "reboot_cmd": "rebootmgr"}),
            encoding="utf-8",
        )

        result = runner.invoke(
            cli,
            [
                "-c",
                str(config_file),
                "--update-cmd",
                "security",
                "--no-restart-services",
            ],
        )

        assert result.exit_code == 0
        settings = mock_orchestrator.call_args[0][0]
        assert settings.update_strategy is UpdateStrategy.SECURITY_ONLY
        assert settings.reboot_mode is RebootExecutionMode.PREFER_COORDINATOR
        assert settings.restart_services is False

    def test_invalid_config_exits_one(self, runner, mock_orchestrator, tmp_path):
        """Configuration errors exit 1 without running anything."""
        config_file = tmp_path / "os-update.yaml"
        config_file.write_text("reboot_cmd: kexec\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file)])

        assert result.exit_code == 1
        assert "Unknown reboot command" in result.output
        mock_orchestrator.assert_not_called()

    def test_unknown_update_cmd_rejected_by_click(self, runner, mock_orchestrator):
        """Invalid choices are usage errors."""
        result = runner.invoke(cli, ["--update-cmd", "everything"])

        assert result.exit_code == 2
        mock_orchestrator.assert_not_called()

    def test_version(self, runner):
        """--version prints the program name."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "os-update" in result.output


@pytest.mark.usefixtures("no_system_config")
class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_console_handler(self, restore_root_logger):
        """The terminal always gets UTC timestamped output."""
        config = ConfigManager()
        config.config_data["logging"]["syslog"] = False

        setup_logging(config)

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, UTCTimestampFormatter)
        assert restore_root_logger.level == logging.INFO

    def test_debug_lowers_level(self, restore_root_logger):
        """--debug enables debug records."""
        config = ConfigManager()
        config.config_data["logging"]["syslog"] = False

        setup_logging(config, debug=True)

        assert restore_root_logger.level == logging.DEBUG

    def test_file_handler(self, restore_root_logger, tmp_path):
        """A configured log file is written."""
        config = ConfigManager()
        config.config_data["logging"]["syslog"] = False
        config.config_data["logging"]["file"] = str(tmp_path / "os-update.log")

        setup_logging(config)

        assert any(
            isinstance(handler, logging.FileHandler)
            for handler in restore_root_logger.handlers
        )

    def test_unwritable_log_file(self, restore_root_logger, tmp_path):
        """A log file that cannot be opened is a configuration error."""
        config = ConfigManager()
        config.config_data["logging"]["syslog"] = False
        config.config_data["logging"]["file"] = str(tmp_path / "missing" / "x.log")

        with pytest.raises(ConfigurationError):
            setup_logging(config)

    def test_syslog_handler(self, restore_root_logger):
        """The host log is used when /dev/log exists."""
        config = ConfigManager()

        with patch("main.os.path.exists", return_value=True), patch(
            "main.logging.handlers.SysLogHandler"
        ) as mock_syslog:
            mock_syslog.return_value.level = logging.NOTSET
            setup_logging(config)

        mock_syslog.assert_called_once_with(address="/dev/log")
