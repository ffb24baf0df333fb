"""
This module is the main entry point of os-update. It updates the packages
of this host, restarts services that still use replaced files, and reboots
the host when the update requires it.
"""

import logging
import logging.handlers
import os
import sys

import click

from src.i18n import _, set_language
from src.os_update.core.config import ConfigManager
from src.os_update.core.errors import ConfigurationError, OsUpdateError
from src.os_update.core.types import RebootExecutionMode, UpdateStrategy
from src.os_update.core.version import get_version
from src.os_update.operations.orchestrator import OsUpdateOrchestrator
from src.os_update.utils.logging_formatter import (
    SyslogFormatter,
    UTCTimestampFormatter,
)
from src.os_update.utils.verbosity_logger import LevelSetFilter

SYSLOG_SOCKET = "/dev/log"
DEBUG_LEVELS = "DEBUG|INFO|WARNING|ERROR|CRITICAL"


def setup_logging(config: ConfigManager, debug: bool = False) -> None:
    """Log to the terminal, the host log and an optional file."""
    level_filter = LevelSetFilter(DEBUG_LEVELS if debug else config.get_log_levels())

    # Clear any existing handlers to prevent double logging
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level_filter.lowest_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(UTCTimestampFormatter())
    handlers = [console_handler]

    log_file = config.get_log_file()
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as error:
            raise ConfigurationError(
                _("Cannot open log file %s: %s") % (log_file, error)
            ) from error
        file_handler.setFormatter(UTCTimestampFormatter())
        handlers.append(file_handler)

    if config.should_log_to_syslog() and os.path.exists(SYSLOG_SOCKET):
        syslog_handler = logging.handlers.SysLogHandler(address=SYSLOG_SOCKET)
        syslog_handler.setFormatter(SyslogFormatter())
        handlers.append(syslog_handler)

    for handler in handlers:
        handler.addFilter(level_filter)
        root_logger.addHandler(handler)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=get_version(), prog_name="os-update")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Additional configuration file, loaded after the system files.",
)
@click.option(
    "--update-cmd",
    type=click.Choice([strategy.value for strategy in UpdateStrategy]),
    default=None,
    help="Override UPDATE_CMD.",
)
@click.option(
    "--reboot-cmd",
    type=click.Choice([mode.value for mode in RebootExecutionMode]),
    default=None,
    help="Override REBOOT_CMD.",
)
@click.option(
    "--restart-services/--no-restart-services",
    default=None,
    help="Override RESTART_SERVICES.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(config_file, update_cmd, reboot_cmd, restart_services, debug):
    """Update the system, restart services and reboot if required."""
    try:
        config = ConfigManager(config_file)
        config.set_override("update_cmd", update_cmd)
        config.set_override("reboot_cmd", reboot_cmd)
        config.set_override("restart_services", restart_services)
        set_language(config.get_language())
        setup_logging(config, debug)
        settings = config.build_settings()
    except OsUpdateError as error:
        click.echo(_("Error: %s") % error, err=True)
        sys.exit(error.exit_code)

    logging.getLogger(__name__).debug(
        "Configuration files: %s", ", ".join(config.loaded_files) or "-"
    )
    sys.exit(OsUpdateOrchestrator(settings).run())


if __name__ == "__main__":
    cli()  # pylint: disable=no-value-for-parameter
