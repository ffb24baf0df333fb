"""
Exceptions raised by os-update. Every one of them ends the run with exit
status 1.
"""


class OsUpdateError(Exception):
    """Base class for fatal os-update errors."""

    exit_code = 1


class ConfigurationError(OsUpdateError):
    """Invalid configuration or unsupported host."""


class ExternalCommandFailure(OsUpdateError):
    """A mandatory external command failed."""

    def __init__(self, message: str, command=None, returncode=None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class CoordinatorUnavailable(OsUpdateError):
    """The reboot coordinator is required but missing or inactive."""
