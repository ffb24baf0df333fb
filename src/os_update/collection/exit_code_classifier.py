"""
Interpretation of package manager (zypper) exit codes.
"""

from src.os_update.core.types import ExitClassification, UpdateOutcome

ZYPPER_EXIT_OK = 0
ZYPPER_EXIT_INF_REBOOT_NEEDED = 102
ZYPPER_EXIT_INF_RESTART_NEEDED = 103
ZYPPER_EXIT_INF_CAP_NOT_FOUND = 104
ZYPPER_EXIT_ON_SIGNAL = 105
ZYPPER_EXIT_INF_REPOS_SKIPPED = 106

# "Completed with warnings": a failure that must not abort the run
TOLERATED_FAILURE_CODES = frozenset({ZYPPER_EXIT_INF_REPOS_SKIPPED})


def classify(code: int) -> ExitClassification:
    """Map an exit code to success, success-needs-reboot, or failure."""
    if code == ZYPPER_EXIT_OK:
        return ExitClassification.SUCCESS
    if code in (ZYPPER_EXIT_INF_REBOOT_NEEDED, ZYPPER_EXIT_INF_RESTART_NEEDED):
        return ExitClassification.SUCCESS_NEEDS_REBOOT
    return ExitClassification.FAILURE


def is_fatal(code: int) -> bool:
    """True when the exit code must abort the whole run."""
    return (
        classify(code) is ExitClassification.FAILURE
        and code not in TOLERATED_FAILURE_CODES
    )


def to_outcome(code: int) -> UpdateOutcome:
    """Build the immutable outcome of an update run."""
    return UpdateOutcome(
        exit_code=code, classification=classify(code), fatal=is_fatal(code)
    )
