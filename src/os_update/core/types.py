"""
Type definitions shared by the os-update decision engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet


class UpdateStrategy(str, Enum):
    """How packages are brought up to date."""

    AUTO = "auto"
    SECURITY_ONLY = "security"
    UPDATE_TO_LATEST = "up"
    DISTRIBUTION_UPGRADE = "dup"


class ExitClassification(str, Enum):
    """Interpretation of a package manager exit code."""

    SUCCESS = "success"
    SUCCESS_NEEDS_REBOOT = "success_needs_reboot"
    FAILURE = "failure"


class RebootMethod(str, Enum):
    """How the host is rebooted."""

    REBOOT = "reboot"
    SOFT_REBOOT = "soft-reboot"

    @property
    def severity(self) -> int:
        """Hard reboots outrank soft reboots."""
        return 2 if self is RebootMethod.REBOOT else 1


class RebootExecutionMode(str, Enum):
    """Who performs a required reboot (REBOOT_CMD)."""

    AUTO = "auto"
    PREFER_COORDINATOR = "rebootmgr"
    DIRECT = "reboot"
    SUPPRESSED = "no"


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of one update run."""

    exit_code: int
    classification: ExitClassification
    fatal: bool = False

    @property
    def failed(self) -> bool:
        """True when the package manager did not succeed."""
        return self.classification is ExitClassification.FAILURE


@dataclass(frozen=True)
class RebootDecision:
    """Whether a reboot is required, and which kind."""

    required: bool = False
    method: RebootMethod = RebootMethod.REBOOT

    def combine(self, other: "RebootDecision") -> "RebootDecision":
        """
        Merge two reboot signals.

        ``required`` is OR-ed; the method is the most severe one among the
        decisions that actually require a reboot.
        """
        required = [d for d in (self, other) if d.required]
        if not required:
            return RebootDecision()
        method = max((d.method for d in required), key=lambda m: m.severity)
        return RebootDecision(required=True, method=method)


@dataclass(frozen=True)
class ProcessRecord:
    """A process still using files that were deleted by the update."""

    pid: str
    ppid: str
    uid: str
    user: str
    command: str
    service: str = ""


@dataclass(frozen=True)
class ServiceClassificationSet:
    """Partition of the services that need a restart."""

    excluded: FrozenSet[str] = field(default_factory=frozenset)
    soft_reboot_triggering: FrozenSet[str] = field(default_factory=frozenset)
    hard_reboot_triggering: FrozenSet[str] = field(default_factory=frozenset)
    restart_candidates: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def reboot_decision(self) -> RebootDecision:
        """Reboot signal raised by the trigger lists."""
        if self.hard_reboot_triggering:
            return RebootDecision(required=True, method=RebootMethod.REBOOT)
        if self.soft_reboot_triggering:
            return RebootDecision(required=True, method=RebootMethod.SOFT_REBOOT)
        return RebootDecision()
