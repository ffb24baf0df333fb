"""
Level filtering for os-update log handlers.

Supports pipe-separated level configuration such as "INFO|ERROR".
"""

import logging
from typing import Set

DEFAULT_LEVELS = "INFO|WARNING|ERROR|CRITICAL"


def parse_levels(level_config: str) -> Set[int]:
    """
    Parse pipe-separated levels into a set of logging constants.

    Examples:
    - "DEBUG" - Only debug messages
    - "INFO|ERROR" - Only info and error messages
    - "INFO|WARNING|ERROR|CRITICAL" - Standard operational logging
    """
    enabled_levels = set()
    for level_name in (level_config or "").split("|"):
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            enabled_levels.add(level)
    if not enabled_levels:
        return {logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL}
    return enabled_levels


class LevelSetFilter(logging.Filter):
    """Lets through only records whose level is in the configured set."""

    def __init__(self, level_config: str = DEFAULT_LEVELS):
        super().__init__()
        self.enabled_levels = parse_levels(level_config)

    @property
    def lowest_level(self) -> int:
        """Lowest enabled level, used as the logger threshold."""
        return min(self.enabled_levels)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self.enabled_levels
