"""
UTC timestamp logging formatter for os-update.

All console and file log entries are prefixed with a UTC timestamp in
square brackets followed by a space.
"""

import datetime
import logging


class UTCTimestampFormatter(logging.Formatter):
    """
    Logging formatter that adds UTC timestamps in square brackets.

    Format: [YYYY-MM-DD HH:MM:SS.sss UTC] LEVEL: message
    """

    def __init__(self, fmt: str = "%(levelname)s: %(message)s"):
        super().__init__(fmt)

    def format(self, record):
        utc_now = datetime.datetime.fromtimestamp(
            record.created, datetime.timezone.utc
        )
        timestamp = utc_now.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        return f"[{timestamp} UTC] {super().format(record)}"


class SyslogFormatter(logging.Formatter):
    """Host log entries: the journal adds its own timestamps."""

    def __init__(self, ident: str = "os-update"):
        super().__init__(f"{ident}: %(levelname)s: %(message)s")
