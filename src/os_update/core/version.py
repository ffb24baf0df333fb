"""
Version lookup for os-update.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

_CACHED_VERSION: dict[str, str] = {}


def get_version() -> str:
    """Return the installed version, or "unknown" when running from source."""
    if "value" not in _CACHED_VERSION:
        try:
            _CACHED_VERSION["value"] = pkg_version("os-update")
        except PackageNotFoundError:
            _CACHED_VERSION["value"] = "unknown"
    return _CACHED_VERSION["value"]
