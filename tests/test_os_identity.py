"""
Tests for host identity lookup and "auto" strategy resolution.
"""

# pylint: disable=redefined-outer-name

from unittest.mock import patch

import pytest

from src.os_update.collection.os_identity import read_os_release, resolve_strategy
from src.os_update.core.errors import ConfigurationError
from src.os_update.core.types import UpdateStrategy


class TestResolveStrategy:
    """Tests for resolve_strategy()."""

    def test_tumbleweed_uses_dist_upgrade(self):
        """Tumbleweed is a rolling release."""
        result = resolve_strategy(
            UpdateStrategy.AUTO, {"NAME": "openSUSE Tumbleweed"}
        )
        assert result is UpdateStrategy.DISTRIBUTION_UPGRADE

    @pytest.mark.parametrize("name", ["SLES", "openSUSE Leap"])
    def test_stable_releases_use_update(self, name):
        """SLES and Leap use a plain update."""
        result = resolve_strategy(UpdateStrategy.AUTO, {"NAME": name})
        assert result is UpdateStrategy.UPDATE_TO_LATEST

    def test_unknown_os_is_configuration_error(self):
        """Unsupported distributions are rejected."""
        with pytest.raises(ConfigurationError, match="Unsupported OS: Fedora"):
            resolve_strategy(UpdateStrategy.AUTO, {"NAME": "Fedora"})

    def test_missing_name_is_configuration_error(self):
        """An os-release without NAME is rejected."""
        with pytest.raises(ConfigurationError):
            resolve_strategy(UpdateStrategy.AUTO, {})

    def test_explicit_strategy_is_kept(self):
        """Non-auto strategies are returned untouched, os-release unused."""
        with patch(
            "src.os_update.collection.os_identity.read_os_release"
        ) as mock_read:
            result = resolve_strategy(UpdateStrategy.SECURITY_ONLY)

        assert result is UpdateStrategy.SECURITY_ONLY
        mock_read.assert_not_called()

    def test_reads_host_os_release_when_not_given(self):
        """The host os-release is read when none is passed in."""
        with patch(
            "src.os_update.collection.os_identity.read_os_release",
            return_value={"NAME": "SLES"},
        ):
            result = resolve_strategy(UpdateStrategy.AUTO)

        assert result is UpdateStrategy.UPDATE_TO_LATEST


class TestReadOsRelease:
    """Tests for read_os_release()."""

    def test_parses_file(self, tmp_path):
        """Quoted and unquoted values are parsed, comments skipped."""
        os_release = tmp_path / "os-release"
        os_release.write_text(
            '# comment\nNAME="openSUSE Tumbleweed"\nID=opensuse-tumbleweed\n\n',
            encoding="utf-8",
        )

        result = read_os_release(str(os_release))

        assert result == {"NAME": "openSUSE Tumbleweed", "ID": "opensuse-tumbleweed"}

    def test_missing_file_returns_empty(self, tmp_path):
        """A missing file yields an empty mapping."""
        assert read_os_release(str(tmp_path / "missing")) == {}

    def test_uses_platform_by_default(self):
        """platform.freedesktop_os_release is preferred."""
        with patch(
            "platform.freedesktop_os_release", return_value={"NAME": "SLES"}
        ):
            assert read_os_release() == {"NAME": "SLES"}
