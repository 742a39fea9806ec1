"""Unit tests for requirekit.models.package and requirekit.models.advisory."""

from __future__ import annotations

import logging

import pytest

from requirekit.exceptions import UnknownCommit
from requirekit.models import (
    MIN_VERSION,
    Advisory,
    AdvisoryKind,
    Assessed,
    Available,
    Fixed,
    InstalledState,
    InstalledVersion,
    InstallStatus,
    VersionSet,
    parse_version,
)


@pytest.mark.unit
class TestRecords:
    """Tests for Available, Fixed and InstalledState."""

    def test_available_defaults(self) -> None:
        info = Available("a" * 40)

        assert info.requires == {}

    def test_fixed_holds_requires(self) -> None:
        fixed = Fixed(parse_version("1.0.0"), {"Compat": VersionSet()})

        assert fixed.version == parse_version("1.0.0")
        assert "Compat" in fixed.requires

    def test_records_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Available("abc").sha1 = "def"  # type: ignore[misc]

    def test_installed_state(self) -> None:
        state = InstalledState(InstalledVersion.unknown(), True)

        assert state.fixed is True
        assert state.version.version == MIN_VERSION


@pytest.mark.unit
class TestInstalledVersion:
    """Tests for InstalledVersion."""

    def test_exact(self) -> None:
        installed = InstalledVersion.exact(parse_version("1.2.0"))

        assert installed.is_exact
        assert installed.bound == parse_version("1.2.0")
        assert str(installed) == "1.2.0"

    def test_behind_bound_is_lower_neighbor(self) -> None:
        installed = InstalledVersion.behind(parse_version("1.2.0"))

        assert installed.status is InstallStatus.BEHIND
        assert installed.bound == parse_version("1.2.0-")
        assert installed.bound < parse_version("1.2.0")
        assert str(installed) == "1.2.0 (behind)"

    def test_ahead_bound_is_upper_neighbor(self) -> None:
        installed = InstalledVersion.ahead(parse_version("1.2.0"))

        assert installed.bound == parse_version("1.2.0+")
        assert parse_version("1.2.0") < installed.bound < parse_version("1.2.1")
        assert str(installed) == "1.2.0 (ahead)"

    def test_unknown(self) -> None:
        installed = InstalledVersion.unknown()

        assert installed == InstalledVersion()
        assert installed.bound == MIN_VERSION
        assert installed.is_exact is False
        assert str(installed) == "unknown"

    def test_version_compares_to_nearest_published(self) -> None:
        """Test behind/ahead keep the published version as ``version``."""
        assert InstalledVersion.behind(parse_version("2.0.0")).version == parse_version("2.0.0")


@pytest.mark.unit
class TestAdvisory:
    """Tests for Advisory and Assessed."""

    def test_from_error(self) -> None:
        error = UnknownCommit("Gtk", "0123456789abcdef")
        advisory = Advisory.from_error(AdvisoryKind.UNKNOWN_COMMIT, "Gtk", error)

        assert advisory.message == error.message
        assert advisory.details["commit"] == "0123456789abcdef"
        assert str(advisory).startswith("Gtk: unknown Gtk commit 01234567")

    def test_assessed_defaults_ok(self) -> None:
        result = Assessed(True)

        assert result.ok
        assert result.advisories == []

    def test_extend_deduplicates(self) -> None:
        advisory = Advisory(AdvisoryKind.AMBIGUOUS_ANCESTRY, "Compat", "both")
        result = Assessed(0)

        result.extend([advisory, advisory])
        result.extend([advisory])

        assert result.advisories == [advisory]
        assert result.ok is False

    def test_by_kind(self) -> None:
        first = Advisory(AdvisoryKind.UNKNOWN_COMMIT, "A", "x")
        second = Advisory(AdvisoryKind.UNKNOWN_COMMIT, "B", "y")
        third = Advisory(AdvisoryKind.AMBIGUOUS_ANCESTRY, "A", "z")
        result = Assessed(None, [first, second, third])

        assert result.by_kind() == {
            AdvisoryKind.UNKNOWN_COMMIT: [first, second],
            AdvisoryKind.AMBIGUOUS_ANCESTRY: [third],
        }

    def test_log(self, caplog: pytest.LogCaptureFixture) -> None:
        result = Assessed(None, [Advisory(AdvisoryKind.UNKNOWN_COMMIT, "Gtk", "missing")])
        logger = logging.getLogger("advisory_test")

        with caplog.at_level(logging.INFO, logger="advisory_test"):
            result.log(logger, logging.INFO)

        assert "Gtk: missing" in caplog.text
