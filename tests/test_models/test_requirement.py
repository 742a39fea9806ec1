"""Unit tests for requirekit.models.requirement module.

Test Coverage:
- Parsing of package names, version bounds and platform tags
- Comment stripping
- Error reporting for malformed lines
- Canonical rendering with from_versions
- Equality by content
"""

from __future__ import annotations

import pytest

from requirekit.exceptions import InvalidRequirement
from requirekit.models.requirement import Requirement
from requirekit.models.version import VersionSet, parse_version


def vs(*bounds: str) -> VersionSet:
    return VersionSet.from_bounds([parse_version(b) for b in bounds])


@pytest.mark.unit
class TestRequirementParse:
    """Tests for Requirement.parse."""

    def test_bare_package(self) -> None:
        req = Requirement.parse("Compat")

        assert req.package == "Compat"
        assert req.versions.is_unbounded
        assert req.system == ()
        assert req.is_conditional is False

    def test_lower_bound(self) -> None:
        req = Requirement.parse("julia 0.5.0")

        assert req.versions == vs("0.5.0")
        assert req.accepts(parse_version("0.6.0"))
        assert not req.accepts(parse_version("0.4.9"))

    def test_range_with_trailing_lower(self) -> None:
        req = Requirement.parse("Gtk 0.9.0 0.10.0 1.0.0")

        assert req.versions == vs("0.9.0", "0.10.0", "1.0.0")

    def test_platform_tags(self) -> None:
        req = Requirement.parse("@windows @!osx WinRPM 0.1.0")

        assert req.package == "WinRPM"
        assert req.system == ("windows", "!osx")
        assert req.is_conditional is True

    def test_comment_stripped(self) -> None:
        req = Requirement.parse("Compat 0.9.0  # needed for @compat")

        assert req.package == "Compat"
        assert req.versions == vs("0.9.0")
        assert req.content == "Compat 0.9.0  # needed for @compat"

    def test_extra_whitespace(self) -> None:
        assert Requirement.parse("\tCompat   0.9.0 ").versions == vs("0.9.0")

    def test_bare_tag_versions(self) -> None:
        req = Requirement.parse("Compat 0.9.0- 2.0.0+")

        assert parse_version("0.9.0-rc1") in req.versions
        assert parse_version("2.0.0") in req.versions

    def test_huge_lower_bound_stays_satisfiable(self) -> None:
        """Test a lower bound past any machine-sized integer keeps an open range."""
        line = "Foo 99999999999999999999.0.0"

        req = Requirement.parse(line)

        assert req.versions.is_empty is False
        assert parse_version("99999999999999999999.0.1") in req.versions
        assert req.to_string() == line
        assert Requirement.parse(req.to_string()).versions == req.versions

    @pytest.mark.parametrize(
        "line",
        ["@windows", "# just a comment", "   "],
        ids=["tags-only", "comment-only", "blank"],
    )
    def test_missing_package(self, line: str) -> None:
        with pytest.raises(InvalidRequirement):
            Requirement.parse(line)

    @pytest.mark.parametrize(
        "line",
        ["Compat 0.9", "Compat v1.0.0", "Compat 1.0.0 latest", "Compat 2.0.0 1.0.0"],
        ids=["short-version", "v-prefix", "word", "decreasing"],
    )
    def test_invalid_versions(self, line: str) -> None:
        with pytest.raises(InvalidRequirement) as exc_info:
            Requirement.parse(line, line_number=7, file_path="REQUIRE")

        error = exc_info.value
        assert "Compat" in error.message
        assert error.line_number == 7
        assert error.details["line"] == 7
        assert error.details["content"] == line
        assert error.details["file"] == "REQUIRE"


@pytest.mark.unit
class TestRequirementFromVersions:
    """Tests for Requirement.from_versions canonical rendering."""

    def test_unconstrained(self) -> None:
        assert Requirement.from_versions("Compat").content == "Compat"

    def test_bounds(self) -> None:
        req = Requirement.from_versions("Compat", vs("0.9.0", "2.0.0"))

        assert req.content == "Compat 0.9.0 2.0.0"

    def test_open_upper_omitted(self) -> None:
        assert Requirement.from_versions("Gtk", vs("1.0.0", "2.0.0", "3.0.0")).content == (
            "Gtk 1.0.0 2.0.0 3.0.0"
        )

    def test_tags_rendered_first(self) -> None:
        req = Requirement.from_versions("WinRPM", vs("0.1.0"), ["windows", "!osx"])

        assert req.content == "@windows @!osx WinRPM 0.1.0"

    def test_empty_set_rejected(self) -> None:
        with pytest.raises(InvalidRequirement) as exc_info:
            Requirement.from_versions("Compat", VersionSet.empty())

        assert "Compat" in str(exc_info.value)

    def test_canonical_line_round_trips(self) -> None:
        line = "@unix Gtk 0.9.0 0.10.0- 1.0.0"

        assert Requirement.parse(line).to_string() == line

    def test_to_string_normalizes_spacing(self) -> None:
        assert Requirement.parse("Compat   0.9.0 # c").to_string() == "Compat 0.9.0"


@pytest.mark.unit
class TestRequirementEquality:
    """Tests for content-based equality."""

    def test_equal_content(self) -> None:
        assert Requirement.parse("Compat 0.9.0") == Requirement.parse("Compat 0.9.0")
        assert hash(Requirement.parse("Compat")) == hash(Requirement.parse("Compat"))

    def test_same_meaning_different_text(self) -> None:
        """Test equality follows the text, not the parsed meaning."""
        a = Requirement.parse("Compat 0.9.0")
        b = Requirement.parse("Compat 0.9.0  # pinned")

        assert a.versions == b.versions
        assert a != b

    def test_str_and_repr(self) -> None:
        req = Requirement.parse("@osx Gtk 1.0.0")

        assert str(req) == "@osx Gtk 1.0.0"
        assert repr(req) == "Requirement(package='Gtk', versions='[1.0.0, ∞)', system=['osx'])"
