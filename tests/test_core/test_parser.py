"""Unit tests for requirekit.core.parser module.

Test Coverage:
- Reading lines and files, with line numbers in errors
- Aggregation: intersection of repeated packages, platform filtering,
  order independence
- Editing with add/remove and the no-op fast path
- Canonical file rendering and atomic writes
- Reverse dependency lookup
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from requirekit.core.parser import (
    add,
    dependents,
    format_lines,
    format_requires,
    group_by_package,
    parse,
    parse_file,
    read_file,
    read_lines,
    remove,
    write_file,
)
from requirekit.exceptions import InvalidRequirement
from requirekit.models import Available, Requirement, VersionSet, parse_version
from requirekit.utils.platform import Platform

WINDOWS = Platform(windows=True)
LINUX = Platform(unix=True, linux=True)
OSX = Platform(unix=True, osx=True)


def vs(*bounds: str) -> VersionSet:
    return VersionSet.from_bounds([parse_version(b) for b in bounds])


def reqs(*lines: str) -> List[Requirement]:
    return read_lines(lines)


@pytest.mark.unit
class TestReadLines:
    """Tests for read_lines."""

    def test_skips_blank_and_comment_lines(self) -> None:
        result = read_lines(["# header\n", "\n", "   \n", "julia 0.5.0\n", "  # indented\n"])

        assert [req.package for req in result] == ["julia"]

    def test_strips_newlines_but_keeps_content(self) -> None:
        result = read_lines(["Compat 0.9.0 # note\r\n"])

        assert result[0].content == "Compat 0.9.0 # note"

    def test_error_carries_line_number(self) -> None:
        with pytest.raises(InvalidRequirement) as exc_info:
            read_lines(["julia 0.5.0", "", "Compat one"], file_path="REQUIRE")

        assert exc_info.value.line_number == 3
        assert exc_info.value.file_path == "REQUIRE"


@pytest.mark.unit
class TestReadFile:
    """Tests for read_file and parse_file."""

    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        assert read_file(tmp_path / "REQUIRE") == []

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"
        path.write_text("julia 0.5.0\n@windows WinRPM\nCompat 0.9.0\n", encoding="utf-8")

        assert [req.package for req in read_file(path)] == ["julia", "WinRPM", "Compat"]

    def test_parse_file_filters_platform(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"
        path.write_text("@windows WinRPM\n@osx Homebrew\nCompat\n", encoding="utf-8")

        assert set(parse_file(path, WINDOWS)) == {"WinRPM", "Compat"}
        assert set(parse_file(path, OSX)) == {"Homebrew", "Compat"}

    def test_invalid_file_names_path(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"
        path.write_text("Compat 2.0.0 1.0.0\n", encoding="utf-8")

        with pytest.raises(InvalidRequirement) as exc_info:
            read_file(path)

        assert exc_info.value.details["file"] == str(path)
        assert exc_info.value.details["line"] == 1


@pytest.mark.unit
class TestParse:
    """Tests for aggregation with parse."""

    def test_repeated_package_intersects(self) -> None:
        result = parse(reqs("PkgA 1.0.0 2.0.0", "PkgA 1.5.0"), LINUX)

        assert result == {"PkgA": vs("1.5.0", "2.0.0")}
        assert str(result["PkgA"]) == "[1.5.0, 2.0.0)"

    def test_order_independent(self) -> None:
        lines = ["A 0.1.0 1.0.0 2.0.0", "B", "A 0.5.0 3.0.0", "A 0.7.0"]

        assert parse(reqs(*lines), LINUX) == parse(reqs(*reversed(lines)), LINUX)

    def test_negated_tag_skipped_on_that_platform(self) -> None:
        lines = reqs("@!windows Gtk 0.10.0", "Compat")

        assert "Gtk" not in parse(lines, WINDOWS)
        assert parse(lines, LINUX)["Gtk"] == vs("0.10.0")

    def test_unix_tag_on_osx(self) -> None:
        assert "Gtk" in parse(reqs("@unix Gtk"), OSX)

    def test_conditional_line_intersects_when_applicable(self) -> None:
        lines = reqs("Compat 0.9.0", "@windows Compat 0.12.0")

        assert parse(lines, WINDOWS)["Compat"] == vs("0.12.0")
        assert parse(lines, LINUX)["Compat"] == vs("0.9.0")

    def test_disjoint_requirements_give_empty_set(self) -> None:
        assert parse(reqs("A 1.0.0 2.0.0", "A 3.0.0"), LINUX)["A"].is_empty

    def test_defaults_to_host(self) -> None:
        assert parse(reqs("Compat")) == {"Compat": VersionSet()}


@pytest.mark.unit
class TestAdd:
    """Tests for add."""

    def test_add_new_package(self) -> None:
        result = add(reqs("julia 0.5.0"), "Compat", vs("0.9.0"))

        assert [req.content for req in result] == ["julia 0.5.0", "Compat 0.9.0"]

    def test_add_unconstrained(self) -> None:
        assert [req.content for req in add([], "Compat")] == ["Compat"]

    def test_merges_existing_lines_into_one(self) -> None:
        lines = reqs("Compat 0.5.0", "julia 0.5.0", "Compat 0.1.0 1.0.0")

        result = add(lines, "Compat", vs("0.7.0"))

        assert [req.content for req in result] == ["julia 0.5.0", "Compat 0.7.0 1.0.0"]

    def test_keeps_conditional_lines(self) -> None:
        lines = reqs("@windows Compat 0.12.0", "Compat 0.5.0")

        result = add(lines, "Compat", vs("0.9.0"))

        assert [req.content for req in result] == ["@windows Compat 0.12.0", "Compat 0.9.0"]

    def test_no_op_when_existing_line_already_narrower(self) -> None:
        lines = reqs("julia 0.5.0", "Compat 0.9.0 1.0.0 # keep me")

        result = add(lines, "Compat", vs("0.5.0"))

        assert result == lines
        assert result is not lines
        assert result[1].content == "Compat 0.9.0 1.0.0 # keep me"

    def test_add_twice_yields_single_line(self) -> None:
        once = add(reqs("julia 0.5.0"), "Compat", vs("0.9.0", "2.0.0"))
        twice = add(once, "Compat", vs("0.9.0", "2.0.0"))

        assert twice == once
        assert [req.package for req in twice].count("Compat") == 1

    def test_add_preserves_other_lines_verbatim(self) -> None:
        lines = reqs("julia   0.5.0  # runtime", "@osx Homebrew")

        result = add(lines, "Compat")

        assert [req.content for req in result[:2]] == ["julia   0.5.0  # runtime", "@osx Homebrew"]

    def test_add_unsatisfiable_raises(self) -> None:
        with pytest.raises(InvalidRequirement):
            add(reqs("Compat 0.1.0 0.2.0"), "Compat", vs("1.0.0"))


@pytest.mark.unit
class TestRemove:
    """Tests for remove."""

    def test_removes_every_line_for_package(self) -> None:
        lines = reqs("Compat", "julia 0.5.0", "@windows Compat 0.12.0")

        assert [req.content for req in remove(lines, "Compat")] == ["julia 0.5.0"]

    def test_remove_after_add_restores_empty(self) -> None:
        assert remove(add([], "Compat", vs("0.9.0")), "Compat") == []

    def test_remove_missing_package_is_identity(self) -> None:
        lines = reqs("julia 0.5.0")

        assert remove(lines, "Gtk") == lines


@pytest.mark.unit
class TestWriting:
    """Tests for format_lines, format_requires and write_file."""

    def test_format_lines(self) -> None:
        assert format_lines(reqs("julia 0.5.0", "Compat # c")) == "julia 0.5.0\nCompat # c\n"

    def test_format_requires_sorted_case_insensitive(self) -> None:
        text = format_requires({"julia": vs("0.5.0"), "Compat": VersionSet(), "BinDeps": vs("0.4.0")})

        assert text == "BinDeps 0.4.0\nCompat\njulia 0.5.0\n"

    def test_format_requires_empty_set_raises(self) -> None:
        with pytest.raises(InvalidRequirement):
            format_requires({"Compat": VersionSet.empty()})

    def test_write_lines_then_read_back(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"
        lines = reqs("julia 0.5.0", "@windows WinRPM")

        assert write_file(path, lines) is None
        assert read_file(path) == lines

    def test_write_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"

        write_file(path, {"Compat": vs("0.9.0")})

        assert path.read_text(encoding="utf-8") == "Compat 0.9.0\n"

    def test_write_with_backup(self, tmp_path: Path) -> None:
        path = tmp_path / "REQUIRE"
        path.write_text("julia 0.4.0\n", encoding="utf-8")

        backup = write_file(path, reqs("julia 0.5.0"), backup=True)

        assert backup is not None
        assert backup.read_text(encoding="utf-8") == "julia 0.4.0\n"


@pytest.mark.unit
class TestHelpers:
    """Tests for dependents and group_by_package."""

    def test_dependents(self) -> None:
        latest = {
            "Gtk": Available("a", {"Compat": VersionSet(), "Cairo": VersionSet()}),
            "Cairo": Available("b", {"Compat": vs("0.9.0")}),
            "Compat": Available("c"),
        }

        assert dependents("Compat", latest) == ["Cairo", "Gtk"]
        assert dependents("Gtk", latest) == []

    def test_group_by_package(self) -> None:
        lines = reqs("Compat", "julia 0.5.0", "@osx Compat 0.9.0")

        grouped = group_by_package(lines)

        assert list(grouped) == ["Compat", "julia"]
        assert [req.content for req in grouped["Compat"]] == ["Compat", "@osx Compat 0.9.0"]
