"""Tests for heading and heading-range extraction."""
from __future__ import annotations

from transclusion.core.transclusion.headings import (
    extract_heading,
    extract_heading_range,
    parse_heading,
)

DOC = "\n".join(
    [
        "# Guide",
        "Intro text",
        "",
        "## Install",
        "Run the installer.",
        "### Linux",
        "Use apt.",
        "",
        "## Usage",
        "Run it.",
        "",
        "## FAQ",
        "None yet.",
    ]
)


class TestParseHeading:
    def test_levels(self) -> None:
        assert parse_heading("### Linux").level == 3
        assert parse_heading("###### Six").level == 6

    def test_not_a_heading(self) -> None:
        assert parse_heading("####### Seven") is None
        assert parse_heading("#NoSpace") is None
        assert parse_heading("plain") is None


class TestExtractHeading:
    def test_section_stops_at_same_level(self) -> None:
        assert extract_heading(DOC, "Install") == "## Install\nRun the installer.\n### Linux\nUse apt."

    def test_case_insensitive_and_trimmed(self) -> None:
        assert extract_heading(DOC, "  install ") == extract_heading(DOC, "Install")

    def test_nested_section_stops_at_shallower_level(self) -> None:
        assert extract_heading(DOC, "Linux") == "### Linux\nUse apt."

    def test_last_section_runs_to_end(self) -> None:
        assert extract_heading(DOC, "FAQ") == "## FAQ\nNone yet."

    def test_top_level_section_covers_document(self) -> None:
        assert extract_heading(DOC, "Guide") == DOC

    def test_missing_heading(self) -> None:
        assert extract_heading(DOC, "Nope") is None


class TestExtractHeadingRange:
    def test_range_excludes_end_heading(self) -> None:
        result = extract_heading_range(DOC, "Install", "FAQ")
        assert result.startswith("## Install")
        assert result.endswith("Run it.")
        assert "## FAQ" not in result

    def test_empty_start_begins_at_top(self) -> None:
        result = extract_heading_range(DOC, "", "Install")
        assert result == "# Guide\nIntro text"

    def test_empty_end_runs_to_end(self) -> None:
        assert extract_heading_range(DOC, "Usage", "") == "## Usage\nRun it.\n\n## FAQ\nNone yet."

    def test_missing_end_runs_to_end(self) -> None:
        assert extract_heading_range(DOC, "Usage", "Nope") == extract_heading_range(DOC, "Usage", "")

    def test_missing_start_is_none(self) -> None:
        assert extract_heading_range(DOC, "Nope", "FAQ") is None

    def test_bounds(self) -> None:
        """A range starts at its start heading and stops before its end heading."""
        result = extract_heading_range(DOC, "Install", "Usage")
        lines = result.split("\n")
        assert lines[0] == "## Install"
        assert "## Usage" not in lines

    def test_end_heading_on_first_line_with_empty_start(self) -> None:
        """The first line of an open-start range never ends the range."""
        doc = "# Intro\nbody\n# Next\nmore"
        assert extract_heading_range(doc, "", "Intro") == doc
        assert extract_heading_range(doc, "", "Next") == "# Intro\nbody"
