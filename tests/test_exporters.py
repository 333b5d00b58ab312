"""
Tests for bookmark_exporter/exporters.py

Tests the render modes:
- format_bookmarks (with format selection)
- export_plain
- export_links
- parse_link_line
- export_file
"""
import pytest
from unittest.mock import patch

from bookmark_exporter.errors import OutputError, ParseError
from bookmark_exporter.exporters import (
    OutputFormat,
    export_file,
    export_links,
    export_plain,
    format_bookmarks,
    parse_link_line,
)
from bookmark_exporter.models import BookmarkRecord


@pytest.fixture
def records():
    return [
        BookmarkRecord("Example", "https://example.com"),
        BookmarkRecord("Python Docs", "https://docs.python.org/3/"),
        BookmarkRecord("Example", "https://example.com"),
    ]


class TestExportPlain:
    """Test the two-line plain format."""

    def test_two_lines_per_record(self, records):
        text = export_plain(records)
        assert text.splitlines() == [
            "Example", "https://example.com",
            "Python Docs", "https://docs.python.org/3/",
            "Example", "https://example.com",
        ]

    def test_every_line_terminated(self, records):
        text = export_plain(records)
        assert text.endswith("\n")
        assert text.count("\n") == 2 * len(records)

    def test_empty_input(self):
        assert export_plain([]) == ""

    def test_line_breaks_in_fields_flattened(self):
        records = [BookmarkRecord("Release\nnotes\r\nv2", "https://example.com/\rnotes")]

        lines = export_plain(records).splitlines()

        assert lines == ["Release notes v2", "https://example.com/ notes"]


class TestExportLinks:
    """Test the single-line link format."""

    def test_one_line_per_record(self, records):
        text = export_links(records)
        assert text == (
            "[Example](https://example.com)\n"
            "[Python Docs](https://docs.python.org/3/)\n"
            "[Example](https://example.com)\n"
        )

    def test_duplicates_are_kept(self, records):
        assert export_links(records).count("[Example](https://example.com)") == 2

    def test_empty_input(self):
        assert export_links([]) == ""

    def test_line_breaks_in_fields_flattened(self):
        records = [BookmarkRecord("Release\nnotes\u2028draft", "https://example.com")]

        lines = export_links(records).splitlines()

        assert lines == ["[Release notes draft](https://example.com)"]

    def test_url_with_bracket_paren_parses_back(self):
        record = BookmarkRecord("Odd [link]", "https://x/](y")
        assert parse_link_line(export_links([record])) == (record.title, record.url)

    def test_lines_parse_back(self, records):
        """Each rendered line recovers its title and URL."""
        lines = export_links(records).splitlines()
        assert [parse_link_line(line) for line in lines] == [
            (r.title, r.url) for r in records
        ]

    def test_brackets_in_title_parse_back(self):
        record = BookmarkRecord("[draft] Notes (v2)", "https://notes.example/?q=(a)")
        line = export_links([record])
        assert parse_link_line(line) == (record.title, record.url)


class TestFormatBookmarks:
    """Test format selection."""

    def test_plain_is_default(self, records):
        assert format_bookmarks(records) == export_plain(records)

    def test_accepts_strings_and_enum(self, records):
        assert format_bookmarks(records, "link") == format_bookmarks(records, OutputFormat.LINK)

    def test_accepts_generators(self, records):
        assert format_bookmarks(iter(records), "plain") == export_plain(records)

    def test_unknown_format_raises(self, records):
        with pytest.raises(ValueError, match="Unknown format: html"):
            format_bookmarks(records, "html")

    @pytest.mark.parametrize("fmt", ["plain", "link"])
    def test_empty_input_is_empty_string(self, fmt):
        assert format_bookmarks([], fmt) == ""


class TestParseLinkLine:
    """Test the link line parser."""

    def test_rejects_plain_text(self):
        with pytest.raises(ParseError):
            parse_link_line("Example")

    def test_rejects_missing_separator(self):
        with pytest.raises(ParseError):
            parse_link_line("[Example https://example.com)")


class TestExportFile:
    """Test writing rendered output to a file."""

    def test_writes_file(self, tmp_path, records):
        path = tmp_path / "bookmarks.md"
        export_file(records, path, format="link")
        assert path.read_text(encoding="utf-8") == export_links(records)

    def test_missing_directory_raises_output_error(self, tmp_path, records):
        path = tmp_path / "missing" / "bookmarks.txt"

        with pytest.raises(OutputError) as exc_info:
            export_file(records, path)
        assert exc_info.value.path == path
        assert isinstance(exc_info.value, IOError)

    def test_unknown_format_creates_no_file(self, tmp_path, records):
        path = tmp_path / "bookmarks.txt"
        with pytest.raises(ValueError):
            export_file(records, path, format="csv")
        assert not path.exists()

    def test_write_failure_raises_output_error(self, tmp_path, records):
        with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(OutputError, match="Permission denied"):
                export_file(records, tmp_path / "bookmarks.txt")
