"""
Text exporters for extracted bookmarks.

Two render modes are provided: plain (title and URL on separate lines) and
link (one markdown-style "[title](url)" line per bookmark). Rendering keeps
the input order and never drops or merges records.
"""
import re
from enum import Enum
from pathlib import Path
from typing import Iterable, Tuple, Union

from bookmark_exporter.errors import OutputError, ParseError
from bookmark_exporter.models import BookmarkRecord


LINE_TERMINATOR = "\n"

# Every boundary str.splitlines() recognises
LINE_BREAKS = re.compile(r"\r\n|[\n\r\v\f\x1c\x1d\x1e\x85\u2028\u2029]")


class OutputFormat(str, Enum):
    """Supported render modes."""
    PLAIN = "plain"
    LINK = "link"


def single_line(text: str) -> str:
    """Replace embedded line breaks with a space so a field stays on one line."""
    return LINE_BREAKS.sub(" ", text)


def export_plain(records: Iterable[BookmarkRecord]) -> str:
    """Render each record as two lines: title, then URL."""
    return "".join(
        f"{single_line(r.title)}{LINE_TERMINATOR}{single_line(r.url)}{LINE_TERMINATOR}"
        for r in records
    )


def export_links(records: Iterable[BookmarkRecord]) -> str:
    """Render each record as a single [title](url) line."""
    return "".join(
        f"[{single_line(r.title)}]({single_line(r.url)}){LINE_TERMINATOR}"
        for r in records
    )


EXPORTERS = {
    OutputFormat.PLAIN: export_plain,
    OutputFormat.LINK: export_links,
}


def format_bookmarks(records: Iterable[BookmarkRecord],
                     format: Union[OutputFormat, str] = OutputFormat.PLAIN) -> str:
    """
    Render bookmarks in the requested format.

    Args:
        records: Bookmarks in output order
        format: "plain" or "link"

    Returns:
        The rendered text; empty input gives an empty string
    """
    try:
        fmt = OutputFormat(format)
    except ValueError:
        raise ValueError(f"Unknown format: {format}") from None
    return EXPORTERS[fmt](records)


def parse_link_line(line: str) -> Tuple[str, str]:
    """
    Split a "[title](url)" line back into its title and URL.

    The title ends at the first "](" reached while its square brackets are
    balanced, so the URL may contain any text. Titles with unbalanced
    brackets cannot be recovered.
    """
    line = line.rstrip(LINE_TERMINATOR)
    if not (line.startswith("[") and line.endswith(")")):
        raise ParseError(f"not a link line: {line!r}")

    body = line[1:-1]
    depth = 0
    for i, char in enumerate(body):
        if char == "[":
            depth += 1
        elif char == "]":
            if depth == 0:
                if body.startswith("](", i):
                    return body[:i], body[i + 2:]
                break
            depth -= 1
    raise ParseError(f"not a link line: {line!r}")


def export_file(records: Iterable[BookmarkRecord], path: Path,
                format: Union[OutputFormat, str] = OutputFormat.PLAIN) -> None:
    """
    Render bookmarks and write them to a file.

    The text is rendered before the file is created, so a rendering failure
    leaves no file behind.
    """
    text = format_bookmarks(records, format)
    write_output(text, path)


def write_output(text: str, path: Path) -> None:
    """Write rendered text to path, wrapping OS failures in OutputError."""
    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise OutputError(path, e.strerror or str(e)) from e
