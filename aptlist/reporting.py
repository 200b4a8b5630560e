"""Human-readable reporting utilities for CLI summary output."""

from shutil import get_terminal_size
from time import time
from typing import Dict, List
from unicodedata import east_asian_width

from .models import Comment, Entry, Malformed, SourcesFile
from .sources import SourcesList


def _report_width() -> int:
    """Determine report width based on terminal size with sane bounds.

    Uses the current terminal width when available; falls back to 80 columns.
    Clamps between 60 and 160 to keep the layout readable across environments.
    """
    try:
        cols = get_terminal_size(fallback=(80, 24)).columns
    except OSError:
        cols = 80
    return max(60, min(160, cols))


def summarize_file(sources_file: SourcesFile) -> Dict[str, int]:
    """Count the line variants of one file.

    Keys: entries, sources (deb-src entries), comments, malformed, empty.
    """
    counts = {"entries": 0, "sources": 0, "comments": 0, "malformed": 0, "empty": 0}
    for line in sources_file.lines:
        if isinstance(line, Entry):
            counts["entries"] += 1
            if line.entry.is_source:
                counts["sources"] += 1
        elif isinstance(line, Comment):
            counts["comments"] += 1
        elif isinstance(line, Malformed):
            counts["malformed"] += 1
        else:
            counts["empty"] += 1
    return counts


def generate_report(
    sources: SourcesList,
    redundancy: List[str],
    start_time: float,
    show_urls: bool = False,
):
    """Print a formatted summary report for a scanned set of source lists."""
    elapsed = time() - start_time
    width = _report_width()

    print("=" * width)
    print(f"📦 SCANNED {len(sources)} SOURCE LISTS IN {elapsed:.2f} SECONDS")
    print("=" * width)

    print("┌" + "─" * (width - 2) + "┐")
    for index, sources_file in enumerate(sources.files):
        if index:
            print("├" + "─" * (width - 2) + "┤")
        _generate_file_section(sources_file, show_urls)

    if redundancy:
        print("├" + "─" * (width - 2) + "┤")
        for line in redundancy:
            _generate_line(line)

    print("└" + "─" * (width - 2) + "┘")


def _generate_file_section(sources_file: SourcesFile, show_urls: bool):
    """Print the counts, malformed lines and (optionally) URLs of one file."""
    c = summarize_file(sources_file)
    _generate_line(f"📄 {sources_file.path}")
    _generate_line(
        f"  📝 Entries: {c['entries']:>4} (deb-src {c['sources']:>3})"
        f" | 💬 Comments: {c['comments']:>4} | ⚠️  Malformed: {c['malformed']:>3}"
    )

    for number, line in enumerate(sources_file.lines, start=1):
        if isinstance(line, Malformed):
            _generate_line(f"  ⚠️  line {number}: {line.text.strip()}")
        elif show_urls and isinstance(line, Entry):
            _generate_line(f"  🌐 {line.entry}")
            _generate_line(f"     pool: {line.entry.pool_path()}")
            for url in line.entry.dist_components():
                _generate_line(f"     dist: {url}")


def _generate_line(message: str):
    """Print a single framed line honoring terminal width and wide chars."""
    width = _report_width()
    display_width = _get_display_width(message) + 4
    padding = max(0, width - display_width)
    line = f"│ {message}" + " " * padding + " │"
    print(line)


def _get_display_width(text: str) -> int:
    """Return printable width, accounting for wide glyphs and emoji variants."""
    width = 0
    i = 0
    while i < len(text):
        char = text[i]
        if i < len(text) - 1 and ord(text[i + 1]) == 0xFE0F:
            width += 1
            i += 2
        elif east_asian_width(char) in ('F', 'W'):
            width += 2
            i += 1
        else:
            width += 1
            i += 1
    return width
