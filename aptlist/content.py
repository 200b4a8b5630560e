"""Line classification and entry parsing for one-line apt source lists.

Each physical line becomes exactly one ``SourceLine``: blank lines become
``Empty``, ``#`` lines become ``Comment``, lines that fail the entry grammar
become ``Malformed`` and the rest become ``Entry``. Nothing here raises for a
bad line; ``parse_entry`` raises ``EntryParseError`` and ``parse_line`` turns
that into data.

Grammar::

    <deb|deb-src> [ "[" options "]" ] <url> <suite> [component ...] [# comment]

A ``#`` starts an inline comment only at the start of a token; inside a token
(a URL fragment, for instance) it is literal, and ``\\#`` escapes it.
Double-quoted text and ``[...]`` groups form part of one token and may
contain whitespace; quotes are dropped, brackets kept.
"""

from typing import Iterable, List, Optional, Tuple

from .constants import (
    COMMENT_CHAR,
    COMMENT_LINE_RE,
    ENTRY_TYPES,
    ESCAPE_CHAR,
    OPTIONS_CLOSE,
    OPTIONS_OPEN,
    QUOTE_CHAR,
)
from .errors import EntryParseError, InvalidValue, MissingField
from .models import Comment, Empty, Entry, Malformed, SourceEntry, SourceLine


def parse_line(line: str) -> SourceLine:
    """Classify a single physical line of a source list.

    Args:
        line: Raw line without its trailing newline.

    Returns:
        ``Empty``, ``Comment`` or ``Malformed`` carrying ``line`` verbatim, or
        ``Entry`` wrapping the parsed ``SourceEntry``.
    """
    if not line.strip():
        return Empty(line)
    if COMMENT_LINE_RE.match(line):
        return Comment(line)
    try:
        entry, comment = _parse(line)
    except EntryParseError:
        return Malformed(line)
    return Entry(entry, comment)


def parse_lines(lines: Iterable[str]) -> List[SourceLine]:
    """Classify every line, preserving order."""
    return [parse_line(line) for line in lines]


def parse_text(text: str) -> List[SourceLine]:
    """Split raw file content into physical lines and classify each one.

    Only ``\\n`` ends a line; one trailing ``\\r`` is dropped from each line.
    Other characters ``str.splitlines`` treats as breaks (``\\x0b``, ``\\x85``,
    ``\\u2028`` and so on) stay inside the line, as apt reads them.
    """
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return parse_lines(p[:-1] if p.endswith("\r") else p for p in pieces)


def parse_entry(line: str) -> SourceEntry:
    """Parse an active entry line into a ``SourceEntry``.

    Raises:
        InvalidValue: Unknown type keyword, unterminated ``[`` or quote.
        MissingField: Type, URL or suite absent.
    """
    entry, _ = _parse(line)
    return entry


def _parse(line: str) -> Tuple[SourceEntry, Optional[str]]:
    """Parse an entry line, returning the entry and any trailing comment."""
    is_source, rest = _split_type(line)
    options, rest = _split_options(rest)
    fields, comment = _tokenize(rest)

    if not fields:
        raise MissingField("url")
    if len(fields) < 2:
        raise MissingField("suite")

    url, suite, *components = fields
    if not url:
        raise MissingField("url")
    if not suite:
        raise MissingField("suite")
    entry = SourceEntry(
        is_source=is_source,
        options=options,
        url=url,
        suite=suite,
        components=tuple(components),
    )
    return entry, comment


def _split_type(line: str) -> Tuple[bool, str]:
    """Consume the ``deb``/``deb-src`` keyword and return the remainder."""
    parts = line.split(None, 1)
    if not parts:
        raise MissingField("type")
    keyword = parts[0]
    if keyword not in ENTRY_TYPES:
        raise InvalidValue("type", keyword)
    return ENTRY_TYPES[keyword], parts[1] if len(parts) > 1 else ""


def _split_options(rest: str) -> Tuple[Optional[str], str]:
    """Consume an optional ``[...]`` option block.

    The returned option text has surrounding whitespace stripped; ``[]``
    yields an empty string and a missing block yields ``None``.
    """
    rest = rest.lstrip()
    if not rest.startswith(OPTIONS_OPEN):
        return None, rest
    close = rest.find(OPTIONS_CLOSE, 1)
    if close < 0:
        raise InvalidValue("options", rest)
    return rest[1:close].strip(), rest[close + 1 :]


def _tokenize(text: str) -> Tuple[List[str], Optional[str]]:
    """Split ``text`` into whitespace-delimited fields and a trailing comment."""
    fields: List[str] = []
    current: List[str] = []
    in_token = False
    quoted = False
    bracketed = False
    comment: Optional[str] = None

    i = 0
    while i < len(text):
        char = text[i]
        if bracketed:
            current.append(char)
            if char == OPTIONS_CLOSE:
                bracketed = False
        elif quoted:
            if char == QUOTE_CHAR:
                quoted = False
            else:
                current.append(char)
        elif char == QUOTE_CHAR:
            quoted = True
            in_token = True
        elif char == OPTIONS_OPEN:
            bracketed = True
            in_token = True
            current.append(char)
        elif char.isspace():
            if in_token:
                fields.append("".join(current))
                current = []
                in_token = False
        elif char == ESCAPE_CHAR and text[i + 1 : i + 2] == COMMENT_CHAR:
            current.append(COMMENT_CHAR)
            in_token = True
            i += 1
        elif char == COMMENT_CHAR and not in_token:
            comment = text[i:].rstrip()
            break
        else:
            current.append(char)
            in_token = True
        i += 1

    if quoted:
        raise InvalidValue("quote", text)
    if bracketed:
        raise InvalidValue("bracket", text)
    if in_token:
        fields.append("".join(current))
    return fields, comment
