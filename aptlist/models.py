"""Lightweight data models for Apt-List-Parser.

Every model is a frozen dataclass: a scan builds them once and consumers only
read them. ``SourceLine`` and ``SourceEvent`` are unions of small variant
classes; callers branch on the variant with ``isinstance``.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple, Union

from .constants import (
    BINARY_TYPE,
    COMMENT_CHAR,
    DIST_DIR,
    ESCAPE_CHAR,
    OPTIONS_CLOSE,
    OPTIONS_OPEN,
    POOL_DIR,
    QUOTE_CHAR,
    SOURCE_TYPE,
)


def _needs_quotes(token: str) -> bool:
    """True when whitespace sits outside a ``[...]`` group or a group is left open."""
    bracketed = False
    for c in token:
        if bracketed:
            bracketed = c != OPTIONS_CLOSE
        elif c == OPTIONS_OPEN:
            bracketed = True
        elif c.isspace():
            return True
    return bracketed


def _quote(token: str) -> str:
    """Escape a leading ``#`` and quote the token when it would not split back as one."""
    prefix = ""
    if token.startswith(COMMENT_CHAR):
        # the escape is only honoured outside quotes
        prefix, token = ESCAPE_CHAR + COMMENT_CHAR, token[1:]
    if _needs_quotes(token):
        token = f"{QUOTE_CHAR}{token}{QUOTE_CHAR}"
    return prefix + token


def _with_slash(url: str) -> str:
    """Append a single ``/`` to ``url`` unless it already ends with one."""
    return url if url.endswith("/") else url + "/"


@dataclass(frozen=True)
class SourceEntry:
    """One repository declaration from a one-line source list.

    Attributes:
        is_source: True for ``deb-src``, False for ``deb``.
        options: Text inside the ``[...]`` bracket, ``None`` when absent.
        url: Repository base URL exactly as written.
        suite: Distribution codename or exact path (e.g. ``cosmic``, ``./``).
        components: Component names in declaration order; may be empty.
    """

    is_source: bool
    options: Optional[str]
    url: str
    suite: str
    components: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components))

    @property
    def type(self) -> str:
        """Return the type keyword (``deb`` or ``deb-src``)."""
        return SOURCE_TYPE if self.is_source else BINARY_TYPE

    def base_url(self) -> str:
        """Return the URL with a trailing slash, never doubling one."""
        return _with_slash(self.url)

    def pool_path(self) -> str:
        """Return the root URL of this entry's package pool.

        ``deb http://us.archive.ubuntu.com/ubuntu/ cosmic main`` yields
        ``http://us.archive.ubuntu.com/ubuntu/pool/``.
        """
        return self.base_url() + POOL_DIR

    def dist_path(self) -> str:
        """Return the root URL of this entry's dist tree (no component)."""
        return self.base_url() + DIST_DIR + self.suite

    def dist_components(self) -> "DistComponents":
        """Return the per-component dist-index URLs, in declaration order."""
        return DistComponents(self)

    def filename(self) -> str:
        """Return the base filename apt uses when caching this entry's files."""
        url = self.url.rstrip("/")
        _, sep, rest = url.partition("//")
        if sep:
            url = rest
        return url.replace("/", "_")

    def option_map(self) -> Dict[str, str]:
        """Split the option text into ``key=value`` pairs.

        Keys keep any ``+``/``-`` modifier (``arch+=i386`` maps ``arch+``).
        Items without ``=`` map to an empty string.
        """
        if not self.options:
            return {}
        pairs: Dict[str, str] = {}
        for item in self.options.split():
            key, _, value = item.partition("=")
            pairs[key] = value
        return pairs

    def with_suite(self, suite: str) -> "SourceEntry":
        """Return a copy of this entry pointing at another suite."""
        return SourceEntry(
            is_source=self.is_source,
            options=self.options,
            url=self.url,
            suite=suite,
            components=self.components,
        )

    def __str__(self) -> str:
        parts = [self.type]
        if self.options is not None:
            parts.append(f"{OPTIONS_OPEN}{self.options}{OPTIONS_CLOSE}")
        parts.extend(_quote(value) for value in (self.url, self.suite))
        parts.extend(_quote(component) for component in self.components)
        return " ".join(parts)


class DistComponents:
    """Re-iterable view over an entry's dist-index URLs.

    Each iteration lazily builds ``url/dists/suite/component`` strings from
    the (immutable) entry, so the view can be walked any number of times.
    """

    __slots__ = ("_entry",)

    def __init__(self, entry: SourceEntry):
        self._entry = entry

    def __iter__(self) -> Iterator[str]:
        prefix = self._entry.dist_path() + "/"
        for component in self._entry.components:
            yield prefix + component

    def __len__(self) -> int:
        return len(self._entry.components)

    def __repr__(self) -> str:
        return f"DistComponents({list(self)!r})"


@dataclass(frozen=True)
class Empty:
    """Blank or whitespace-only line."""

    text: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Comment:
    """Line whose first non-whitespace character is ``#``; kept verbatim."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Malformed:
    """Non-comment line that failed to parse; kept verbatim."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Entry:
    """Successfully parsed repository declaration.

    ``comment`` holds a trailing inline comment (starting at ``#``) so the line
    can be written back; it does not take part in equality.
    """

    entry: SourceEntry
    comment: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.comment:
            return f"{self.entry} {self.comment}"
        return str(self.entry)


SourceLine = Union[Empty, Comment, Malformed, Entry]


@dataclass(frozen=True)
class SourcesFile:
    """A parsed source list file.

    Attributes:
        path: Filesystem path the lines were read from.
        lines: One ``SourceLine`` per physical line, in file order.
    """

    path: str
    lines: Tuple[SourceLine, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def entries(self) -> Iterator[SourceEntry]:
        """Yield the parsed entries of this file in order."""
        for line in self.lines:
            if isinstance(line, Entry):
                yield line.entry

    def contains_entry(self, url: str) -> Optional[int]:
        """Return the line index of the first entry for ``url``, if any."""
        for index, line in enumerate(self.lines):
            if isinstance(line, Entry) and line.entry.url == url:
                return index
        return None

    def is_active(self) -> bool:
        """Return True if at least one line is an active entry."""
        return any(isinstance(line, Entry) for line in self.lines)

    def __str__(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


@dataclass(frozen=True)
class NewList:
    """Marks the start of the lines of a new source list file."""

    path: str


@dataclass(frozen=True)
class ListLine:
    """One classified line of the most recently announced list file."""

    line: SourceLine


SourceEvent = Union[NewList, ListLine]


__all__ = [
    "Comment",
    "DistComponents",
    "Empty",
    "Entry",
    "ListLine",
    "Malformed",
    "NewList",
    "SourceEntry",
    "SourceEvent",
    "SourceLine",
    "SourcesFile",
]
