"""Aggregation of every apt source list on a system.

``SourcesList`` holds the root list followed by each fragment, parsed once
and never mutated. Iterating it yields a ``NewList`` event per file followed
by a ``ListLine`` event per line of that file. Operations that "change" the
sources return a new ``SourcesList``.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from .constants import (
    COMMENT_CHAR,
    HTTP_SCHEME_RE,
    LIST_SUFFIX,
    SOURCES_LIST,
    SOURCES_PARTS,
)
from .content import parse_text
from .errors import SourceNotFound
from .fetcher import fetch
from .io import discover_lists, write_lists
from .models import (
    Comment,
    Entry,
    ListLine,
    NewList,
    SourceEntry,
    SourceEvent,
    SourceLine,
    SourcesFile,
)

logger = logging.getLogger(__name__)


class SourcesList:
    """Immutable, re-iterable collection of parsed source list files."""

    __slots__ = ("_files",)

    def __init__(self, files: Iterable[SourcesFile] = ()):
        self._files: Tuple[SourcesFile, ...] = tuple(files)

    @classmethod
    def from_texts(cls, texts: Iterable[Tuple[str, str]]) -> "SourcesList":
        """Build a list from already-read ``(path, raw_text)`` pairs."""
        return cls(SourcesFile(path=p, lines=parse_text(text)) for p, text in texts)

    @classmethod
    def scan(
        cls,
        root: str = SOURCES_LIST,
        parts_dir: str = SOURCES_PARTS,
        suffix: str = LIST_SUFFIX,
        skip_unreadable: bool = False,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> "SourcesList":
        """Discover, read and parse the root list and its fragments.

        Args:
            root: Path of the main ``sources.list``.
            parts_dir: Directory holding ``*.list`` fragments.
            suffix: Fragment file name suffix.
            skip_unreadable: Skip fragments that cannot be read instead of
                failing. An unreadable root list always fails.
            progress_callback: Optional callback receiving (completed, total).

        Raises:
            SourceReadError: A list could not be read or decoded.
        """
        paths = discover_lists(root, parts_dir, suffix)
        logger.debug("scanning %d source lists", len(paths))
        texts, failed = fetch(paths, progress_callback)

        for error in failed:
            if error.path == root or not skip_unreadable:
                raise error
            logger.warning("skipping unreadable source list: %s", error)

        return cls.from_texts(texts)

    @property
    def files(self) -> Tuple[SourcesFile, ...]:
        """The parsed files, root list first."""
        return self._files

    def __iter__(self) -> Iterator[SourceEvent]:
        for sources_file in self._files:
            yield NewList(sources_file.path)
            for line in sources_file.lines:
                yield ListLine(line)

    def __len__(self) -> int:
        return len(self._files)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourcesList):
            return NotImplemented
        return self._files == other._files

    def __hash__(self) -> int:
        return hash(self._files)

    def __repr__(self) -> str:
        return f"SourcesList({[f.path for f in self._files]!r})"

    def get(self, path: str) -> SourcesFile:
        """Return the parsed file for ``path``.

        Raises:
            SourceNotFound: ``path`` was not part of the scan.
        """
        for sources_file in self._files:
            if sources_file.path == path:
                return sources_file
        raise SourceNotFound(path)

    def entries(self) -> Iterator[SourceEntry]:
        """Yield every active entry across all files, in order."""
        for sources_file in self._files:
            yield from sources_file.entries()

    def lists_which_contain(self, url: str) -> Iterator[Tuple[int, SourcesFile]]:
        """Yield ``(line_index, file)`` for each file with an entry for ``url``."""
        for sources_file in self._files:
            index = sources_file.contains_entry(url)
            if index is not None:
                yield index, sources_file

    def dist_upgrade_paths(self, from_suite: str, to_suite: str) -> Iterator[str]:
        """Yield the dist paths HTTP entries would use after a release upgrade.

        Entries whose suite starts with ``from_suite`` (``cosmic``,
        ``cosmic-updates``...) get that prefix replaced by ``to_suite``.
        """
        for entry in self.entries():
            if _upgradable(entry, from_suite):
                suite = _upgrade_suite(entry.suite, from_suite, to_suite)
                yield entry.with_suite(suite).dist_path()

    def upgraded(self, from_suite: str, to_suite: str) -> "SourcesList":
        """Return a copy with upgradable entries pointing at ``to_suite``."""

        def upgrade(line: SourceLine) -> SourceLine:
            if isinstance(line, Entry) and _upgradable(line.entry, from_suite):
                suite = _upgrade_suite(line.entry.suite, from_suite, to_suite)
                return Entry(line.entry.with_suite(suite), line.comment)
            return line

        return self._map_lines(upgrade)

    def dist_upgrade(self, from_suite: str, to_suite: str) -> "SourcesList":
        """Upgrade entries like ``upgraded`` and write the changed files back.

        Every changed file is backed up to ``<path>.save`` first. If a write
        fails, the files already written are restored from their backups.

        Raises:
            SourceWriteError: A changed list could not be written.
        """
        upgraded = self.upgraded(from_suite, to_suite)
        changed = upgraded.modified_files(self)
        write_lists(changed)
        logger.info("upgraded %d source lists to %s", len(changed), to_suite)
        return upgraded

    def with_entry(self, path: str, entry: SourceEntry) -> "SourcesList":
        """Return a copy where ``entry`` is set in the list at ``path``.

        The first entry in that list with the same URL is replaced in place;
        otherwise ``entry`` is appended to the end of the list.

        Raises:
            SourceNotFound: ``path`` was not part of the scan.
        """
        target = self.get(path)
        lines = list(target.lines)
        index = target.contains_entry(entry.url)
        if index is None:
            lines.append(Entry(entry))
        else:
            lines[index] = Entry(entry)
        return SourcesList(
            SourcesFile(path=path, lines=lines) if f is target else f
            for f in self._files
        )

    def commented(self, url: str) -> "SourcesList":
        """Return a copy where every entry for ``url`` is commented out."""

        def comment(line: SourceLine) -> SourceLine:
            if isinstance(line, Entry) and line.entry.url == url:
                return Comment(f"{COMMENT_CHAR} {line}")
            return line

        return self._map_lines(comment)

    def without(self, url: str) -> "SourcesList":
        """Return a copy with every entry for ``url`` removed."""
        return SourcesList(
            SourcesFile(
                path=f.path,
                lines=[
                    line
                    for line in f.lines
                    if not (isinstance(line, Entry) and line.entry.url == url)
                ],
            )
            for f in self._files
        )

    def modified_files(self, other: "SourcesList") -> List[SourcesFile]:
        """Return files of this list whose content differs from ``other``."""
        before = {f.path: f for f in other.files}
        return [f for f in self._files if before.get(f.path) != f]

    def _map_lines(self, func: Callable[[SourceLine], SourceLine]) -> "SourcesList":
        return SourcesList(
            SourcesFile(path=f.path, lines=[func(line) for line in f.lines])
            for f in self._files
        )


def _upgradable(entry: SourceEntry, from_suite: str) -> bool:
    return bool(HTTP_SCHEME_RE.match(entry.url)) and entry.suite.startswith(from_suite)


def _upgrade_suite(suite: str, from_suite: str, to_suite: str) -> str:
    return to_suite + suite[len(from_suite) :]
