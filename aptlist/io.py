"""I/O helpers for source list discovery, loading and writing.

Finds the root list and the ``*.list`` fragments beside it, reads them as
strict UTF-8 and writes parsed files back with LF endings.
"""

import logging
from os import listdir, makedirs, path, remove
from shutil import copyfile
from typing import Iterable, List, Tuple

from .constants import BACKUP_SUFFIX, LIST_SUFFIX, SOURCES_LIST, SOURCES_PARTS
from .content import parse_text
from .errors import SourceReadError, SourceWriteError
from .models import SourcesFile

logger = logging.getLogger(__name__)


def discover_lists(
    root: str = SOURCES_LIST,
    parts_dir: str = SOURCES_PARTS,
    suffix: str = LIST_SUFFIX,
) -> List[str]:
    """Return the root list path followed by every fragment list path.

    Fragments are regular files directly inside ``parts_dir`` whose name ends
    with ``suffix``, sorted by name the way apt orders them. A missing
    fragment directory contributes nothing.

    Args:
        root: Path of the main ``sources.list``.
        parts_dir: Directory holding list fragments.
        suffix: File name suffix a fragment must carry.
    """
    paths = [root]
    if not path.isdir(parts_dir):
        logger.debug("fragment directory %s not found, skipping", parts_dir)
        return paths

    try:
        names = sorted(listdir(parts_dir))
    except OSError as e:
        raise SourceReadError(parts_dir, e) from e

    for name in names:
        full = path.join(parts_dir, name)
        if name.endswith(suffix) and path.isfile(full):
            paths.append(full)
        else:
            logger.debug("ignoring %s", full)
    return paths


def read_list(file: str) -> str:
    """Read a list file as UTF-8.

    Raises:
        SourceReadError: The file cannot be opened or read, or is not valid
            UTF-8.
    """
    try:
        with open(file, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(file, e) from e


def load_list(file: str) -> SourcesFile:
    """Read and classify one list file."""
    return SourcesFile(path=file, lines=parse_text(read_list(file)))


def write_list(sources_file: SourcesFile, backup: bool = True) -> str:
    """Write a parsed list back to its path (LF endings).

    When ``backup`` is set and the file exists, its previous content is first
    copied to ``<path>.save``.

    Returns:
        The backup path, or an empty string when no backup was made.
    """
    file = sources_file.path
    makedirs(path.dirname(path.abspath(file)) or ".", exist_ok=True)

    backup_path = ""
    if backup and path.isfile(file):
        backup_path = file + BACKUP_SUFFIX
        copyfile(file, backup_path)
        logger.debug("saved %s to %s", file, backup_path)

    with open(file, "w", encoding="utf-8", newline="\n") as f:
        f.write(str(sources_file))
    return backup_path


def write_lists(files: Iterable[SourcesFile]) -> List[str]:
    """Write several lists back as one unit.

    Each existing file is saved to ``<path>.save`` before it is overwritten.
    If any write fails, every file already written is restored from its
    backup (or removed, when it did not exist before) and the failure is
    raised.

    Returns:
        The backup paths that were made, in write order.

    Raises:
        SourceWriteError: A list could not be written. Restore failures are
            logged and do not mask the original error.
    """
    written: List[Tuple[str, str]] = []
    for sources_file in files:
        try:
            written.append((sources_file.path, write_list(sources_file)))
        except OSError as e:
            logger.error("failed to write %s, restoring backups", sources_file.path)
            _restore(written)
            raise SourceWriteError(sources_file.path, e) from e
    return [backup for _, backup in written if backup]


def _restore(written: List[Tuple[str, str]]) -> None:
    for file, backup in written:
        try:
            if backup:
                copyfile(backup, file)
            else:
                remove(file)
        except OSError as e:
            logger.error("failed to restore %s: %s", file, e)
