"""Concurrent reader for source list files.

Uses a thread pool to read many list files at once while handing results back
in the order the paths were given.
"""

import logging
from concurrent import futures
from typing import Callable, Dict, List, Optional, Tuple

from .errors import SourceReadError
from .io import read_list

logger = logging.getLogger(__name__)

MAX_WORKERS = 8


def fetch(
    paths: List[str],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Tuple[List[Tuple[str, str]], List[SourceReadError]]:
    """Read all list files concurrently.

    Args:
        paths: List file paths, in discovery order.
        progress_callback: Optional callback receiving (completed, total).

    Returns a tuple of:
    - ``(path, text)`` pairs for every readable file, in ``paths`` order.
    - ``SourceReadError`` for every file that could not be read, also in
      ``paths`` order.
    """
    texts: Dict[str, str] = {}
    errors: Dict[str, SourceReadError] = {}
    total = len(paths)
    completed = 0

    with futures.ThreadPoolExecutor(max_workers=max(1, min(MAX_WORKERS, total))) as ex:
        fut_to_path = {ex.submit(read_list, p): p for p in paths}
        for fut in futures.as_completed(fut_to_path):
            file = fut_to_path[fut]
            try:
                texts[file] = fut.result()
                logger.debug("read %s", file)
            except SourceReadError as e:
                errors[file] = e
            completed += 1
            if progress_callback:
                progress_callback(completed, total)

    results = [(p, texts[p]) for p in paths if p in texts]
    failed = [errors[p] for p in paths if p in errors]
    return results, failed
