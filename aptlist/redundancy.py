"""Redundancy analysis for source lists.

Finds index targets that more than one entry declares. apt fetches such a
target once and warns that it "is configured multiple times"; listing every
location makes the extra declarations easy to remove.
"""

from typing import Dict, List, Tuple

from .models import Entry, SourceEntry, SourcesFile
from .sources import SourcesList

Location = Tuple[str, int]
Target = Tuple[str, str]


def _targets(entry: SourceEntry) -> List[str]:
    """Return the index URLs an entry makes apt fetch.

    Flat repositories (no components) fetch directly below ``url/suite``.
    """
    components = list(entry.dist_components())
    if components:
        return components
    return [entry.base_url() + entry.suite]


def _file_targets(sources_file: SourcesFile) -> List[Tuple[Target, Location]]:
    """Return ``((type, url), (path, line_number))`` for each target of a file."""
    out: List[Tuple[Target, Location]] = []
    for number, line in enumerate(sources_file.lines, start=1):
        if not isinstance(line, Entry):
            continue
        for url in _targets(line.entry):
            out.append(((line.entry.type, url), (sources_file.path, number)))
    return out


def find_duplicate_targets(sources: SourcesList) -> Dict[Target, List[Location]]:
    """Map each target declared more than once to all of its locations.

    ``deb`` and ``deb-src`` targets are distinct even for the same URL. Keys
    keep first-seen order; line numbers are 1-based.
    """
    seen: Dict[Target, List[Location]] = {}
    for sources_file in sources.files:
        for target, location in _file_targets(sources_file):
            seen.setdefault(target, []).append(location)
    return {target: locs for target, locs in seen.items() if len(locs) > 1}


def generate_redundancy_report(duplicates: Dict[Target, List[Location]]) -> List[str]:
    """Render duplicate targets as report lines; empty when there are none."""
    message: List[str] = []
    if not duplicates:
        return message

    message.append(f"  🔁 Targets configured multiple times: {len(duplicates)}")
    for (kind, url), locations in duplicates.items():
        message.append(f"   {kind} {url}")
        for i, (file, number) in enumerate(locations):
            prefix = "   ├─" if i < len(locations) - 1 else "   └─"
            message.append(f"  {prefix} 📄 {file}:{number}")
    message.append("      💡 Tip: Keep one declaration per target, remove the others")
    return message
