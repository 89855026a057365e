"""
Precomputed path -> listing index over a decoded export.

The whole tree is walked once, children before parents, so every listing
carries authoritative sizes (sums of file sizes) rather than the directory
sizes declared by the export, which may be missing or stale. After that
every lookup is a single dict access.
"""
import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .aggregate import total_size
from .models import DirectoryEntry, DirectoryListing, FileEntry
from .nodes import DirectoryNode
from .resolver import EMPTY_DIRECTORY, largest_first

logger = logging.getLogger(__name__)


def path_key(path_segments: Sequence[str]) -> str:
    """Index key for a path: segments joined by ``/``; ``""`` is the root."""
    return "/".join(path_segments)


class PathIndex:
    """Read-only mapping from directory path keys to their listings."""

    def __init__(self, listings: Dict[str, DirectoryListing], root_size: int):
        self._listings: Mapping[str, DirectoryListing] = MappingProxyType(dict(listings))
        self.root_size = root_size

    def lookup(self, path_segments: Sequence[str]) -> Optional[DirectoryListing]:
        """Listing for the directory at ``path_segments``, or None if there is none."""
        return self._listings.get(path_key(path_segments))

    def get(self, key: str) -> Optional[DirectoryListing]:
        return self._listings.get(key)

    def keys(self) -> Iterator[str]:
        return iter(self._listings)

    def __contains__(self, key: object) -> bool:
        return key in self._listings

    def __len__(self) -> int:
        return len(self._listings)

    def __repr__(self):
        return f"PathIndex(directories={len(self)}, root_size={self.root_size})"


def build_index(root: DirectoryNode) -> PathIndex:
    """Index every directory reachable from ``root`` by its path."""
    listings: Dict[str, DirectoryListing] = {}
    root_size = _index_directory(root, [], listings)
    logger.debug(f"Built path index: {len(listings)} directories, {root_size} bytes")
    return PathIndex(listings, root_size)


def _index_directory(node: DirectoryNode, path: List[str], listings: Dict[str, DirectoryListing]) -> int:
    """Insert listings for ``node`` and its subdirectories; return its authoritative size."""
    directories: List[DirectoryEntry] = []
    files: List[FileEntry] = []
    seen = set()
    total = 0

    for child in node.children:
        if isinstance(child, DirectoryNode):
            if child.name in seen:
                # Shadowed by an earlier sibling of the same name: counted, not indexed
                size = total_size(child)
            else:
                size = _index_directory(child, path + [child.name], listings)
            directories.append(DirectoryEntry(name=child.name, size=size, item_count=len(child.children)))
        else:
            size = child.size
            files.append(FileEntry.for_name(child.name, size))
        seen.add(child.name)
        total += size

    key = path_key(path)
    if key in listings:
        logger.warning(f"Path '{key}' is reachable twice; keeping the first listing")
        return total

    directories = largest_first(directories)
    files = largest_first(files)
    listings[key] = DirectoryListing(
        current=DirectoryEntry(name=node.name, size=total, item_count=len(node.children)),
        path=list(path),
        directories=directories,
        files=files,
        total_items=len(directories) + len(files),
        error=EMPTY_DIRECTORY if not node.children else None,
    )
    return total
