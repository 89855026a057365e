"""
On-demand lookup of a single directory listing by walking the canonical tree.

Sizes come straight from the export: child directories report their
declared size. Use ncdu_view.index for recursively verified sizes.
"""
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from .models import DirectoryEntry, DirectoryListing, FileEntry, FileSystemEntry
from .nodes import DirectoryNode, Node

EMPTY_DIRECTORY = "Directory is empty"

E = TypeVar("E", bound=FileSystemEntry)


def split_path(text: Optional[str]) -> List[str]:
    """Split a slash-separated path into segments, dropping empty ones.

    ``"a//b/"`` becomes ``["a", "b"]``; None and ``""`` become ``[]``.
    """
    if not text:
        return []
    return [segment for segment in text.split("/") if segment]


def largest_first(entries: Iterable[E]) -> List[E]:
    """Sort by size, descending. Equal sizes keep their export order."""
    return sorted(entries, key=lambda entry: entry.size, reverse=True)


def not_found_listing(requested: Sequence[str], resolved: int) -> DirectoryListing:
    """Listing returned when ``requested[resolved]`` is missing or is not a directory."""
    return DirectoryListing(
        current=DirectoryEntry(name=requested[-1] if requested else "root", size=0),
        path=list(requested[:resolved]),
        directories=[],
        files=[],
        total_items=0,
        error=f"Path not found: {'/'.join(requested)}",
    )


def _entries(children: Iterable[Node]) -> Tuple[List[DirectoryEntry], List[FileEntry]]:
    directories = []
    files = []
    for child in children:
        if isinstance(child, DirectoryNode):
            directories.append(DirectoryEntry(name=child.name, size=child.size, item_count=len(child.children)))
        else:
            files.append(FileEntry.for_name(child.name, child.size))
    return largest_first(directories), largest_first(files)


def resolve(root: DirectoryNode, path_segments: Sequence[str]) -> DirectoryListing:
    """List the directory at ``path_segments`` below ``root``.

    Each segment is matched by exact name against the current directory's
    children; when several children share a name the first one in export
    order is used. A missing segment, or one naming a file, yields a listing
    whose ``path`` is the resolved prefix and whose ``error`` names the
    full requested path. This function never raises for a bad path.
    """
    requested = list(path_segments)
    node = root
    for i, segment in enumerate(requested):
        child = node.find_child(segment)
        if not isinstance(child, DirectoryNode):
            return not_found_listing(requested, i)
        node = child

    directories, files = _entries(node.children)
    if requested:
        current = DirectoryEntry(name=node.name, size=node.size, item_count=len(node.children))
    else:
        # The root has no parent listing to take a size from
        current = DirectoryEntry(
            name=root.name,
            size=sum(d.size for d in directories) + sum(f.size for f in files),
            item_count=len(node.children),
        )

    return DirectoryListing(
        current=current,
        path=requested,
        directories=directories,
        files=files,
        total_items=len(directories) + len(files),
        error=EMPTY_DIRECTORY if not node.children else None,
    )
