from typing import Any, Dict, List, Optional, Union


class DirectoryNode:
    """A directory in the canonical tree decoded from an ncdu export.

    ``size`` is the size declared by the export. It is not checked against
    the children; see ``ncdu_view.aggregate.total_size`` for the recursive figure.
    """
    is_directory = True

    def __init__(self, name: str, size: int = 0, children: Optional[List["Node"]] = None,
                 read_error: bool = False):
        self.name = name
        self.size = size
        self.children: List[Node] = children if children is not None else []
        # Set when the scanner could not read this directory's contents
        self.read_error = read_error

    def find_child(self, name: str) -> Optional["Node"]:
        """Return the first child called ``name`` in export order."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def to_dict(self, recursive=True, max_depth=None):
        """Converts the directory node to a dictionary representation."""
        result: Dict[str, Any] = {
            'name': self.name,
            'size': self.size,
            'is_directory': True,
        }
        if max_depth is not None and max_depth == 0:
            return result

        result['children'] = []
        if recursive:
            for child in self.children:
                result['children'].append(child.to_dict(
                    recursive=True,
                    max_depth=max_depth - 1 if max_depth is not None else None,
                ))
        return result

    def __repr__(self):
        return f"DirectoryNode(name={self.name!r}, size={self.size}, children={len(self.children)})"


class FileNode:
    """A regular file (or any non-directory item) in the canonical tree."""
    is_directory = False

    def __init__(self, name: str, size: int = 0):
        self.name = name
        self.size = size

    def to_dict(self, recursive=True, max_depth=None):
        return {
            'name': self.name,
            'size': self.size,
            'is_directory': False,
        }

    def __repr__(self):
        return f"FileNode(name={self.name!r}, size={self.size})"


Node = Union[DirectoryNode, FileNode]
