"""Recursive size and file-count totals over the canonical tree."""
from .nodes import DirectoryNode, Node


def total_size(node: Node) -> int:
    """Sum of the sizes of every file below ``node``.

    Directory sizes declared by the export never contribute.
    """
    if not isinstance(node, DirectoryNode):
        return node.size

    total = 0
    stack = [node]
    while stack:
        curr = stack.pop()
        for child in curr.children:
            if isinstance(child, DirectoryNode):
                stack.append(child)
            else:
                total += child.size
    return total


def file_count(node: Node) -> int:
    """Number of files (not directories) at or below ``node``."""
    if not isinstance(node, DirectoryNode):
        return 1

    count = 0
    stack = [node]
    while stack:
        curr = stack.pop()
        for child in curr.children:
            if isinstance(child, DirectoryNode):
                stack.append(child)
            else:
                count += 1
    return count
