# src/ncdu_view/decoder.py
"""
Decoder for ncdu JSON exports.

Two layouts of the same export are accepted and normalized into one
canonical tree of DirectoryNode/FileNode objects:

Flagged-item export (object at the top level):
    {"ver": 2, "prog": {"progname": "ncdu", "timestamp": 1700000000},
     "rootPath": "/home", "fsinfo": {"blocks": ..., "bsize": 4096, ...},
     "root": [{"name": "user1", "dsize": 1000, "flags": 1, "items": [...]},
              {"name": "f.txt", "asize": 10, "flags": 4}]}

    Flag bits: 1 = directory, 4 = file, 8 = error while reading.

Array-tuple export (array at the top level, ncdu's native ``-o`` format):
    [1, 2, {"progname": "ncdu", "timestamp": 1700000000},
     [{"name": "/home", "asize": 4096},
      [{"name": "user1", "dsize": 1000}, {"name": "a.bin", "asize": 900}],
      {"name": "f.txt", "asize": 10}]]

    A directory is an array whose first element is its own metadata; the
    remaining elements are nested directory arrays or file objects.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

import orjson

from .aggregate import file_count, total_size
from .exceptions import FormatError
from .models import ExportSummary
from .nodes import DirectoryNode, FileNode, Node

logger = logging.getLogger(__name__)

FLAGGED_ITEM = "flagged-item"
ARRAY_TUPLE = "array-tuple"

FLAG_DIRECTORY = 1
FLAG_ERROR = 8

DEFAULT_BLOCK_SIZE = 4096


def decode(raw_text: Union[str, bytes]) -> Tuple[ExportSummary, DirectoryNode]:
    """Parse export text and return its summary and canonical root directory.

    Raises FormatError when the text is not JSON or matches neither layout.
    """
    try:
        document = orjson.loads(raw_text)
    except orjson.JSONDecodeError as e:
        raise FormatError(f"Export is not valid JSON: {e}") from e
    return decode_document(document)


def detect_variant(document: Any) -> str:
    if isinstance(document, dict):
        return FLAGGED_ITEM
    if isinstance(document, list):
        return ARRAY_TUPLE
    raise FormatError(
        f"Unrecognized export: expected a JSON object or array at the top level, got {type(document).__name__}"
    )


def decode_document(document: Any) -> Tuple[ExportSummary, DirectoryNode]:
    """Decode an already-parsed JSON document."""
    variant = detect_variant(document)
    try:
        if variant == FLAGGED_ITEM:
            summary, root = _decode_flagged_export(document)
        else:
            summary, root = _decode_array_export(document)
    except RecursionError as e:
        raise FormatError("Export nesting is too deep to decode") from e

    logger.info(
        f"Decoded {variant} export rooted at '{summary.root_path}': "
        f"{summary.total_files} files, {summary.total_size} bytes"
    )
    return summary, root


# --- Shared helpers ---

def _require_name(item: Dict[str, Any], where: str) -> str:
    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise FormatError(f"Entry in '{where}' is missing a name", context={"entry": _preview(item)})
    return name


def _to_int(value: Any, field: str, where: str) -> int:
    if isinstance(value, bool):
        raise FormatError(f"Field '{field}' of '{where}' must be a number, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise FormatError(f"Field '{field}' of '{where}' must be a non-negative integer, got {value!r}")
    return value


def _resolve_size(item: Dict[str, Any], preferred: str, fallback: str, where: str) -> int:
    """First present of ``preferred``/``fallback``; 0 when neither is present."""
    for key in (preferred, fallback):
        value = item.get(key)
        if value is not None:
            return _to_int(value, key, where)
    return 0


def _directory_size(item: Dict[str, Any], where: str) -> int:
    return _resolve_size(item, "dsize", "asize", where)


def _file_size(item: Dict[str, Any], where: str) -> int:
    return _resolve_size(item, "asize", "dsize", where)


def _optional_int(source: Dict[str, Any], field: str, where: str) -> Optional[int]:
    value = source.get(field)
    if value is None:
        return None
    return _to_int(value, field, where)


def _scan_time(metadata: Dict[str, Any]) -> Optional[datetime]:
    timestamp = metadata.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        if timestamp is not None:
            logger.warning(f"Ignoring non-numeric scan timestamp {timestamp!r}")
        return None
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.warning(f"Ignoring out-of-range scan timestamp {timestamp!r}")
        return None


def _join(parent: str, name: str) -> str:
    return f"{parent.rstrip('/')}/{name}"


def _warn_duplicates(children: List[Node], where: str) -> None:
    seen = set()
    for child in children:
        if child.name in seen:
            logger.warning(f"Duplicate entry '{child.name}' in '{where}'; the first one wins for path lookups")
        seen.add(child.name)


def _preview(value: Any, limit: int = 120) -> str:
    text = repr(value)
    return text if len(text) <= limit else text[:limit] + "..."


# --- Flagged-item layout ---

def _decode_flagged_export(document: Dict[str, Any]) -> Tuple[ExportSummary, DirectoryNode]:
    if not document.get("ver"):
        raise FormatError("Flagged-item export is missing its 'ver' version marker")
    prog = document.get("prog")
    if not isinstance(prog, dict):
        raise FormatError("Flagged-item export is missing its 'prog' metadata")
    items = document.get("root")
    if not isinstance(items, list):
        raise FormatError("Flagged-item export is missing its 'root' item list")

    root_path = document.get("rootPath") or "/"
    if not isinstance(root_path, str):
        raise FormatError(f"'rootPath' must be a string, got {root_path!r}")

    children = [_convert_flagged_item(item, root_path) for item in items]
    _warn_duplicates(children, root_path)
    root = DirectoryNode(root_path, 0, children)

    fsinfo = document.get("fsinfo") or {}
    if not isinstance(fsinfo, dict):
        raise FormatError(f"'fsinfo' must be an object, got {_preview(fsinfo)}")
    blocks = _optional_int(fsinfo, "blocks", "fsinfo")
    bavail = _optional_int(fsinfo, "bavail", "fsinfo") or 0
    bsize = _optional_int(fsinfo, "bsize", "fsinfo") or DEFAULT_BLOCK_SIZE
    files = _optional_int(fsinfo, "files", "fsinfo")
    ffree = _optional_int(fsinfo, "ffree", "fsinfo") or 0

    summary = ExportSummary(
        root_path=root_path,
        total_size=blocks * bsize if blocks is not None else total_size(root),
        available_space=bavail * bsize,
        total_files=files if files is not None else file_count(root),
        max_files=files + ffree if files is not None else 0,
        scan_time=_scan_time(prog),
    )
    return summary, root


def _convert_flagged_item(item: Any, parent: str) -> Node:
    if not isinstance(item, dict):
        raise FormatError(f"Entry in '{parent}' must be an object, got {_preview(item)}")
    name = _require_name(item, parent)
    where = _join(parent, name)

    flags = item.get("flags", 0)
    if isinstance(flags, bool) or not isinstance(flags, int):
        raise FormatError(f"'flags' of '{where}' must be an integer, got {flags!r}")

    if not flags & FLAG_DIRECTORY:
        return FileNode(name, _file_size(item, where))

    read_error = bool(flags & FLAG_ERROR)
    raw_children = item.get("items")
    if raw_children is None:
        if not read_error:
            raise FormatError(f"Directory '{where}' has no 'items' list")
        logger.debug(f"Unreadable directory '{where}': {item.get('error', 'no details')}")
        raw_children = []
    if not isinstance(raw_children, list):
        raise FormatError(f"'items' of '{where}' must be a list, got {_preview(raw_children)}")

    children = [_convert_flagged_item(child, where) for child in raw_children]
    _warn_duplicates(children, where)
    return DirectoryNode(name, _directory_size(item, where), children, read_error=read_error)


# --- Array-tuple layout ---

def _decode_array_export(document: List[Any]) -> Tuple[ExportSummary, DirectoryNode]:
    if len(document) < 4:
        raise FormatError(
            f"Array export must have at least 4 elements "
            f"(major version, minor version, metadata, root), got {len(document)}"
        )
    major, _minor, metadata, root_entry = document[:4]
    if isinstance(major, bool) or not isinstance(major, int):
        raise FormatError(f"Array export must start with an integer format version, got {major!r}")
    if not isinstance(metadata, dict):
        raise FormatError(f"Array export metadata must be an object, got {_preview(metadata)}")
    if not isinstance(root_entry, list):
        raise FormatError(f"Array export root must be a directory array, got {_preview(root_entry)}")

    root = _convert_array_directory(root_entry, "")
    summary = ExportSummary(
        root_path=root.name,
        total_size=total_size(root),
        total_files=file_count(root),
        scan_time=_scan_time(metadata),
    )
    return summary, root


def _convert_array_directory(entry: List[Any], parent: str) -> DirectoryNode:
    if not entry or not isinstance(entry[0], dict):
        raise FormatError(f"Directory array in '{parent or '/'}' must start with a metadata object")
    metadata = entry[0]
    name = _require_name(metadata, parent or "/")
    where = _join(parent, name) if parent else name

    children: List[Node] = []
    for element in entry[1:]:
        if isinstance(element, list):
            children.append(_convert_array_directory(element, where))
        elif isinstance(element, dict):
            child_name = _require_name(element, where)
            children.append(FileNode(child_name, _file_size(element, _join(where, child_name))))
        else:
            raise FormatError(f"Unexpected element in '{where}': {_preview(element)}")

    _warn_duplicates(children, where)
    return DirectoryNode(
        name,
        _directory_size(metadata, where),
        children,
        read_error=bool(metadata.get("read_error")),
    )
