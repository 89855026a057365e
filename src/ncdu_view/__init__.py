from .decoder import decode
from .aggregate import total_size, file_count
from .resolver import resolve, split_path
from .index import PathIndex, build_index
from .formatting import format_size
from .snapshot import Snapshot, SnapshotStore, build_snapshot
from .exceptions import FormatError, NcduViewException

__all__ = [
    "decode",
    "total_size",
    "file_count",
    "resolve",
    "split_path",
    "PathIndex",
    "build_index",
    "format_size",
    "Snapshot",
    "SnapshotStore",
    "build_snapshot",
    "FormatError",
    "NcduViewException",
]
