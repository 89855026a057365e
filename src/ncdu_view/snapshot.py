"""
Loaded-export snapshots and the store that refreshes them.

A Snapshot bundles everything derived from one export file (summary,
canonical tree, path index). It is never mutated; a refresh builds a new
one and swaps the store's reference, so a reader holding a snapshot keeps
a consistent view for as long as it needs it.
"""
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from .decoder import decode
from .exceptions import FormatError, SnapshotUnavailableError
from .index import PathIndex, build_index
from .models import ExportSummary
from .nodes import DirectoryNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    summary: ExportSummary
    root: DirectoryNode
    index: PathIndex
    loaded_at: datetime
    source: Optional[str] = None


def build_snapshot(raw_text: Union[str, bytes], source: Optional[str] = None) -> Snapshot:
    """Decode an export and index it. Raises FormatError on a malformed export."""
    summary, root = decode(raw_text)
    index = build_index(root)
    return Snapshot(
        summary=summary,
        root=root,
        index=index,
        loaded_at=datetime.now(timezone.utc),
        source=source,
    )


class SnapshotStore:
    """Holds the current snapshot of an export file and reloads it when stale.

    A failed reload keeps serving the previous snapshot and leaves the
    refresh time untouched, so the next request tries again.
    """

    def __init__(self, export_path: Union[str, Path], refresh_interval_seconds: float = 3 * 3600,
                 clock: Callable[[], float] = time.monotonic):
        self.export_path = Path(export_path)
        self.refresh_interval_seconds = refresh_interval_seconds
        self._clock = clock
        self._snapshot: Optional[Snapshot] = None
        self._last_refresh: Optional[float] = None
        self._load_lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def is_stale(self) -> bool:
        if self._snapshot is None or self._last_refresh is None:
            return True
        return self._clock() - self._last_refresh > self.refresh_interval_seconds

    def current(self) -> Snapshot:
        """Return the published snapshot, refreshing it first if it is stale.

        Raises SnapshotUnavailableError when nothing has ever loaded.
        """
        if self.is_stale():
            self._refresh_if_stale()
        snapshot = self._snapshot
        if snapshot is None:
            raise SnapshotUnavailableError(
                f"Export data could not be loaded from {self.export_path}",
                context={"export_path": str(self.export_path)},
            )
        return snapshot

    def reload(self) -> Snapshot:
        """Load the export now, regardless of staleness.

        Errors propagate to the caller; the previous snapshot stays published.
        """
        with self._load_lock:
            return self._load()

    def _refresh_if_stale(self) -> None:
        # Readers that already have data never wait on a refresh in progress
        blocking = self._snapshot is None
        if not self._load_lock.acquire(blocking=blocking):
            return
        try:
            if not self.is_stale():
                return
            try:
                self._load()
            except (OSError, FormatError) as e:
                if self._snapshot is None:
                    logger.error(f"Failed to load export {self.export_path}: {e}")
                else:
                    logger.error(f"Failed to refresh export {self.export_path}, keeping previous data: {e}")
        finally:
            self._load_lock.release()

    def _load(self) -> Snapshot:
        logger.info(f"Reading export data from {self.export_path}")
        started = self._clock()
        raw = self.export_path.read_bytes()
        snapshot = build_snapshot(raw, source=str(self.export_path))
        self._snapshot = snapshot
        self._last_refresh = self._clock()
        logger.info(
            f"Export data refreshed: {len(snapshot.index)} directories indexed "
            f"in {self._last_refresh - started:.2f}s"
        )
        return snapshot
