import logging
import threading
from typing import Callable, Optional

from aizer.core.exceptions import AizerError
from aizer.modules.hierarchy.schemas import Snapshot

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[str], Snapshot]


class SnapshotHolder:
    """Caller-held snapshot for one presentation context.

    ``load`` replaces the snapshot atomically on success and keeps the
    previous one on failure. A load whose result arrives after ``close()`` or
    after a newer load started (group switch, reload after a mutation) is
    discarded instead of applied.
    """

    def __init__(self, loader: SnapshotLoader):
        self._loader = loader
        self._lock = threading.Lock()
        self._generation = 0
        self._closed = False
        self.snapshot: Optional[Snapshot] = None
        self.last_error: Optional[AizerError] = None

    @property
    def group_id(self) -> Optional[str]:
        return self.snapshot.group_id if self.snapshot else None

    def load(self, group_id: str) -> Optional[Snapshot]:
        with self._lock:
            if self._closed:
                return None
            self._generation += 1
            generation = self._generation

        try:
            snapshot = self._loader(group_id)
        except AizerError as e:
            logger.error("Error fetching data for group %s: %s", group_id, e)
            with self._lock:
                if generation == self._generation and not self._closed:
                    self.last_error = e
            raise

        with self._lock:
            if self._closed or generation != self._generation:
                logger.debug("Discarding stale snapshot for group %s", group_id)
                return None
            self.snapshot = snapshot
            self.last_error = None
            return snapshot

    def reload(self) -> Optional[Snapshot]:
        """Full re-fetch of the current group (after any create/edit/delete/move)."""
        if self.group_id is None:
            return None
        return self.load(self.group_id)

    def close(self) -> None:
        with self._lock:
            self._closed = True
