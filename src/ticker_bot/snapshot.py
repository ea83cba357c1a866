"""In-memory ticker snapshot.

The snapshot is an immutable tuple that is swapped wholesale under a lock,
so a reader either gets the old list or the new one, never a mix.
"""

from __future__ import annotations

import threading
from typing import Iterable, Tuple

from .logging_utils import get_logger
from .models import Asset

log = get_logger("snapshot")


class SnapshotStore:
    def __init__(self, assets: Iterable[Asset] = ()):
        self._lock = threading.Lock()
        self._assets: Tuple[Asset, ...] = tuple(assets)

    def replace(self, assets: Iterable[Asset]) -> bool:
        """Install ``assets`` as the visible snapshot.

        An empty load is not an update: the previous snapshot stays and
        False is returned.
        """
        new = tuple(assets)
        if not new:
            log.info("snapshot_nothing_to_update kept=%d", len(self._assets))
            return False
        with self._lock:
            self._assets = new
        log.info("snapshot_replaced count=%d", len(new))
        return True

    def all(self) -> Tuple[Asset, ...]:
        with self._lock:
            return self._assets

    def __len__(self) -> int:
        return len(self.all())
