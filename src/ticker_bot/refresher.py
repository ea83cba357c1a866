"""Periodic reload of the full ticker list into the snapshot store.

Policy: the startup load (``load_initial``) raises on failure so the runner
can abort; every later tick logs the failure and waits for the next period,
leaving the current snapshot in place.

An empty startup list is not a failure: it is logged at WARNING as nothing to
update, the bot starts with an empty snapshot, and the next tick fills it.
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from .errors import FetchError
from .logging_utils import get_logger
from .models import Asset
from .snapshot import SnapshotStore

log = get_logger("refresher")


class Refresher:
    def __init__(
        self,
        store: SnapshotStore,
        fetch_list: Callable[[], List[Asset]],
        period_seconds: float = 300.0,
    ):
        self.store = store
        self._fetch_list = fetch_list
        self.period = float(period_seconds)
        self._task: Optional[asyncio.Task] = None
        self.failures = 0

    def load_initial(self) -> int:
        """Blocking first load. Raises ``FetchError`` on failure."""
        assets = self._fetch_list()
        if self.store.replace(assets):
            log.info("tickers_loaded count=%d initial=true", len(assets))
        else:
            log.warning("tickers_initial_load_empty nothing_to_update=true")
        return len(assets)

    def refresh_once(self) -> bool:
        """Run one tick. Returns True when the snapshot was replaced."""
        try:
            assets = self._fetch_list()
        except FetchError as e:
            self.failures += 1
            log.error(
                "tickers_refresh_failed kind=%s err=%s failures=%d",
                type(e).__name__,
                e,
                self.failures,
            )
            return False
        self.failures = 0
        replaced = self.store.replace(assets)
        if replaced:
            log.info("tickers_loaded count=%d", len(assets))
        return replaced

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.period)
            try:
                await asyncio.to_thread(self.refresh_once)
            except Exception:
                log.exception("tickers_refresh_crashed")

    def start(self) -> asyncio.Task:
        """Schedule ``run`` on the running loop and return its task."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name="ticker-refresher"
            )
            log.info("refresher_started period=%.0fs", self.period)
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        log.info("refresher_stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
