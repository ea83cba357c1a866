"""Turn a user query into an up-to-date asset.

Resolution runs in two stages. The snapshot (possibly minutes old) is only
used to find the asset id; the price data itself always comes from a fresh
single-ticker fetch.
"""

from __future__ import annotations

from typing import Callable

from .errors import FetchError, NotFound
from .logging_utils import get_logger
from .models import Asset
from .snapshot import SnapshotStore

log = get_logger("resolver")


class Resolver:
    def __init__(self, store: SnapshotStore, fetch_ticker: Callable[[str], Asset]):
        self.store = store
        self._fetch_ticker = fetch_ticker

    def identify(self, query: str) -> Asset:
        """First snapshot asset whose name or symbol equals ``query``, ignoring case."""
        for asset in self.store.all():
            if asset.matches(query):
                return asset
        raise NotFound(query)

    def fetch_fresh(self, asset: Asset) -> Asset:
        try:
            fresh = self._fetch_ticker(asset.id)
        except FetchError as e:
            log.warning(
                "ticker_fetch_failed id=%s kind=%s err=%s",
                asset.id,
                type(e).__name__,
                e,
            )
            raise
        return fresh.with_identity(asset)

    def resolve(self, query: str) -> Asset:
        return self.fetch_fresh(self.identify(query))
