"""Exception hierarchy for the ticker bot.

Everything raised on purpose by the bot derives from ``TickerBotError`` so
callers at the edges (runner, dispatcher, refresher) can catch one type.
Provider failures are grouped under ``FetchError``.
"""

from __future__ import annotations


class TickerBotError(Exception):
    """Base class for all ticker bot errors."""


class ConfigError(TickerBotError):
    """Startup configuration is missing or unusable."""


class NotFound(TickerBotError):
    """No asset in the snapshot matches the query."""

    def __init__(self, query: str):
        super().__init__(f"no asset matches {query!r}")
        self.query = query


class FetchError(TickerBotError):
    """The price provider could not deliver a usable answer."""


class TransportError(FetchError):
    """Connection, DNS or timeout failure."""


class StatusError(FetchError):
    def __init__(self, status_code: int, url: str):
        super().__init__(f"{url} returned {status_code}")
        self.status_code = status_code
        self.url = url


class DecodeError(FetchError):
    """Body was not JSON or did not have the expected shape."""


class CardinalityError(FetchError):
    def __init__(self, asset_id: str, count: int):
        super().__init__(f"expected 1 record for {asset_id!r}, got {count}")
        self.asset_id = asset_id
        self.count = count
