"""CoinMarketCap v1 ticker client.

Two calls are used: the full ticker list (refreshed periodically) and a
single ticker by id (fetched per command). Both raise a ``FetchError``
subclass on any failure instead of returning partial data.
"""

from __future__ import annotations

from typing import Any, List, Optional
from urllib.parse import quote

import requests

from .config import DEFAULT_LIST_URL, DEFAULT_TICKER_URL, Settings
from .errors import CardinalityError, DecodeError, StatusError, TransportError
from .logging_utils import get_logger
from .models import Asset

log = get_logger("provider")

USER_AGENT = "ticker-bot/1.0 (+https://coinmarketcap.com)"


class CoinMarketCapClient:
    def __init__(
        self,
        list_url: str = DEFAULT_LIST_URL,
        ticker_url: str = DEFAULT_TICKER_URL,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.list_url = list_url
        self.ticker_url = ticker_url if ticker_url.endswith("/") else ticker_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CoinMarketCapClient":
        return cls(
            settings.ticker_list_url,
            settings.ticker_url,
            timeout=settings.http_timeout_seconds,
        )

    def _get_json(self, url: str) -> Any:
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e
        if not 200 <= r.status_code < 300:
            raise StatusError(r.status_code, url)
        try:
            return r.json()
        except ValueError as e:
            raise DecodeError(f"{url} returned invalid JSON: {e}") from e

    def _get_assets(self, url: str) -> List[Asset]:
        payload = self._get_json(url)
        if not isinstance(payload, list):
            raise DecodeError(
                f"{url} returned {type(payload).__name__}, expected a list"
            )
        return [Asset.from_json(rec) for rec in payload]

    def fetch_list(self) -> List[Asset]:
        """Return every ticker the provider knows about, in rank order."""
        assets = self._get_assets(self.list_url)
        log.debug("provider_list_fetched count=%d", len(assets))
        return assets

    def fetch_ticker(self, asset_id: str) -> Asset:
        """Return the current record for ``asset_id``.

        The endpoint answers with a list; anything other than exactly one
        element raises ``CardinalityError``.
        """
        url = f"{self.ticker_url}{quote(asset_id, safe='')}/"
        assets = self._get_assets(url)
        if len(assets) != 1:
            raise CardinalityError(asset_id, len(assets))
        return assets[0]

    def close(self) -> None:
        self.session.close()
