"""Asset records as returned by the CoinMarketCap v1 ticker API.

The provider sends every value as a decimal string. ``Asset`` keeps those
strings untouched and offers optional parsed views for presentation; a view
is ``None`` whenever the source string does not parse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .errors import DecodeError

# attribute name -> provider JSON key
_WIRE_KEYS: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "symbol": "symbol",
    "rank": "rank",
    "price_usd": "price_usd",
    "price_btc": "price_btc",
    "market_cap_usd": "market_cap_usd",
    "change_1h": "percent_change_1h",
    "change_24h": "percent_change_24h",
    "change_7d": "percent_change_7d",
    "last_updated": "last_updated",
}


def _float_opt(raw: str) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise DecodeError(f"unexpected value type {type(value).__name__}")


@dataclass(frozen=True)
class Asset:
    id: str
    name: str = ""
    symbol: str = ""
    rank: str = ""
    price_usd: str = ""
    price_btc: str = ""
    market_cap_usd: str = ""
    change_1h: str = ""
    change_24h: str = ""
    change_7d: str = ""
    last_updated: str = ""

    @classmethod
    def from_json(cls, record: Any) -> "Asset":
        """Build an asset from one provider record.

        Raises ``DecodeError`` when the record is not an object or has no
        usable ``id``. Missing or ``null`` fields become empty strings.
        """
        if not isinstance(record, Mapping):
            raise DecodeError(f"expected an object, got {type(record).__name__}")
        asset_id = record.get("id")
        if not isinstance(asset_id, str) or not asset_id.strip():
            raise DecodeError("record has no id")
        values = {attr: _text(record.get(key)) for attr, key in _WIRE_KEYS.items()}
        values["id"] = asset_id.strip()
        return cls(**values)

    def with_identity(self, known: "Asset") -> "Asset":
        """Fill blank name/symbol from an earlier record of the same asset."""
        if self.name and self.symbol:
            return self
        return replace(
            self,
            name=self.name or known.name,
            symbol=self.symbol or known.symbol,
        )

    def matches(self, query: str) -> bool:
        q = query.strip().casefold()
        if not q:
            return False
        return self.name.casefold() == q or self.symbol.casefold() == q

    @property
    def market_cap(self) -> Optional[int]:
        value = _float_opt(self.market_cap_usd)
        return None if value is None else int(value)

    @property
    def pct_1h(self) -> Optional[float]:
        return _float_opt(self.change_1h)

    @property
    def pct_24h(self) -> Optional[float]:
        return _float_opt(self.change_24h)

    @property
    def pct_7d(self) -> Optional[float]:
        return _float_opt(self.change_7d)

    @property
    def updated_at(self) -> Optional[datetime]:
        stamp = _float_opt(self.last_updated)
        if stamp is None:
            return None
        try:
            return datetime.fromtimestamp(stamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
