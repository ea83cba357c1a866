"""Discord embed payload for a ticker reply.

The payload is a plain dict in Discord's embed JSON shape so it can be
inspected in tests and handed to ``discord.Embed.from_dict`` at send time.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .models import Asset

EMBED_TITLE = "Coin Market Cap"
CURRENCY_URL = "https://coinmarketcap.com/currencies/{id}/"
ICON_URL = "https://files.coinmarketcap.com/static/img/coins/32x32/{id}.png"

COLOR_UP = 0x16C784
COLOR_DOWN = 0xEA3943


def _field(name: str, value: str, inline: bool = False) -> Dict[str, Any]:
    return {"name": name, "value": value, "inline": inline}


def _fmt_pct(value: float) -> str:
    return f"{value:.2f}%"


def _color_for(change: Optional[float]) -> Optional[int]:
    if change is None:
        return None
    return COLOR_UP if change >= 0 else COLOR_DOWN


def build_ticker_embed(asset: Asset) -> Dict[str, Any]:
    """Build the reply embed for ``asset``.

    Rank and prices are always shown as the provider sent them. Market cap
    and percent changes only appear when they parse as numbers.
    """
    fields: List[Dict[str, Any]] = [
        _field("Coin Market Cap Rank", f"#{asset.rank}"),
        _field("Price USD", f"${asset.price_usd}", inline=True),
        _field("Price BTC", f"{asset.price_btc} BTC", inline=True),
    ]

    cap = asset.market_cap
    if cap is not None:
        fields.append(_field("Market Cap", f"${cap:,}"))

    for label, value in (
        ("Percent Change 1 hour", asset.pct_1h),
        ("Percent Change 24 hours", asset.pct_24h),
        ("Percent Change 7 days", asset.pct_7d),
    ):
        if value is not None:
            fields.append(_field(label, _fmt_pct(value), inline=True))

    embed: Dict[str, Any] = {
        "title": EMBED_TITLE,
        "url": CURRENCY_URL.format(id=asset.id),
        "author": {
            "name": f"{asset.name} ({asset.symbol})",
            "icon_url": ICON_URL.format(id=asset.id),
        },
        "fields": fields,
    }

    color = _color_for(asset.pct_24h)
    if color is not None:
        embed["color"] = color

    updated = asset.updated_at
    if updated is not None:
        embed["timestamp"] = updated.isoformat()

    return embed
