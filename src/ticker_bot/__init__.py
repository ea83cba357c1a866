"""Ticker bot package.

A Discord bot that keeps the CoinMarketCap ticker list in memory, refreshed
on a timer, and answers ``!c <coin>`` commands in allow-listed channels with
a freshly fetched price embed, subject to a per-channel cooldown.
"""

__all__: list[str] = []
