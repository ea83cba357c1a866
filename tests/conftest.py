import pytest

from ticker_bot.models import Asset


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bitcoin():
    return Asset(id="bitcoin", name="Bitcoin", symbol="BTC", rank="1")


@pytest.fixture
def ethereum():
    return Asset(id="ethereum", name="Ethereum", symbol="ETH", rank="2")


@pytest.fixture
def cmc_record():
    """One record in the CoinMarketCap v1 wire format."""
    return {
        "id": "bitcoin",
        "name": "Bitcoin",
        "symbol": "BTC",
        "rank": "1",
        "price_usd": "17392.1",
        "price_btc": "1.0",
        "24h_volume_usd": "14513000000.0",
        "market_cap_usd": "291117582530",
        "available_supply": "16738200.0",
        "total_supply": "16738200.0",
        "percent_change_1h": "0.53",
        "percent_change_24h": "4.17",
        "percent_change_7d": "-0.62",
        "last_updated": "1513287863",
    }
