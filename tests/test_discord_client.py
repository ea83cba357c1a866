from types import SimpleNamespace

import discord
import pytest

from ticker_bot.cooldown import CooldownGate
from ticker_bot.discord_client import TickerClient
from ticker_bot.dispatcher import IgnoreReason
from ticker_bot.models import Asset
from ticker_bot.refresher import Refresher
from ticker_bot.resolver import Resolver
from ticker_bot.snapshot import SnapshotStore


class FakeChannel:
    def __init__(self):
        self.embeds = []

    async def send(self, *, embed):
        self.embeds.append(embed)


def _message(content, channel_id=1, author_id=42):
    return SimpleNamespace(
        content=content,
        channel=SimpleNamespace(id=channel_id),
        author=SimpleNamespace(id=author_id),
    )


@pytest.fixture
def client(clock, bitcoin):
    resolver = Resolver(
        SnapshotStore([bitcoin]),
        lambda asset_id: Asset(id=asset_id, price_usd="50000", change_24h="2.5"),
    )
    return TickerClient(
        channels=["1"],
        gate=CooldownGate(["1"], cooldown_seconds=30, clock=clock),
        resolver=resolver,
    )


def test_message_content_intent_enabled(client):
    assert client.intents.message_content is True


@pytest.mark.asyncio
async def test_on_message_sends_embed_to_origin_channel(client, monkeypatch):
    channel = FakeChannel()
    monkeypatch.setattr(client, "get_channel", lambda cid: channel if cid == 1 else None)

    outcome = await client.on_message(_message("!c btc"))

    assert outcome.sent is True
    assert len(channel.embeds) == 1
    embed = channel.embeds[0]
    assert isinstance(embed, discord.Embed)
    assert embed.title == "Coin Market Cap"
    assert embed.author.name == "Bitcoin (BTC)"
    assert embed.fields[1].name == "Price USD"
    assert embed.fields[1].value == "$50000"


@pytest.mark.asyncio
async def test_on_message_ignores_other_channels(client, monkeypatch):
    monkeypatch.setattr(client, "get_channel", lambda cid: pytest.fail("no send expected"))
    outcome = await client.on_message(_message("!c btc", channel_id=2))
    assert outcome.reason is IgnoreReason.CHANNEL


@pytest.mark.asyncio
async def test_on_message_skips_own_messages(client, monkeypatch):
    monkeypatch.setattr(TickerClient, "user", property(lambda self: SimpleNamespace(id=42)))
    monkeypatch.setattr(client, "get_channel", lambda cid: pytest.fail("no send expected"))

    assert await client.on_message(_message("!c btc", author_id=42)) is None


@pytest.mark.asyncio
async def test_send_embed_falls_back_to_fetch_channel(client, monkeypatch):
    channel = FakeChannel()
    fetched = []

    async def _fetch_channel(cid):
        fetched.append(cid)
        return channel

    monkeypatch.setattr(client, "get_channel", lambda cid: None)
    monkeypatch.setattr(client, "fetch_channel", _fetch_channel)

    outcome = await client.on_message(_message("!c btc"))

    assert outcome.sent is True
    assert fetched == [1]
    assert len(channel.embeds) == 1
    assert channel.embeds[0].title == "Coin Market Cap"


@pytest.mark.asyncio
async def test_setup_hook_starts_refresher_and_close_stops_it(clock, bitcoin):
    store = SnapshotStore([bitcoin])
    refresher = Refresher(store, lambda: [bitcoin], period_seconds=3600)
    client = TickerClient(
        channels=["1"],
        gate=CooldownGate(["1"], cooldown_seconds=30, clock=clock),
        resolver=Resolver(store, lambda asset_id: bitcoin),
        refresher=refresher,
    )

    await client.setup_hook()
    assert refresher.running is True

    await client.close()
    assert refresher.running is False
    assert client.is_closed()
