"""Discord gateway glue.

Requires the MESSAGE_CONTENT privileged intent to be enabled for the bot in
the Discord developer portal, otherwise ``message.content`` is empty and no
command is ever recognised.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import discord

from .cooldown import CooldownGate
from .dispatcher import DEFAULT_COMMANDS, Dispatcher, InboundMessage, Outcome
from .logging_utils import get_logger
from .refresher import Refresher
from .resolver import Resolver

log = get_logger("discord_client")


class TickerClient(discord.Client):
    def __init__(
        self,
        *,
        channels: Iterable[str],
        gate: CooldownGate,
        resolver: Resolver,
        refresher: Optional[Refresher] = None,
        commands: Iterable[str] = DEFAULT_COMMANDS,
        **kwargs: Any,
    ):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.messages = True
        super().__init__(intents=intents, **kwargs)

        self.refresher = refresher
        self.ticker_dispatcher = Dispatcher(
            channels, gate, resolver, self.send_embed, commands
        )

    async def setup_hook(self) -> None:
        if self.refresher is not None:
            self.refresher.start()

    async def on_ready(self) -> None:
        log.info(
            "discord_ready user=%s channels=%s",
            self.user,
            ",".join(sorted(self.ticker_dispatcher.channels)),
        )

    async def on_message(self, message: discord.Message) -> Optional[Outcome]:
        if self.user is not None and message.author.id == self.user.id:
            return None
        event = InboundMessage(
            channel_id=str(message.channel.id),
            author_id=str(message.author.id),
            content=message.content or "",
        )
        return await self.ticker_dispatcher.dispatch(event)

    async def send_embed(self, channel_id: str, payload: Dict[str, Any]) -> None:
        channel = self.get_channel(int(channel_id))
        if channel is None:
            channel = await self.fetch_channel(int(channel_id))
        await channel.send(embed=discord.Embed.from_dict(payload))

    async def close(self) -> None:
        if self.refresher is not None:
            await self.refresher.stop()
        await super().close()
