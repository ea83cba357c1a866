"""Chat command handling.

``Dispatcher.dispatch`` runs one inbound message through a fixed chain of
checks and stops at the first one that fails. Every stop is returned as an
``Outcome`` and logged; nothing is ever posted back to the channel on
failure.

Commands in the same channel are handled one at a time, so two commands
racing each other cannot both be answered inside one cooldown window.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from .cooldown import CooldownGate
from .embeds import build_ticker_embed
from .errors import FetchError, NotFound
from .logging_utils import get_logger
from .models import Asset
from .resolver import Resolver

log = get_logger("dispatcher")

DEFAULT_COMMANDS = ("!c", "!crypto")

SendFn = Callable[[str, Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class InboundMessage:
    channel_id: str
    author_id: str
    content: str
    # unix seconds; None means "now" according to the cooldown clock
    created_at: Optional[float] = None


class IgnoreReason(str, enum.Enum):
    CHANNEL = "channel_not_allowed"
    SHAPE = "not_two_tokens"
    COMMAND = "unknown_command"
    COOLDOWN = "cooldown"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class Outcome:
    sent: bool
    reason: Optional[IgnoreReason] = None
    asset: Optional[Asset] = None
    payload: Optional[Dict[str, Any]] = None
    send_error: Optional[str] = None

    @classmethod
    def ignored(cls, reason: IgnoreReason) -> "Outcome":
        return cls(sent=False, reason=reason)

    @classmethod
    def delivered(
        cls, asset: Asset, payload: Dict[str, Any], send_error: Optional[str] = None
    ) -> "Outcome":
        return cls(sent=True, asset=asset, payload=payload, send_error=send_error)


class Dispatcher:
    def __init__(
        self,
        channels: Iterable[str],
        gate: CooldownGate,
        resolver: Resolver,
        send: SendFn,
        commands: Iterable[str] = DEFAULT_COMMANDS,
    ):
        self.channels = frozenset(str(c) for c in channels)
        self.commands = frozenset(commands)
        self.gate = gate
        self.resolver = resolver
        self._send = send
        self._locks: Dict[str, asyncio.Lock] = {}

    def _channel_lock(self, channel: str) -> asyncio.Lock:
        lock = self._locks.get(channel)
        if lock is None:
            lock = self._locks[channel] = asyncio.Lock()
        return lock

    async def dispatch(self, msg: InboundMessage) -> Outcome:
        channel = msg.channel_id
        if channel not in self.channels:
            return Outcome.ignored(IgnoreReason.CHANNEL)

        tokens = msg.content.split()
        if len(tokens) != 2:
            return Outcome.ignored(IgnoreReason.SHAPE)

        command, query = tokens
        if command not in self.commands:
            return Outcome.ignored(IgnoreReason.COMMAND)

        # one command per channel from the cooldown check until it is recorded
        async with self._channel_lock(channel):
            return await self._answer(msg, query)

    async def _answer(self, msg: InboundMessage, query: str) -> Outcome:
        channel = msg.channel_id
        if not self.gate.allow(channel, msg.created_at):
            log.info("rate_limited channel=%s query=%s", channel, query)
            return Outcome.ignored(IgnoreReason.COOLDOWN)

        try:
            known = self.resolver.identify(query)
        except NotFound:
            log.info("ticker_not_found channel=%s query=%s", channel, query)
            return Outcome.ignored(IgnoreReason.NOT_FOUND)

        try:
            asset = await asyncio.to_thread(self.resolver.fetch_fresh, known)
        except FetchError:
            return Outcome.ignored(IgnoreReason.FETCH_FAILED)

        payload = build_ticker_embed(asset)
        send_error = None
        try:
            await self._send(channel, payload)
            log.info("ticker_sent channel=%s id=%s", channel, asset.id)
        except Exception as e:
            # the reply still counts against the cooldown
            send_error = str(e) or type(e).__name__
            log.error(
                "ticker_send_failed channel=%s id=%s err=%s",
                channel,
                asset.id,
                send_error,
                exc_info=True,
            )
        self.gate.record(channel, msg.created_at)
        return Outcome.delivered(asset, payload, send_error)
