# -*- coding: utf-8 -*-
"""Ticker bot runner.

Usage: ``python -m ticker_bot.runner config.json``
"""

from __future__ import annotations

# stdlib
import argparse
import asyncio
import signal
import sys
from typing import List, Set

# Load .env early so config is available to subsequent imports.
from dotenv import load_dotenv

load_dotenv()

import discord  # noqa: E402

from .config import get_settings, load_token  # noqa: E402
from .cooldown import CooldownGate  # noqa: E402
from .discord_client import TickerClient  # noqa: E402
from .errors import ConfigError, FetchError  # noqa: E402
from .logging_utils import get_logger, setup_logging  # noqa: E402
from .provider import CoinMarketCapClient  # noqa: E402
from .refresher import Refresher  # noqa: E402
from .resolver import Resolver  # noqa: E402
from .snapshot import SnapshotStore  # noqa: E402

log = get_logger("runner")

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

# close() tasks scheduled from signal handlers; the loop only keeps weak refs
_pending_closes: Set[asyncio.Task] = set()


def _install_signal_handlers(client: TickerClient) -> List[int]:
    loop = asyncio.get_running_loop()

    def _on_signal(signum: int) -> None:
        log.warning("shutdown_signal_received signal=%s", signal.Signals(signum).name)
        task = loop.create_task(client.close())
        _pending_closes.add(task)
        task.add_done_callback(_pending_closes.discard)

    installed = []
    for signum in _SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(signum, _on_signal, signum)
        except (NotImplementedError, RuntimeError):
            # Windows event loops do not support add_signal_handler
            continue
        installed.append(signum)
    return installed


async def serve(client: TickerClient, token: str) -> int:
    installed = _install_signal_handlers(client)
    try:
        async with client:
            await client.start(token)
    except discord.LoginFailure as e:
        log.critical("discord_login_failed err=%s", e)
        return 1
    finally:
        loop = asyncio.get_running_loop()
        for signum in installed:
            loop.remove_signal_handler(signum)
    log.info("shutdown_complete")
    return 0


def runner_main(config_path: str) -> int:
    settings = get_settings()
    setup_logging()

    try:
        token = load_token(config_path)
    except ConfigError as e:
        log.critical("config_invalid err=%s", e)
        return 1

    log.info(
        "boot_start channels=%d refresh=%.0fs cooldown=%.0fs",
        len(settings.channels),
        settings.refresh_seconds,
        settings.cooldown_seconds,
    )

    provider = CoinMarketCapClient.from_settings(settings)
    store = SnapshotStore()
    refresher = Refresher(store, provider.fetch_list, settings.refresh_seconds)
    try:
        refresher.load_initial()
    except FetchError as e:
        log.critical("initial_load_failed kind=%s err=%s", type(e).__name__, e)
        provider.close()
        return 1

    client = TickerClient(
        channels=settings.channels,
        gate=CooldownGate(settings.channels, settings.cooldown_seconds),
        resolver=Resolver(store, provider.fetch_ticker),
        refresher=refresher,
        commands=settings.commands,
    )
    try:
        return asyncio.run(serve(client, token))
    except KeyboardInterrupt:
        return 0
    finally:
        provider.close()


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="ticker-bot",
        description="Discord bot answering !c <coin> with CoinMarketCap data",
    )
    ap.add_argument("config", help='JSON file holding {"token": "<discord bot token>"}')
    args = ap.parse_args(argv)
    return runner_main(args.config)


if __name__ == "__main__":
    sys.exit(main())
