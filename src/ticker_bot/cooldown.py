"""Per-channel reply cooldown.

Every allow-listed channel is seeded from the construction time, backdated by
one cooldown window, so the first command after startup is always served.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Iterable, Optional

from .logging_utils import get_logger

log = get_logger("cooldown")


class CooldownGate:
    def __init__(
        self,
        channels: Iterable[str],
        cooldown_seconds: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self.cooldown = float(cooldown_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        started = clock() - self.cooldown
        self._last: Dict[str, float] = {str(c): started for c in channels}

    def allow(self, channel: str, now: Optional[float] = None) -> bool:
        """True when at least ``cooldown`` seconds passed since the last reply.

        Does not record anything; see ``record``.
        """
        now = self._clock() if now is None else now
        with self._lock:
            last = self._last.get(channel)
        if last is None:
            return True
        return now - last >= self.cooldown

    def record(self, channel: str, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        with self._lock:
            self._last[channel] = now
        log.debug("cooldown_recorded channel=%s ts=%.3f", channel, now)

    def last_served(self, channel: str) -> Optional[float]:
        with self._lock:
            return self._last.get(channel)
