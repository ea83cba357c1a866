import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .errors import ConfigError

DEFAULT_CHANNELS = "322882023825997845,229807580367683584"
DEFAULT_LIST_URL = "https://api.coinmarketcap.com/v1/ticker/?limit=0"
DEFAULT_TICKER_URL = "https://api.coinmarketcap.com/v1/ticker/"


def _b(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {
        "1",
        "true",
        "yes",
        "y",
        "on",
    }


def _float(name: str, default: float) -> float:
    """Read a positive float from env, falling back to ``default``."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _csv(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        raw = default
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass
class Settings:
    # Channels the bot answers in. Anything else is ignored outright.
    channels: Tuple[str, ...] = field(
        default_factory=lambda: _csv("TICKER_CHANNELS", DEFAULT_CHANNELS)
    )

    # Accepted spellings of the lookup command, e.g. "!c BTC".
    commands: Tuple[str, ...] = field(
        default_factory=lambda: _csv("TICKER_COMMANDS", "!c,!crypto")
    )

    # Full ticker list reload period and per-channel reply cooldown.
    refresh_seconds: float = field(
        default_factory=lambda: _float("REFRESH_SECONDS", 300.0)
    )
    cooldown_seconds: float = field(
        default_factory=lambda: _float("COOLDOWN_SECONDS", 30.0)
    )

    # Provider endpoints. TICKER_URL gets "<id>/" appended.
    ticker_list_url: str = field(
        default_factory=lambda: os.getenv("TICKER_LIST_URL", DEFAULT_LIST_URL)
    )
    ticker_url: str = field(
        default_factory=lambda: os.getenv("TICKER_URL", DEFAULT_TICKER_URL)
    )
    http_timeout_seconds: float = field(
        default_factory=lambda: _float("HTTP_TIMEOUT_SECONDS", 10.0)
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_plain: bool = field(default_factory=lambda: _b("LOG_PLAIN", False))
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("DATA_DIR", "data")).resolve()
    )


SETTINGS = Settings()


def get_settings() -> Settings:
    return SETTINGS


def load_token(path: str) -> str:
    """Read the Discord bot token from a JSON file like ``{"token": "..."}``."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"config file {path} is not valid JSON: {e}") from e
    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise ConfigError(f"config file {path} has no token")
    return token.strip()
