from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _require_env(key: str) -> str:
    value = os.getenv(key)
    if value is None or value == "":
        raise RuntimeError(f"Missing required environment variable: {key}")
    return value


@dataclass(frozen=True)
class FeedSettings:
    url: str
    winning_number_key: str = "winning_random_number"
    timestamp_key: str = "timestamp"
    prize_pool_key: str = "prize_pool"
    draws_key: str = "draws"
    timeout_seconds: int = 10


@dataclass(frozen=True)
class TicketSettings:
    address: str
    abi_path: Optional[str] = None


@dataclass(frozen=True)
class CalculatorSettings:
    rpc_url: str
    settings_state_file: str = "draw_settings.json"
    ticket: TicketSettings = TicketSettings(address="0x" + "0" * 40)
    feed: FeedSettings = FeedSettings(url="")

    def copy(self, **updates) -> "CalculatorSettings":
        return replace(self, **updates)


def load_from_environment() -> CalculatorSettings:
    rpc_url = _require_env("RPC_URL")

    ticket = TicketSettings(
        address=os.getenv("TICKET__ADDRESS", "0x" + "0" * 40),
        abi_path=os.getenv("TICKET__ABI_PATH") or None,
    )

    feed = FeedSettings(
        url=os.getenv("FEED__URL", ""),
        winning_number_key=os.getenv("FEED__WINNING_NUMBER_KEY", "winning_random_number"),
        timestamp_key=os.getenv("FEED__TIMESTAMP_KEY", "timestamp"),
        prize_pool_key=os.getenv("FEED__PRIZE_POOL_KEY", "prize_pool"),
        draws_key=os.getenv("FEED__DRAWS_KEY", "draws"),
        timeout_seconds=_int_from_env(os.getenv("FEED__TIMEOUT_SECONDS"), 10),
    )

    return CalculatorSettings(
        rpc_url=rpc_url,
        settings_state_file=os.getenv("SETTINGS_STATE_FILE", "draw_settings.json"),
        ticket=ticket,
        feed=feed,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> CalculatorSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
