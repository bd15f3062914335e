from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import requests

from ..types import Draw
from .base import DrawResultsFeed


def parse_uint(raw: Any, field: str) -> int:
    """Accept JSON ints or decimal / ``0x`` hex strings for 256-bit values."""
    if isinstance(raw, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        try:
            return int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError as exc:
            raise ValueError(f"{field} is not a valid integer: {raw!r}") from exc
    raise ValueError(f"{field} must be an integer or numeric string")


@dataclass(frozen=True)
class HttpJsonDrawFeedConfig:
    """Configuration describing how to parse the upstream JSON payload."""

    url: str
    winning_number_key: str = "winning_random_number"
    timestamp_key: str = "timestamp"
    prize_pool_key: str = "prize_pool"
    draws_key: str = "draws"
    timeout_seconds: int = 10


class HttpJsonDrawFeed(DrawResultsFeed):
    """Fetch settled draws from a JSON HTTP endpoint."""

    def __init__(self, config: HttpJsonDrawFeedConfig) -> None:
        self._config = config

    async def fetch_draws(self) -> Sequence[Draw]:
        response_json = await asyncio.to_thread(
            self._get_json, self._config.url, self._config.timeout_seconds
        )
        return self.parse_payload(response_json)

    @staticmethod
    def _get_json(url: str, timeout_seconds: int) -> Any:
        resp = requests.get(url, timeout=timeout_seconds)
        resp.raise_for_status()
        return resp.json()

    def parse_payload(self, payload: Any) -> Sequence[Draw]:
        cfg = self._config
        if isinstance(payload, Mapping):
            try:
                records = payload[cfg.draws_key]
            except KeyError as exc:
                raise ValueError(f"Missing draws field: {cfg.draws_key}") from exc
        else:
            records = payload
        if not isinstance(records, list):
            raise ValueError("draws field must be a list")
        return tuple(self._parse_draw(record) for record in records)

    def _parse_draw(self, record: Any) -> Draw:
        cfg = self._config
        if not isinstance(record, Mapping):
            raise ValueError("draw records must be objects")
        values = {}
        for key in (cfg.winning_number_key, cfg.timestamp_key, cfg.prize_pool_key):
            try:
                values[key] = parse_uint(record[key], key)
            except KeyError as exc:
                raise ValueError(f"Missing draw field: {key}") from exc
        return Draw(
            winning_random_number=values[cfg.winning_number_key],
            timestamp=values[cfg.timestamp_key],
            prize_pool=values[cfg.prize_pool_key],
        )
