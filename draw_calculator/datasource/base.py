from __future__ import annotations

import abc
from typing import Sequence

from ..types import Draw


class DrawResultsFeed(abc.ABC):
    """Abstract provider of settled draw results."""

    @abc.abstractmethod
    async def fetch_draws(self) -> Sequence[Draw]:
        """Return settled draws in the order they should be calculated.

        Implementations should raise `RuntimeError` or `ValueError` if
        remote data is unavailable or validation fails.
        """

    async def close(self) -> None:
        """Optional hook for connectors that require cleanup."""
        return None


class StaticDrawFeed(DrawResultsFeed):
    """Serves a fixed list of draws, e.g. loaded from a local file."""

    def __init__(self, draws: Sequence[Draw]) -> None:
        self._draws = tuple(draws)

    async def fetch_draws(self) -> Sequence[Draw]:
        return self._draws
