from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

ETHER = 10**18
RANDOM_NUMBER_BITS = 256
MAX_UINT256 = (1 << RANDOM_NUMBER_BITS) - 1
MAX_UINT96 = (1 << 96) - 1


def _require_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    return value


@dataclass(frozen=True)
class DrawSettings:
    """Prize configuration applied to every draw calculated with it.

    ``distributions`` holds fixed-point weights (1e18 == 100%) with the grand
    prize at index 0. Structural rules (window fit, summed weights, pick cost)
    are enforced by :func:`draw_calculator.validation.validate_draw_settings`.
    """

    bit_range_size: int
    match_cardinality: int
    pick_cost: int
    distributions: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        bit_range_size = _require_int("bit_range_size", self.bit_range_size)
        if not 1 <= bit_range_size <= 255:
            raise ValueError("bit_range_size must be between 1 and 255")
        if _require_int("match_cardinality", self.match_cardinality) < 0:
            raise ValueError("match_cardinality must not be negative")
        _require_int("pick_cost", self.pick_cost)

        distributions = tuple(self.distributions)
        for value in distributions:
            if _require_int("distributions entry", value) < 0:
                raise ValueError("distributions entries must not be negative")
        # Frozen dataclass: normalise list input to a tuple in place.
        object.__setattr__(self, "distributions", distributions)

    def to_dict(self) -> dict:
        return {
            "bit_range_size": self.bit_range_size,
            "match_cardinality": self.match_cardinality,
            "pick_cost": str(self.pick_cost),
            "distributions": [str(d) for d in self.distributions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DrawSettings":
        return cls(
            bit_range_size=int(data["bit_range_size"]),
            match_cardinality=int(data["match_cardinality"]),
            pick_cost=int(data["pick_cost"]),
            distributions=tuple(int(d) for d in data["distributions"]),
        )


@dataclass(frozen=True)
class VersionedDrawSettings:
    version: int
    settings: DrawSettings


@dataclass(frozen=True)
class Draw:
    """One settled draw as reported by the results feed."""

    winning_random_number: int
    timestamp: int
    prize_pool: int

    def __post_init__(self) -> None:
        winning = _require_int("winning_random_number", self.winning_random_number)
        if not 0 <= winning <= MAX_UINT256:
            raise ValueError("winning_random_number must fit in 256 bits")
        if _require_int("timestamp", self.timestamp) < 0:
            raise ValueError("timestamp must not be negative")
        if _require_int("prize_pool", self.prize_pool) < 0:
            raise ValueError("prize_pool must not be negative")


@dataclass(frozen=True)
class DrawPrize:
    awarded: int
    total_user_picks: int
    prize_fraction: int
    tier_counts: Sequence[int]
