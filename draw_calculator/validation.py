from __future__ import annotations

from .errors import (
    BitRangeTooLarge,
    DistributionsExceedWhole,
    MatchCardinalityTooSmall,
    PickCostNotPositive,
)
from .types import ETHER, RANDOM_NUMBER_BITS, DrawSettings


def validate_draw_settings(settings: DrawSettings) -> DrawSettings:
    """Check the structural rules a settings snapshot must meet to be installed.

    Checks run cheapest first so the reported error is deterministic: window
    layout, then pick cost, then the summed distributions.
    """
    cardinality = settings.match_cardinality
    if cardinality == 0 or cardinality < len(settings.distributions):
        raise MatchCardinalityTooSmall(
            f"match_cardinality {cardinality} must be at least 1 and not less than "
            f"the {len(settings.distributions)} configured distributions"
        )
    if settings.bit_range_size > RANDOM_NUMBER_BITS // cardinality:
        raise BitRangeTooLarge(
            f"bit_range_size {settings.bit_range_size} x match_cardinality "
            f"{cardinality} exceeds {RANDOM_NUMBER_BITS} bits"
        )
    if settings.pick_cost <= 0:
        raise PickCostNotPositive("pick_cost must be greater than zero")

    total = sum(settings.distributions)
    if total > ETHER:
        raise DistributionsExceedWhole(
            f"distributions sum to {total}, more than {ETHER}"
        )
    return settings
