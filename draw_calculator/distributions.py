from __future__ import annotations

from .types import DrawSettings


def number_of_prizes_for_tier(settings: DrawSettings, tier_index: int) -> int:
    """Count of equally likely outcomes that land exactly in ``tier_index``."""
    return (1 << settings.bit_range_size) ** tier_index


def calculate_prize_distribution_fraction(settings: DrawSettings, tier_index: int) -> int:
    """Return the fixed-point share of the prize pool paid per winner in a tier.

    The configured tier weight is split across every outcome of that tier,
    truncating toward zero. Deep tiers with wide bit ranges lose precision
    here; the remainder stays unclaimed.

    Raises
    ------
    IndexError
        If ``tier_index`` has no configured distribution.
    """
    if tier_index < 0 or tier_index >= len(settings.distributions):
        raise IndexError(
            f"tier index {tier_index} outside distributions "
            f"(length {len(settings.distributions)})"
        )
    weight = settings.distributions[tier_index]
    return weight // number_of_prizes_for_tier(settings, tier_index)
