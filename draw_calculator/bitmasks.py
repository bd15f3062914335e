from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from .types import DrawSettings


@lru_cache(maxsize=64)
def create_bit_masks(bit_range_size: int, match_cardinality: int) -> Tuple[int, ...]:
    """Return ``match_cardinality`` adjacent windows of ``bit_range_size`` bits.

    Window ``i`` covers bits ``[i * bit_range_size, (i + 1) * bit_range_size)``,
    so the least significant window comes first. Callers pass validated
    settings; nothing here checks that the windows fit in 256 bits.
    """
    window = (1 << bit_range_size) - 1
    return tuple(window << (i * bit_range_size) for i in range(match_cardinality))


def masks_for(settings: DrawSettings) -> Tuple[int, ...]:
    return create_bit_masks(settings.bit_range_size, settings.match_cardinality)
