from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Union

from eth_abi import encode
from eth_utils import keccak, to_canonical_address

from .bitmasks import masks_for
from .errors import PickOutOfRange
from .types import DrawSettings

HashFunction = Callable[[bytes], bytes]

logger = logging.getLogger("drawcalc.matching")


def keccak256(data: bytes) -> bytes:
    return keccak(primitive=data)


def _digest32(hash_fn: HashFunction, payload: bytes) -> bytes:
    digest = hash_fn(payload)
    if len(digest) != 32:
        raise ValueError(f"hash function must return 32 bytes, got {len(digest)}")
    return digest


def derive_user_seed(user: Union[str, bytes], hash_fn: HashFunction = keccak256) -> bytes:
    """Hash the packed 20-byte address of ``user`` into its 32-byte seed."""
    return _digest32(hash_fn, to_canonical_address(user))


def derive_pick_random_number(
    user_seed: bytes, pick: int, hash_fn: HashFunction = keccak256
) -> int:
    """Candidate random number for one pick: ``hash(abi.encode(seed, pick))``."""
    payload = encode(["bytes32", "uint256"], [user_seed, pick])
    return int.from_bytes(_digest32(hash_fn, payload), "big")


def count_matches(candidate: int, winning_random_number: int, masks: Iterable[int]) -> int:
    return sum(
        1 for mask in masks if candidate & mask == winning_random_number & mask
    )


def calculate_tier_index(
    candidate: int, winning_random_number: int, masks: Sequence[int]
) -> int:
    """Tier 0 means every window matched; each missed window drops one tier."""
    return len(masks) - count_matches(candidate, winning_random_number, masks)


def match_picks(
    winning_random_number: int,
    user_seed: bytes,
    picks: Sequence[int],
    total_user_picks: int,
    settings: DrawSettings,
    hash_fn: HashFunction = keccak256,
) -> List[Optional[int]]:
    """Classify each pick into a prize tier, ``None`` when the tier pays nothing.

    Raises
    ------
    PickOutOfRange
        If a pick index is negative or not below ``total_user_picks``.
    """
    masks = masks_for(settings)
    prize_tiers = len(settings.distributions)
    tiers: List[Optional[int]] = []
    for pick in picks:
        if pick < 0 or pick >= total_user_picks:
            raise PickOutOfRange(pick, total_user_picks)
        candidate = derive_pick_random_number(user_seed, pick, hash_fn)
        tier = calculate_tier_index(candidate, winning_random_number, masks)
        if tier < prize_tiers:
            logger.debug("Pick %s landed in tier %s", pick, tier)
            tiers.append(tier)
        else:
            tiers.append(None)
    return tiers
