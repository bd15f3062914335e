"""Prize aggregation across a user's picks for a batch of settled draws."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Union

from .distributions import calculate_prize_distribution_fraction
from .errors import InputLengthMismatch, PrizeOverflow
from .matching import HashFunction, derive_user_seed, keccak256, match_picks
from .picks import EncodedPicks, decode_picks
from .settings_store import DrawSettingsStore
from .types import ETHER, MAX_UINT96, Draw, DrawPrize, DrawSettings


class BalanceSource(Protocol):
    def get_balances_at(self, user: str, timestamps: Sequence[int]) -> Sequence[int]:
        ...


def total_user_picks(balance: int, pick_cost: int) -> int:
    return balance // pick_cost


def tally_tiers(tiers: Sequence[Optional[int]], tier_count: int) -> List[int]:
    counts = [0] * tier_count
    for tier in tiers:
        if tier is not None:
            counts[tier] += 1
    return counts


def prize_fraction_for_counts(settings: DrawSettings, tier_counts: Sequence[int]) -> int:
    fraction = 0
    for tier, count in enumerate(tier_counts):
        if count > 0:
            fraction += calculate_prize_distribution_fraction(settings, tier) * count
    return fraction


def awarded_amount(prize_fraction: int, prize_pool: int) -> int:
    amount = prize_fraction * prize_pool // ETHER
    if amount > MAX_UINT96:
        raise PrizeOverflow(
            f"awarded amount {amount} does not fit in 96 bits; "
            "check the prize pool and distributions"
        )
    return amount


class PrizeCalculator:
    """Computes what a user has won across several draws.

    Parameters
    ----------
    settings_store : DrawSettingsStore
        Source of the installed draw settings. The snapshot is read once per
        call, so a concurrent replacement never splits a batch.
    balance_source : BalanceSource
        Read-only lookup of the user's balance at each draw timestamp.
    hash_fn : HashFunction, default: keccak256
        Hash used for the user seed and every pick's random number.
    """

    def __init__(
        self,
        settings_store: DrawSettingsStore,
        balance_source: BalanceSource,
        *,
        hash_fn: HashFunction = keccak256,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings_store = settings_store
        self._balance_source = balance_source
        self._hash_fn = hash_fn
        self._logger = logger or logging.getLogger("drawcalc.calculator")

    def calculate(
        self,
        user: str,
        winning_random_numbers: Sequence[int],
        timestamps: Sequence[int],
        prize_pools: Sequence[int],
        encoded_picks: EncodedPicks,
    ) -> List[int]:
        """Return the awarded amount for each draw, in input order."""
        prizes = self.calculate_detailed(
            user, winning_random_numbers, timestamps, prize_pools, encoded_picks
        )
        return [prize.awarded for prize in prizes]

    def calculate_detailed(
        self,
        user: str,
        winning_random_numbers: Sequence[int],
        timestamps: Sequence[int],
        prize_pools: Sequence[int],
        encoded_picks: Union[EncodedPicks, Sequence[Sequence[int]]],
    ) -> List[DrawPrize]:
        if not (len(winning_random_numbers) == len(timestamps) == len(prize_pools)):
            raise InputLengthMismatch(
                "winning numbers, timestamps and prize pools must have equal lengths "
                f"({len(winning_random_numbers)}, {len(timestamps)}, {len(prize_pools)})"
            )
        if isinstance(encoded_picks, (bytes, bytearray, str)):
            pick_lists = decode_picks(encoded_picks)
        else:
            pick_lists = [list(picks) for picks in encoded_picks]

        draws = [
            Draw(winning_random_number=w, timestamp=t, prize_pool=p)
            for w, t, p in zip(winning_random_numbers, timestamps, prize_pools)
        ]
        return self._calculate_draws(user, draws, pick_lists)

    def calculate_draws(
        self, user: str, draws: Sequence[Draw], pick_lists: Sequence[Sequence[int]]
    ) -> List[int]:
        return [prize.awarded for prize in self._calculate_draws(user, draws, pick_lists)]

    def _calculate_draws(
        self, user: str, draws: Sequence[Draw], pick_lists: Sequence[Sequence[int]]
    ) -> List[DrawPrize]:
        if len(pick_lists) != len(draws):
            raise InputLengthMismatch(
                f"{len(pick_lists)} pick lists supplied for {len(draws)} draws"
            )
        settings = self._settings_store.get_draw_settings()

        timestamps = [draw.timestamp for draw in draws]
        balances = list(self._balance_source.get_balances_at(user, timestamps))
        if len(balances) != len(draws):
            raise InputLengthMismatch(
                f"balance source returned {len(balances)} balances for {len(draws)} draws"
            )

        user_seed = derive_user_seed(user, self._hash_fn)
        prizes: List[DrawPrize] = []
        for draw, balance, picks in zip(draws, balances, pick_lists):
            prize = self._calculate_draw(settings, draw, balance, user_seed, picks)
            self._logger.debug(
                "User %s draw at %s: picks=%s tiers=%s awarded=%s",
                user,
                draw.timestamp,
                len(picks),
                prize.tier_counts,
                prize.awarded,
            )
            prizes.append(prize)
        return prizes

    def _calculate_draw(
        self,
        settings: DrawSettings,
        draw: Draw,
        balance: int,
        user_seed: bytes,
        picks: Sequence[int],
    ) -> DrawPrize:
        user_picks = total_user_picks(int(balance), settings.pick_cost)
        tiers = match_picks(
            draw.winning_random_number,
            user_seed,
            picks,
            user_picks,
            settings,
            self._hash_fn,
        )
        tier_counts = tally_tiers(tiers, len(settings.distributions))
        fraction = prize_fraction_for_counts(settings, tier_counts)
        return DrawPrize(
            awarded=awarded_amount(fraction, draw.prize_pool),
            total_user_picks=user_picks,
            prize_fraction=fraction,
            tier_counts=tuple(tier_counts),
        )
