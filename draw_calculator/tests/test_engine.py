import unittest
from functools import reduce

from draw_calculator.bitmasks import create_bit_masks
from draw_calculator.distributions import calculate_prize_distribution_fraction
from draw_calculator.errors import PickOutOfRange
from draw_calculator.matching import (
    calculate_tier_index,
    count_matches,
    derive_pick_random_number,
    derive_user_seed,
    keccak256,
    match_picks,
)
from draw_calculator.types import DrawSettings

USER = "0x" + "ab" * 20


def tail_hash(data: bytes) -> bytes:
    """Makes a pick's random number equal to its index."""
    return data[-32:].rjust(32, b"\x00")


def example_settings() -> DrawSettings:
    return DrawSettings(
        bit_range_size=4,
        match_cardinality=2,
        pick_cost=1,
        distributions=(6 * 10**17, 10**17),
    )


class BitMaskTests(unittest.TestCase):
    def test_masks_are_ordered_least_significant_first(self) -> None:
        self.assertEqual(create_bit_masks(4, 2), (0x0F, 0xF0))
        self.assertEqual(create_bit_masks(8, 3), (0xFF, 0xFF00, 0xFF0000))

    def test_masks_do_not_overlap_and_cover_low_bits(self) -> None:
        for bit_range_size, cardinality in [(1, 256), (4, 2), (10, 25), (32, 8), (255, 1)]:
            masks = create_bit_masks(bit_range_size, cardinality)
            self.assertEqual(len(masks), cardinality)
            for i, left in enumerate(masks):
                for right in masks[i + 1:]:
                    self.assertEqual(left & right, 0)
            covered = reduce(lambda acc, m: acc | m, masks, 0)
            self.assertEqual(covered, (1 << (bit_range_size * cardinality)) - 1)


class DistributionFractionTests(unittest.TestCase):
    def test_tier_zero_gets_full_weight(self) -> None:
        settings = example_settings()
        self.assertEqual(calculate_prize_distribution_fraction(settings, 0), 6 * 10**17)

    def test_lower_tier_is_split_across_outcomes(self) -> None:
        settings = example_settings()
        self.assertEqual(
            calculate_prize_distribution_fraction(settings, 1), 10**17 // 16
        )

    def test_fraction_truncates_toward_zero(self) -> None:
        settings = DrawSettings(
            bit_range_size=8, match_cardinality=3, pick_cost=1, distributions=(1, 1000, 70000)
        )
        self.assertEqual(calculate_prize_distribution_fraction(settings, 1), 3)
        self.assertEqual(calculate_prize_distribution_fraction(settings, 2), 1)

    def test_fraction_times_outcomes_recovers_weight(self) -> None:
        settings = DrawSettings(
            bit_range_size=5,
            match_cardinality=4,
            pick_cost=3,
            distributions=(5 * 10**17, 2 * 10**17, 10**17 + 7, 123456789),
        )
        for tier, weight in enumerate(settings.distributions):
            outcomes = (1 << settings.bit_range_size) ** tier
            fraction = calculate_prize_distribution_fraction(settings, tier)
            self.assertLessEqual(fraction * outcomes, weight)
            self.assertLess(weight - fraction * outcomes, outcomes)

    def test_out_of_range_tier_raises(self) -> None:
        settings = example_settings()
        with self.assertRaises(IndexError):
            calculate_prize_distribution_fraction(settings, 2)
        with self.assertRaises(IndexError):
            calculate_prize_distribution_fraction(settings, -1)


class MatchEngineTests(unittest.TestCase):
    def test_identical_numbers_land_in_grand_prize_tier(self) -> None:
        number = int.from_bytes(keccak256(b"winning"), "big")
        for bit_range_size, cardinality in [(1, 1), (4, 2), (8, 32), (16, 16)]:
            masks = create_bit_masks(bit_range_size, cardinality)
            self.assertEqual(calculate_tier_index(number, number, masks), 0)

    def test_no_matching_window_gives_cardinality_tier(self) -> None:
        masks = create_bit_masks(4, 3)
        winning = 0x123
        candidate = winning ^ 0xFFF
        self.assertEqual(calculate_tier_index(candidate, winning, masks), 3)

    def test_every_window_is_compared(self) -> None:
        masks = create_bit_masks(4, 3)
        # Lowest window differs, the two above it match.
        self.assertEqual(count_matches(0x120, 0x123, masks), 2)
        self.assertEqual(calculate_tier_index(0x120, 0x123, masks), 1)

    def test_match_picks_classifies_each_pick(self) -> None:
        settings = example_settings()
        seed = derive_user_seed(USER, tail_hash)
        tiers = match_picks(0x35, seed, [0x35, 0x25, 0x00, 0x135], 1000, settings, tail_hash)
        self.assertEqual(tiers, [0, 1, None, 0])

    def test_pick_outside_user_picks_raises(self) -> None:
        settings = example_settings()
        seed = derive_user_seed(USER, tail_hash)
        with self.assertRaises(PickOutOfRange) as ctx:
            match_picks(0x35, seed, [1, 10], 10, settings, tail_hash)
        self.assertEqual(ctx.exception.pick, 10)
        self.assertEqual(ctx.exception.total_user_picks, 10)
        with self.assertRaises(PickOutOfRange):
            match_picks(0x35, seed, [-1], 10, settings, tail_hash)

    def test_keccak_vector(self) -> None:
        self.assertEqual(
            keccak256(b"").hex(),
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
        )

    def test_pick_random_numbers_are_deterministic_and_distinct(self) -> None:
        seed = derive_user_seed(USER)
        other_seed = derive_user_seed("0x" + "cd" * 20)
        self.assertEqual(seed, derive_user_seed(USER.upper().replace("0X", "0x")))
        self.assertNotEqual(seed, other_seed)

        first = derive_pick_random_number(seed, 0)
        self.assertEqual(first, derive_pick_random_number(seed, 0))
        self.assertNotEqual(first, derive_pick_random_number(seed, 1))
        self.assertNotEqual(first, derive_pick_random_number(other_seed, 0))
        self.assertLess(first, 1 << 256)

    def test_user_seed_hashes_packed_address(self) -> None:
        seed = derive_user_seed(USER)
        self.assertEqual(seed, keccak256(bytes.fromhex("ab" * 20)))

    def test_hash_must_return_32_bytes(self) -> None:
        with self.assertRaises(ValueError):
            derive_user_seed(USER, lambda data: data)


if __name__ == "__main__":
    unittest.main()
