import json
import tempfile
import unittest
from pathlib import Path

from draw_calculator.errors import (
    BitRangeTooLarge,
    DistributionsExceedWhole,
    InvalidDrawSettings,
    MatchCardinalityTooSmall,
    PickCostNotPositive,
)
from draw_calculator.settings_store import DrawSettingsStore, JsonFileSettingsPersistence
from draw_calculator.types import ETHER, DrawSettings
from draw_calculator.validation import validate_draw_settings


def make_settings(**overrides) -> DrawSettings:
    values = dict(
        bit_range_size=4,
        match_cardinality=2,
        pick_cost=1,
        distributions=(6 * 10**17, 10**17),
    )
    values.update(overrides)
    return DrawSettings(**values)


class FailingPersistence:
    def load_latest(self):
        return None

    def save(self, snapshot) -> None:
        raise OSError("disk full")


class ValidatorTests(unittest.TestCase):
    def test_accepts_distributions_summing_to_whole(self) -> None:
        settings = make_settings(distributions=(ETHER // 2, ETHER // 2))
        self.assertIs(validate_draw_settings(settings), settings)

    def test_rejects_distributions_just_over_whole(self) -> None:
        settings = make_settings(distributions=(ETHER // 2, ETHER // 2 + 1))
        with self.assertRaises(DistributionsExceedWhole):
            validate_draw_settings(settings)

    def test_rejects_more_distributions_than_windows(self) -> None:
        settings = make_settings(match_cardinality=1)
        with self.assertRaises(MatchCardinalityTooSmall):
            validate_draw_settings(settings)

    def test_rejects_zero_cardinality(self) -> None:
        settings = make_settings(match_cardinality=0, distributions=())
        with self.assertRaises(MatchCardinalityTooSmall):
            validate_draw_settings(settings)

    def test_bit_range_must_fit_in_256_bits(self) -> None:
        validate_draw_settings(make_settings(bit_range_size=128))
        with self.assertRaises(BitRangeTooLarge):
            validate_draw_settings(make_settings(bit_range_size=129))

    def test_rejects_non_positive_pick_cost(self) -> None:
        for pick_cost in (0, -5):
            with self.assertRaises(PickCostNotPositive):
                validate_draw_settings(make_settings(pick_cost=pick_cost))

    def test_structural_checks_run_before_pick_cost_and_sum(self) -> None:
        settings = make_settings(
            match_cardinality=1, pick_cost=0, distributions=(ETHER, ETHER)
        )
        with self.assertRaises(MatchCardinalityTooSmall):
            validate_draw_settings(settings)

        settings = make_settings(bit_range_size=200, pick_cost=0, distributions=(ETHER, 1))
        with self.assertRaises(BitRangeTooLarge):
            validate_draw_settings(settings)

        settings = make_settings(pick_cost=0, distributions=(ETHER, 1))
        with self.assertRaises(PickCostNotPositive):
            validate_draw_settings(settings)

    def test_field_domains_checked_on_construction(self) -> None:
        with self.assertRaises(ValueError):
            make_settings(bit_range_size=0)
        with self.assertRaises(ValueError):
            make_settings(bit_range_size=256)
        with self.assertRaises(ValueError):
            make_settings(distributions=(-1,))
        with self.assertRaises(ValueError):
            make_settings(pick_cost=1.5)

    def test_distribution_lists_are_frozen_to_tuples(self) -> None:
        settings = make_settings(distributions=[1, 2])
        self.assertEqual(settings.distributions, (1, 2))


class DrawSettingsStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.state_path = Path(self._tmpdir.name) / "settings.json"

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_accepted_settings_are_persisted_and_announced(self) -> None:
        store = DrawSettingsStore(JsonFileSettingsPersistence(str(self.state_path)))
        seen = []
        store.subscribe(seen.append)

        settings = make_settings()
        snapshot = store.set_draw_settings(settings)

        self.assertEqual(snapshot.version, 1)
        self.assertIs(store.get_draw_settings(), settings)
        self.assertEqual(seen, [snapshot])
        persisted = json.loads(self.state_path.read_text(encoding="utf-8"))
        self.assertEqual(persisted["version"], 1)
        self.assertEqual(persisted["settings"]["distributions"], [str(6 * 10**17), str(10**17)])

    def test_replacement_bumps_version_and_survives_reload(self) -> None:
        persistence = JsonFileSettingsPersistence(str(self.state_path))
        store = DrawSettingsStore(persistence)
        store.set_draw_settings(make_settings())
        replacement = make_settings(pick_cost=10**18, distributions=(ETHER,))
        store.set_draw_settings(replacement)

        reloaded = DrawSettingsStore(JsonFileSettingsPersistence(str(self.state_path)))
        self.assertEqual(reloaded.current.version, 2)
        self.assertEqual(reloaded.get_draw_settings(), replacement)

    def test_rejected_settings_change_nothing(self) -> None:
        store = DrawSettingsStore(JsonFileSettingsPersistence(str(self.state_path)))
        seen = []
        store.subscribe(seen.append)
        original = store.set_draw_settings(make_settings())
        before = self.state_path.read_text(encoding="utf-8")

        with self.assertRaises(InvalidDrawSettings):
            store.set_draw_settings(make_settings(pick_cost=0))

        self.assertIs(store.current, original)
        self.assertEqual(seen, [original])
        self.assertEqual(self.state_path.read_text(encoding="utf-8"), before)

    def test_persistence_failure_keeps_previous_snapshot(self) -> None:
        store = DrawSettingsStore(FailingPersistence())
        seen = []
        store.subscribe(seen.append)
        with self.assertRaises(OSError):
            store.set_draw_settings(make_settings())
        self.assertIsNone(store.current)
        self.assertEqual(seen, [])

    def test_missing_settings_raise_lookup_error(self) -> None:
        with self.assertRaises(LookupError):
            DrawSettingsStore().get_draw_settings()


if __name__ == "__main__":
    unittest.main()
