import json
import unittest

from brandscale.analyze import TuningProfile
from brandscale.apca import contrast
from brandscale.errors import EmptyInput, InvalidMode, TooManyInputs
from brandscale.generate import generate_scale
from brandscale.hues import BASELINE_HUES, HUE_KEYS
from brandscale.palette import Theme, generate_palette, generate_theme, palette_stats


class TestGeneratePalette(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.orange = generate_palette(["#FF6A00"], "light")
        cls.gap = generate_palette(["#1ABCFE"], "light")

    def test_all_baseline_hues_present(self):
        self.assertEqual(self.orange.keys[: len(HUE_KEYS)], list(HUE_KEYS))
        self.assertEqual(len(self.orange), 31)

    def test_brand_orange_scenario(self):
        self.assertEqual(self.orange.anchored_slots, ("orange",))
        scale = self.orange["orange"]
        self.assertEqual(scale.anchor_step, 9)
        self.assertEqual(scale[9], "#ff6a00")
        self.assertGreaterEqual(abs(contrast(scale[12], scale[1])), 75)

    def test_deterministic(self):
        again = generate_palette(["#FF6A00"], "light")
        self.assertEqual(
            json.dumps(self.orange.to_dict(), sort_keys=True),
            json.dumps(again.to_dict(), sort_keys=True),
        )

    def test_custom_row_leaves_nearest_hue_untouched(self):
        self.assertEqual(len(self.gap.custom_slots), 1)
        self.assertTrue(self.gap.custom_slots[0].startswith("custom-"))
        self.assertEqual(self.gap.keys[-1], self.gap.custom_slots[0])
        baseline = generate_scale(BASELINE_HUES["cyan"], TuningProfile.neutral("light"), "light")
        self.assertEqual(self.gap["cyan"].hexes, baseline.hexes)

    def test_stats(self):
        stats = self.gap.stats()
        self.assertEqual(stats.total_hues, 32)
        self.assertEqual(stats.total_colors, 32 * 12)
        self.assertEqual(stats.anchored_hues, 0)
        self.assertEqual(stats.custom_hues, 1)
        self.assertEqual(palette_stats(self.gap), stats)

    def test_lookup(self):
        self.assertIn("orange", self.orange)
        self.assertNotIn("custom-1", self.orange)
        with self.assertRaises(KeyError):
            self.orange["nope"]

    def test_tuning_profile_override(self):
        palette = generate_palette(
            ["#FF6A00"], "light", tuning_profile=TuningProfile.neutral("light")
        )
        self.assertEqual(palette.anchored_slots, ())
        self.assertEqual(palette.input_colors, ("#FF6A00",))
        self.assertEqual(palette["orange"].pinned_steps, ())

    def test_tuning_profile_mode_must_match(self):
        light = TuningProfile.neutral("light")
        with self.assertRaises(InvalidMode):
            generate_palette(["#FF6A00"], "dark", tuning_profile=light)

    def test_input_validation(self):
        with self.assertRaises(EmptyInput):
            generate_palette([])
        with self.assertRaises(TooManyInputs):
            generate_palette(["#111111"] * 8)
        with self.assertRaises(InvalidMode):
            generate_palette(["#FF6A00"], "dim")

    def test_json_serializable(self):
        payload = json.loads(json.dumps(self.orange.to_dict()))
        self.assertEqual(payload["stats"]["totalHues"], 31)
        self.assertEqual(payload["scales"]["orange"]["steps"]["9"]["hex"], "#ff6a00")


class TestGenerateTheme(unittest.TestCase):
    def test_both_modes(self):
        theme = generate_theme(["#FF6A00"])
        self.assertIsInstance(theme, Theme)
        self.assertEqual(theme.light.mode, "light")
        self.assertEqual(theme.dark.mode, "dark")
        self.assertEqual(len(theme.palettes), 2)
        self.assertNotEqual(theme.light["gray"][1], theme.dark["gray"][1])
        self.assertEqual(set(theme.to_dict()), {"light", "dark"})
