import re
import unittest

from brandscale.analyze import TuningProfile, analyze
from brandscale.apca import contrast
from brandscale.color import Color, parse_color
from brandscale.generate import (
    APCA_THRESHOLDS,
    BACKGROUND_STEPS,
    TEXT_STEPS,
    CustomHue,
    generate_scale,
)
from brandscale.hues import BASELINE_HUES

HEX_RE = re.compile(r"^#[0-9a-f]{6}$")


class TestStandardScale(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.neutral = TuningProfile.neutral("light")
        cls.orange = generate_scale(BASELINE_HUES["orange"], cls.neutral, "light")

    def test_shape(self):
        self.assertEqual(len(self.orange), 12)
        self.assertEqual(self.orange.key, "orange")
        self.assertEqual(self.orange.mode, "light")
        for hex_ in self.orange.hexes:
            self.assertRegex(hex_, HEX_RE)
        self.assertIsNone(self.orange.anchor_step)
        self.assertEqual(self.orange.pinned_steps, ())

    def test_accessors(self):
        self.assertEqual(self.orange[1], self.orange.hexes[0])
        self.assertEqual(self.orange[12], self.orange.hexes[11])
        self.assertTrue(self.orange.css(9).startswith("oklch("))
        self.assertIsInstance(self.orange.color(9), Color)
        with self.assertRaises(IndexError):
            self.orange[0]
        with self.assertRaises(IndexError):
            self.orange[13]

    def test_lightness_runs_light_to_dark(self):
        ls = [self.orange.color(s).l for s in range(1, 9)]
        self.assertEqual(ls, sorted(ls, reverse=True))
        self.assertGreater(self.orange.color(1).l, self.orange.color(12).l)

    def test_step9_matches_reference(self):
        ref = parse_color(BASELINE_HUES["orange"].reference_hex)
        self.assertAlmostEqual(self.orange.color(9).l, ref.l, places=6)
        self.assertAlmostEqual(self.orange.color(9).c, ref.c, places=6)

    def test_text_steps_meet_thresholds(self):
        for mode in ("light", "dark"):
            profile = TuningProfile.neutral(mode)
            for hue in BASELINE_HUES.values():
                scale = generate_scale(hue, profile, mode)
                for text_step, threshold in TEXT_STEPS.items():
                    for bg_step in BACKGROUND_STEPS:
                        if scale.flagged(text_step, bg_step):
                            continue
                        lc = abs(contrast(scale[text_step], scale[bg_step]))
                        self.assertGreaterEqual(lc, threshold, f"{hue.key} {mode} {text_step}/{bg_step}")

    def test_neutral_ignores_hue_shift(self):
        shifted = TuningProfile(mode="light", hue_shift=20.0, chroma_multiplier=1.4)
        slate = generate_scale(BASELINE_HUES["slate"], shifted, "light")
        base = generate_scale(BASELINE_HUES["slate"], TuningProfile.neutral("light"), "light")
        self.assertAlmostEqual(slate.color(9).h, base.color(9).h, places=6)
        self.assertAlmostEqual(slate.color(9).c, base.color(9).c, places=6)

    def test_chromatic_follows_profile(self):
        tuned = TuningProfile(mode="light", hue_shift=5.0, chroma_multiplier=0.8, lightness_shift=0.02)
        scale = generate_scale(BASELINE_HUES["blue"], tuned, "light")
        blue = BASELINE_HUES["blue"]
        self.assertAlmostEqual(scale.color(5).h, blue.hue + 5.0, places=6)
        self.assertAlmostEqual(scale.color(5).c, blue.target_chroma("light", 5) * 0.8, places=6)
        self.assertAlmostEqual(scale.color(9).l, blue.target_lightness("light", 9) + 0.02, places=6)
        self.assertAlmostEqual(scale.color(1).l, blue.target_lightness("light", 1), places=6)

    def test_solid_step_white_text_warning(self):
        yellow = generate_scale(BASELINE_HUES["yellow"], TuningProfile.neutral("light"), "light")
        self.assertTrue(yellow.flagged(9, "white"))
        note = [n for n in yellow.notes if n.bg_step == "white"][0]
        self.assertEqual(note.severity, "warning")
        self.assertEqual(note.expected, APCA_THRESHOLDS["large"])

    def test_to_dict(self):
        d = self.orange.to_dict()
        self.assertEqual(d["key"], "orange")
        self.assertEqual(sorted(d["steps"], key=int), [str(s) for s in range(1, 13)])


class TestPins(unittest.TestCase):
    def test_anchored_input_is_pinned(self):
        profile = analyze(["#FF6A00"], "light")
        scale = generate_scale(BASELINE_HUES["orange"], profile, "light")
        self.assertEqual(scale[9], "#ff6a00")
        self.assertEqual(scale.anchor_step, 9)
        self.assertEqual(scale.pinned_steps, (9,))

    def test_explicit_pins(self):
        pins = {12: parse_color("#ffffff")}
        scale = generate_scale(BASELINE_HUES["red"], TuningProfile.neutral("light"), "light", pins=pins)
        # a pinned text step is left alone even when it fails
        self.assertEqual(scale[12], "#ffffff")
        self.assertTrue(scale.flagged(12, 1))
        fails = [n for n in scale.notes if n.severity == "fail"]
        self.assertTrue(all(n.text_step == 12 for n in fails))

    def test_empty_pins_disable_profile_pins(self):
        profile = analyze(["#FF6A00"], "light")
        scale = generate_scale(BASELINE_HUES["orange"], profile, "light", pins={})
        self.assertEqual(scale.pinned_steps, ())


class TestCustomScale(unittest.TestCase):
    def test_neon_row(self):
        profile = analyze(["#39FF14"], "light")
        row = profile.custom_rows[0]
        scale = generate_scale(CustomHue.from_row(row), profile, "light")
        self.assertTrue(scale.is_custom)
        self.assertEqual(scale.key, "neon-grass")
        self.assertEqual(scale.anchor_step, row.anchor_step)
        self.assertEqual(scale[row.anchor_step], "#39ff14")

    def test_hue_gap_row_keeps_input_hue(self):
        profile = analyze(["#1ABCFE"], "dark")
        row = profile.custom_rows[0]
        scale = generate_scale(CustomHue.from_row(row), profile, "dark")
        self.assertAlmostEqual(scale.color(5).h, row.color.h, places=6)
        self.assertEqual(len(scale.hexes), 12)


class TestBrandTuning(unittest.TestCase):
    def test_dark_gray_brand_keeps_backgrounds_ordered(self):
        for mode in ("light", "dark"):
            profile = analyze(["#444444"], mode)
            if mode == "light":
                self.assertGreater(profile.lightness_shift, 0.0)
            for hue in BASELINE_HUES.values():
                scale = generate_scale(hue, profile, mode)
                l1, l2, l3 = (scale.color(s).l for s in (1, 2, 3))
                if mode == "light":
                    self.assertGreater(l1, l2, f"{hue.key} {mode}")
                    self.assertGreater(l2, l3, f"{hue.key} {mode}")
                else:
                    self.assertLess(l1, l2, f"{hue.key} {mode}")
                    self.assertLess(l2, l3, f"{hue.key} {mode}")

    def test_anchored_rows_follow_their_own_brand_hue(self):
        profile = analyze(["oklch(0.68 0.19 53)", "oklch(0.62 0.2 243)"], "light")
        self.assertEqual(profile.anchored_slots(), ["orange", "blue"])
        for key, brand_hue in (("orange", 53.0), ("blue", 243.0)):
            scale = generate_scale(BASELINE_HUES[key], profile, "light")
            for step in range(1, 13):
                self.assertAlmostEqual(scale.color(step).h, brand_hue, delta=0.01, msg=f"{key} {step}")

    def test_unanchored_rows_use_brand_wide_shift(self):
        profile = analyze(["oklch(0.68 0.19 53)", "oklch(0.62 0.2 243)"], "light")
        red = generate_scale(BASELINE_HUES["red"], profile, "light")
        self.assertAlmostEqual(
            red.color(9).h, (BASELINE_HUES["red"].hue + profile.hue_shift) % 360, places=6
        )
