import unittest

from brandscale.apca import apca_contrast, contrast, srgb_to_y
from brandscale.color import parse_color


class TestApca(unittest.TestCase):
    def test_black_on_white(self):
        self.assertAlmostEqual(contrast("#000000", "#ffffff"), 106.04, delta=0.05)

    def test_white_on_black(self):
        self.assertAlmostEqual(contrast("#ffffff", "#000000"), -107.88, delta=0.1)

    def test_polarity(self):
        self.assertGreater(contrast("#333333", "#eeeeee"), 0)
        self.assertLess(contrast("#eeeeee", "#333333"), 0)

    def test_identical_colors(self):
        self.assertEqual(contrast("#777777", "#777777"), 0.0)

    def test_low_contrast_clips_to_zero(self):
        self.assertEqual(contrast("#fafafa", "#ffffff"), 0.0)

    def test_luminance(self):
        self.assertAlmostEqual(srgb_to_y((255, 255, 255)), 1.0, places=5)
        self.assertEqual(srgb_to_y((0, 0, 0)), 0.0)

    def test_accepts_color_values(self):
        self.assertAlmostEqual(
            contrast(parse_color("#000000"), parse_color("#ffffff")),
            contrast("#000000", "#ffffff"),
        )

    def test_raw_luminance_api(self):
        self.assertAlmostEqual(apca_contrast(0.0, 1.0), contrast("#000", "#fff"), places=4)
