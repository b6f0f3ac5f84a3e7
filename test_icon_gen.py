"""Window icon rendering."""

import unittest
from datetime import date

from icon_gen import create_icon_image


class IconTests(unittest.TestCase):
    def test_icon_shape_and_accent_bar(self) -> None:
        img = create_icon_image(date(2024, 3, 15))
        self.assertEqual(img.size, (64, 64))
        self.assertEqual(img.mode, "RGBA")
        self.assertEqual(img.getpixel((1, 1)), (0, 120, 212, 255))

    def test_day_number_is_drawn(self) -> None:
        img = create_icon_image(date(2024, 3, 28))
        body = img.crop((0, 14, 64, 64)).convert("L")
        self.assertLess(min(body.getdata()), 128)

    def test_custom_size(self) -> None:
        self.assertEqual(create_icon_image(date(2024, 1, 1), size=32).size, (32, 32))


if __name__ == "__main__":
    unittest.main()
