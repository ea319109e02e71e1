import random
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from lcdinator_renderer import Framebuffer, icons


class FramebufferTests(unittest.TestCase):
    def test_clear_packs_to_blank_frame(self):
        fb = Framebuffer()
        fb.set_pixel(5, 5)
        fb.clear()
        self.assertEqual(fb.pack(), bytes(1024))

    def test_pack_flips_vertically(self):
        fb = Framebuffer()
        fb.set_pixel(0, 0)
        packed = fb.pack()
        self.assertEqual(len(packed), 1024)
        self.assertEqual(packed[63 * 16], 0x80)
        self.assertEqual(sum(packed), 0x80)

    def test_pack_bottom_right_pixel(self):
        fb = Framebuffer()
        fb.set_pixel(127, 63)
        packed = fb.pack()
        self.assertEqual(packed[15], 0x01)
        self.assertEqual(sum(packed), 0x01)

    def test_mid_threshold(self):
        fb = Framebuffer(8, 1)
        fb.image.putpixel((0, 0), 127)
        fb.image.putpixel((1, 0), 128)
        self.assertEqual(fb.pack(), bytes([0x80]))

    def test_round_trip(self):
        rng = random.Random(7)
        fb = Framebuffer(32, 16)
        for y in range(16):
            for x in range(32):
                if rng.random() < 0.4:
                    fb.set_pixel(x, y)
        packed = fb.pack()
        restored = Framebuffer.unpack(packed, 32, 16)
        self.assertEqual(restored.pack(), packed)
        for y in range(16):
            for x in range(32):
                self.assertEqual(restored.is_dark(x, y), fb.is_dark(x, y))

    def test_foreground_wins(self):
        fb = Framebuffer()
        fb.draw(lambda d: d.rectangle((0, 0, 15, 15), fill=0))
        fb.text((0, 0), "CPU")
        fb.icon(0, 0, icons.NET_ERROR)
        for y in range(16):
            for x in range(16):
                self.assertTrue(fb.is_dark(x, y))

    def test_icon_bits(self):
        fb = Framebuffer()
        fb.icon(8, 8, icons.RAM)
        self.assertTrue(fb.is_dark(8, 8))
        self.assertTrue(fb.is_dark(15, 8))
        self.assertFalse(fb.is_dark(9, 9))

    def test_text_draws_pixels(self):
        fb = Framebuffer()
        fb.text((0, 0), "CPU: 42%")
        self.assertNotEqual(fb.pack(), bytes(1024))

    def test_invalid_geometry(self):
        with self.assertRaises(ValueError):
            Framebuffer(width=100, height=64)
        with self.assertRaises(ValueError):
            Framebuffer.unpack(bytes(10), 128, 64)


if __name__ == "__main__":
    unittest.main()
