"""1-bit framebuffer backed by a Pillow gray image, plus scanline packing."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .icons import Icon, draw_icon

LIGHT = 255
DARK = 0
THRESHOLD = 128

Primitive = Callable[[ImageDraw.ImageDraw], None]


def load_font(size: int = 11):
    for name in ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


class Framebuffer:
    """Gray canvas where intensity below ``THRESHOLD`` counts as a dark pixel."""

    def __init__(self, width: int = 128, height: int = 64, font=None) -> None:
        if width % 8 != 0:
            raise ValueError("Width must be a multiple of 8")
        self.width = width
        self.height = height
        self.image = Image.new("L", (width, height), LIGHT)
        self._canvas = ImageDraw.Draw(self.image)
        # No anti-aliasing: every text pixel is either fully dark or untouched.
        self._canvas.fontmode = "1"
        self.font = font if font is not None else load_font()

    @property
    def frame_size(self) -> int:
        return (self.width // 8) * self.height

    def clear(self) -> None:
        self._canvas.rectangle((0, 0, self.width - 1, self.height - 1), fill=LIGHT)

    def draw(self, primitive: Primitive) -> None:
        primitive(self._canvas)

    def text(self, xy: tuple[int, int], value: str) -> None:
        self._canvas.text(xy, value, font=self.font, fill=DARK)

    def icon(self, x: int, y: int, bitmap: Icon) -> None:
        draw_icon(self._canvas, x, y, bitmap)

    def set_pixel(self, x: int, y: int, dark: bool = True) -> None:
        self.image.putpixel((x, y), DARK if dark else LIGHT)

    def is_dark(self, x: int, y: int) -> bool:
        return self.image.getpixel((x, y)) < THRESHOLD

    def pack(self) -> bytes:
        """Pack to scanline bytes, bottom row first, bit 7 = leftmost pixel."""
        pixels = np.asarray(self.image, dtype=np.uint8)
        dark = pixels[::-1] < THRESHOLD
        return np.packbits(dark, axis=1).tobytes()

    @classmethod
    def unpack(cls, data: bytes, width: int = 128, height: int = 64) -> "Framebuffer":
        expected = (width // 8) * height
        if len(data) != expected:
            raise ValueError(f"Packed frame must be {expected} bytes")
        rows = np.frombuffer(data, dtype=np.uint8).reshape(height, width // 8)
        bits = np.unpackbits(rows, axis=1)[::-1]
        pixels = np.where(bits == 1, DARK, LIGHT).astype(np.uint8)
        fb = cls(width, height)
        fb.image.paste(Image.fromarray(np.ascontiguousarray(pixels)))
        return fb
