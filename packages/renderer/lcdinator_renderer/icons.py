"""8x8 monochrome icons, one byte per row, MSB is the leftmost pixel."""

from __future__ import annotations

from PIL import ImageDraw

Icon = tuple[int, int, int, int, int, int, int, int]

DARK = 0

CPU: Icon = (
    0b00111100,
    0b01000010,
    0b10100101,
    0b10111101,
    0b10111101,
    0b10100101,
    0b01000010,
    0b00111100,
)
RAM: Icon = (
    0b11111111,
    0b10011001,
    0b10111101,
    0b10111101,
    0b10111101,
    0b10111101,
    0b10011001,
    0b11111111,
)
DISK: Icon = (
    0b00111100,
    0b01000010,
    0b10011001,
    0b10111101,
    0b10111101,
    0b10011001,
    0b01000010,
    0b00111100,
)
CLOCK: Icon = (
    0b00111100,
    0b01000010,
    0b10011001,
    0b10100101,
    0b10100001,
    0b10011001,
    0b01000010,
    0b00111100,
)
PLUG: Icon = (
    0b00100100,
    0b00100100,
    0b01111110,
    0b01111110,
    0b00111100,
    0b00011000,
    0b00011000,
    0b00011000,
)
NET: Icon = (
    0b00011000,
    0b00011000,
    0b00011000,
    0b11111111,
    0b10000001,
    0b10000001,
    0b10000001,
    0b11100111,
)
NET_ERROR: Icon = (
    0b10000001,
    0b01000010,
    0b00100100,
    0b00011000,
    0b00011000,
    0b00100100,
    0b01000010,
    0b10000001,
)
ARROW_UP: Icon = (
    0b00011000,
    0b00111100,
    0b01111110,
    0b11011011,
    0b00011000,
    0b00011000,
    0b00011000,
    0b00011000,
)
ARROW_DOWN: Icon = (
    0b00011000,
    0b00011000,
    0b00011000,
    0b00011000,
    0b11011011,
    0b01111110,
    0b00111100,
    0b00011000,
)


def draw_icon(draw: ImageDraw.ImageDraw, x: int, y: int, icon: Icon) -> None:
    points = [
        (x + col, y + row)
        for row, bits in enumerate(icon)
        for col in range(8)
        if (bits >> (7 - col)) & 1
    ]
    if points:
        draw.point(points, fill=DARK)
