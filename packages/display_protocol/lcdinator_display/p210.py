"""Bit-plane column protocol for the Checkpoint 12200 / P210 front-panel LCD."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum

from .errors import FrameSizeError
from .models import ProtocolState, SendStats, WireFrame


logger = logging.getLogger("lcdinator.p210")

WINDOW_SIZE = 64


class P210Command(bytes, Enum):
    RESET = b"\x1b\x40"
    HOME = b"\x0b"
    CLEAR = b"\x0c"
    START_GRAPHICS = b"\x1b\x47"


INIT_SEQUENCE = (P210Command.RESET, P210Command.HOME, P210Command.CLEAR)


def normalize_scanlines(data: bytes, bytes_per_scanline: int, height: int) -> bytes:
    """Fit packed scanlines to ``bytes_per_scanline * height`` bytes.

    Short input is padded with blank scanlines when the shortfall is whole
    scanlines; any other shortfall raises ``FrameSizeError``. Long input is
    returned unchanged and cut down after scanline reversal.
    """
    expected = bytes_per_scanline * height
    if len(data) == expected:
        return data

    logger.warning(
        "pixel data is %d bytes, expected %d for %dx%d",
        len(data),
        expected,
        bytes_per_scanline * 8,
        height,
        extra={"event": "frame_size_mismatch"},
    )
    if len(data) > expected:
        return data
    if len(data) % bytes_per_scanline != 0:
        raise FrameSizeError(len(data), expected, bytes_per_scanline)
    return data + bytes(expected - len(data))


def reverse_scanlines(data: bytes, bytes_per_scanline: int) -> bytes:
    count = len(data) // bytes_per_scanline
    out = bytearray()
    for i in range(count - 1, -1, -1):
        start = i * bytes_per_scanline
        out += data[start : start + bytes_per_scanline]
    return bytes(out)


def plane_for_offset(block_offset: int, width: int, bytes_per_scanline: int) -> tuple[int, int]:
    """Return ``(mask, column_base)`` for the scanline starting at ``block_offset``.

    Every 8 scanlines form a block group that owns ``width`` device columns; the
    scanline's position inside the group selects the bit-plane.
    """
    group_span = 8 * bytes_per_scanline
    block_group = block_offset // group_span
    position = (block_offset % group_span) // bytes_per_scanline
    return 1 << position, block_group * width


def transpose_columns(data: bytes, width: int, height: int) -> bytes:
    """Re-address reversed scanlines as device columns.

    Bit-plane masks are accumulated by addition modulo 256, as the device does.
    """
    bytes_per_scanline = width // 8
    cols = bytearray(bytes_per_scanline * height)
    for j in range(bytes_per_scanline):
        for k in range(height):
            block_offset = k * bytes_per_scanline
            source = block_offset + j
            if source >= len(data):
                continue
            value = data[source]
            if not value:
                continue
            mask, base = plane_for_offset(block_offset, width, bytes_per_scanline)
            column_base = base + j * 8
            if column_base + 7 >= len(cols):
                continue
            for bit in range(8):
                if value & (0x80 >> bit):
                    cols[column_base + bit] = (cols[column_base + bit] + mask) & 0xFF
    return bytes(cols)


def split_passes(
    cols: bytes,
    window_size: int = WINDOW_SIZE,
    even_first: bool = True,
) -> tuple[tuple[bytes, ...], tuple[bytes, ...]]:
    windows = [cols[i : i + window_size] for i in range(0, len(cols), window_size)]
    even = tuple(w for idx, w in enumerate(windows) if idx % 2 == 0)
    odd = tuple(w for idx, w in enumerate(windows) if idx % 2 == 1)
    return (even, odd) if even_first else (odd, even)


class P210Protocol:
    """Timing-based sender: the panel never acknowledges, so delays are the flow control."""

    def __init__(
        self,
        transport,
        width: int = 128,
        height: int = 64,
        command_delay_s: float = 0.005,
        first_settle_s: float = 0.5,
        settle_s: float = 0.05,
        window_size: int = WINDOW_SIZE,
        even_windows_first: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if width % 8 != 0:
            raise ValueError("Width must be a multiple of 8")
        self.transport = transport
        self.width = width
        self.height = height
        self.command_delay_s = command_delay_s
        self.first_settle_s = first_settle_s
        self.settle_s = settle_s
        self.window_size = window_size
        self.even_windows_first = even_windows_first
        self.state = ProtocolState.PORT_OPEN if getattr(transport, "is_open", False) else ProtocolState.DISCONNECTED
        self.frames_sent = 0
        self._sleep = sleep

    @property
    def bytes_per_scanline(self) -> int:
        return self.width // 8

    @property
    def frame_size(self) -> int:
        return self.bytes_per_scanline * self.height

    def initialize(self) -> int:
        written = 0
        for command in INIT_SEQUENCE:
            written += self.transport.write(command.value)
            self._sleep(self.command_delay_s)
        self.state = ProtocolState.READY
        logger.info("display initialized", extra={"event": "display_init"})
        return written

    def encode(self, packed: bytes) -> WireFrame:
        data = normalize_scanlines(packed, self.bytes_per_scanline, self.height)
        reordered = reverse_scanlines(data, self.bytes_per_scanline)[: self.frame_size]
        cols = transpose_columns(reordered, self.width, self.height)
        first, second = split_passes(cols, self.window_size, self.even_windows_first)
        return WireFrame(
            commands=(P210Command.START_GRAPHICS.value,),
            payload=cols,
            first_pass=first,
            second_pass=second,
        )

    def send_frame(self, packed: bytes) -> SendStats:
        frame = self.encode(packed)
        first = self.frames_sent == 0
        stats = SendStats(mode="first" if first else "redraw")
        start = time.perf_counter()

        for command in frame.commands:
            stats.bytes_sent += self.transport.write(command)
            stats.packets_sent += 1
        settle = self.first_settle_s if first else self.settle_s
        if settle > 0:
            self._sleep(settle)

        for window in frame.windows:
            stats.bytes_sent += self.transport.write(window)
            stats.packets_sent += 1

        stats.duration_s = time.perf_counter() - start
        self.frames_sent += 1
        self.state = ProtocolState.STREAMING
        return stats
