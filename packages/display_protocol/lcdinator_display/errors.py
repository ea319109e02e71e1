"""Error types raised by the display transport and wire encoder."""

from __future__ import annotations


class DisplayError(RuntimeError):
    """Base class for unrecoverable display failures."""


class DeviceIOError(DisplayError):
    """Serial open/read/write failure, including short writes."""

    def __init__(self, message: str, written: int | None = None, expected: int | None = None) -> None:
        super().__init__(message)
        self.written = written
        self.expected = expected


class FrameSizeError(DisplayError, ValueError):
    """Packed frame cannot be fitted to the panel geometry."""

    def __init__(self, actual: int, expected: int, bytes_per_scanline: int) -> None:
        super().__init__(
            f"Pixel data is {actual} bytes, expected {expected} "
            f"and not a whole number of {bytes_per_scanline}-byte scanlines short"
        )
        self.actual = actual
        self.expected = expected
        self.bytes_per_scanline = bytes_per_scanline
