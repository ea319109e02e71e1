"""Display protocol package for the serial front-panel LCD."""

from .errors import DeviceIOError, DisplayError, FrameSizeError
from .models import ProtocolState, SendStats, WireFrame
from .p210 import P210Command, P210Protocol, split_passes, transpose_columns
from .transport import DisplayTransport

__all__ = [
    "DeviceIOError",
    "DisplayError",
    "DisplayTransport",
    "FrameSizeError",
    "P210Command",
    "P210Protocol",
    "ProtocolState",
    "SendStats",
    "WireFrame",
    "split_passes",
    "transpose_columns",
]
