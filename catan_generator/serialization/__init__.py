"""URL-safe board tokens and the mixed-radix codec behind them."""

from .board_url import UnsupportedFormatError, deserialize, has_custom_ports, serialize
from .fixed_values import DecodeError, FixedValuesSerializer

__all__ = [
    "DecodeError",
    "FixedValuesSerializer",
    "UnsupportedFormatError",
    "deserialize",
    "has_custom_ports",
    "serialize",
]
