from __future__ import annotations

import math
import re
from fractions import Fraction

from .errors import InvalidArgumentError

BITS_PER_BYTE = 8

# Upload limits are quoted in decimal megabytes.
BYTES_PER_UNIT = {
    "B": 1,
    "KB": 1000,
    "MB": 1000 * 1000,
}
DEFAULT_UNIT = "MB"

_SIZE_RE = re.compile(r"^\s*(?P<number>[+-]?(?:\d+(?:\.\d+)?|\.\d+))\s*(?P<unit>[A-Za-z]*)\s*$")


def parse_size_limit(text: str) -> int:
    """Parse ``"25MB"``, ``"500 KB"``, ``"1000000B"`` or a bare ``"25"`` (megabytes) into bytes."""
    match = _SIZE_RE.match(str(text))
    if not match:
        raise InvalidArgumentError(f"invalid size '{text}': expected a number with an optional B, KB or MB unit")

    unit = match.group("unit").upper() or DEFAULT_UNIT
    if unit not in BYTES_PER_UNIT:
        raise InvalidArgumentError(f"invalid size unit '{match.group('unit')}' in '{text}'; use B, KB or MB")

    n_bytes = math.floor(Fraction(match.group("number")) * BYTES_PER_UNIT[unit])
    if n_bytes <= 0:
        raise InvalidArgumentError(f"size '{text}' must be greater than zero")
    return n_bytes


def _check_bitrate(bitrate_bps: int) -> None:
    if bitrate_bps <= 0:
        raise InvalidArgumentError("bitrate must be greater than zero")


def bytes_for_duration(seconds: int | float | Fraction, bitrate_bps: int) -> int:
    _check_bitrate(bitrate_bps)
    return math.floor(Fraction(seconds) * bitrate_bps / BITS_PER_BYTE)


def duration_for_bytes(n_bytes: int, bitrate_bps: int) -> int:
    # Floor so a window never holds more audio than the byte budget.
    _check_bitrate(bitrate_bps)
    return (n_bytes * BITS_PER_BYTE) // bitrate_bps


def format_size(n_bytes: int) -> str:
    if n_bytes >= BYTES_PER_UNIT["MB"]:
        return f"{n_bytes / BYTES_PER_UNIT['MB']:.2f} MB"
    if n_bytes >= BYTES_PER_UNIT["KB"]:
        return f"{n_bytes / BYTES_PER_UNIT['KB']:.1f} KB"
    return f"{n_bytes} B"


def format_duration(seconds: int | float | Fraction) -> str:
    millis = round(Fraction(seconds) * 1000)
    hours, rest = divmod(millis, 3600 * 1000)
    minutes, rest = divmod(rest, 60 * 1000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:d}:{minutes:02d}:{secs:02d}.{millis:03d}"
