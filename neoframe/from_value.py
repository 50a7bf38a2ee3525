"""Conversion of msgpack-style setting values into typed Python values.

Each parser takes the current value of a setting and the value received
from the editor. It returns the converted value, or the current value
unchanged (after logging an error) when the received value has the wrong
type.
"""

from __future__ import annotations

import logging
import math
import struct
from typing import Any

_log = logging.getLogger(__name__)

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_U64_MAX = (1 << 64) - 1
_U32_MASK = (1 << 32) - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_i64(value: Any) -> bool:
    return _is_int(value) and _I64_MIN <= value <= _I64_MAX


def _is_u64(value: Any) -> bool:
    return _is_int(value) and 0 <= value <= _U64_MAX


def _to_f32(number: float) -> float:
    """Round a number to the nearest single-precision float."""
    try:
        return struct.unpack("f", struct.pack("f", float(number)))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def parse_f32(current: float, value: Any) -> float:
    """Accept a float or any 64-bit integer, rounded to single precision."""
    if isinstance(value, float):
        return _to_f32(value)
    if _is_i64(value) or _is_u64(value):
        return _to_f32(float(value))
    _log.error("Setting expected an f32, but received %r", value)
    return current


def parse_u64(current: int, value: Any) -> int:
    """Accept an unsigned 64-bit integer."""
    if _is_u64(value):
        return value
    _log.error("Setting expected a u64, but received %r", value)
    return current


def parse_u32(current: int, value: Any) -> int:
    """Accept an unsigned 64-bit integer, truncated to 32 bits."""
    if _is_u64(value):
        return value & _U32_MASK
    _log.error("Setting expected a u32, but received %r", value)
    return current


def parse_i32(current: int, value: Any) -> int:
    """Accept a signed 64-bit integer, truncated to a signed 32-bit value."""
    if _is_i64(value):
        truncated = value & _U32_MASK
        return truncated - (1 << 32) if truncated >= (1 << 31) else truncated
    _log.error("Setting expected an i32, but received %r", value)
    return current


def parse_string(current: str, value: Any) -> str:
    """Accept a string."""
    if isinstance(value, str):
        return value
    _log.error("Setting expected a string, but received %r", value)
    return current


def parse_bool(current: bool, value: Any) -> bool:
    """Accept a boolean, or an unsigned integer where non-zero means true."""
    if isinstance(value, bool):
        return value
    if _is_u64(value):
        return value != 0
    _log.error("Setting expected a bool or 0/1, but received %r", value)
    return current