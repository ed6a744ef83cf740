from __future__ import annotations
import math
import re
from typing import Optional, Union

Number = Union[int, float]

NAN = float("nan")

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX = {"0x": 16, "0o": 8, "0b": 2}
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}

def to_number(text: Optional[str]) -> Number:
    """
    Loose numeric coercion of a beatmap token.
    Missing token -> NaN, blank token -> 0, garbage -> NaN.
    Integral decimal literals stay int so they serialize without a fraction.
    """
    if text is None:
        return NAN
    s = text.strip()
    if not s:
        return 0
    if _INT_RE.match(s):
        return int(s)
    if _FLOAT_RE.match(s):
        return float(s)
    prefix = s[:2].lower()
    if prefix in _RADIX:
        try:
            return int(s[2:], _RADIX[prefix])
        except ValueError:
            return NAN
    return _INFINITY.get(s, NAN)

def is_nan(value) -> bool:
    return isinstance(value, float) and math.isnan(value)

def to_flags(value: Number) -> int:
    """Truncate to a signed 32-bit int for bit tests; NaN/inf count as 0."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = int(value)
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value
