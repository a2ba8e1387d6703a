from __future__ import annotations

import re

from misc.errors import MalformedDuration

DURATION_RE = re.compile(r"(\d+)([mhd])", re.ASCII)

_UNIT_MS = {
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}

# int() refuses very long digit strings (sys.get_int_max_str_digits)
_DIGIT_CHUNK = 1000


def _digits_to_int(digits: str) -> int:
    value = 0
    for start in range(0, len(digits), _DIGIT_CHUNK):
        chunk = digits[start : start + _DIGIT_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def parse_duration_ms(token: str) -> int:
    match = DURATION_RE.fullmatch(token or "")
    if not match:
        raise MalformedDuration(token)
    return _digits_to_int(match.group(1)) * _UNIT_MS[match.group(2)]
