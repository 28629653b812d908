"""Odds and fraction parsing for admin-entered prices."""

import re
from typing import Optional

_DECIMAL_RE = re.compile(r"^\d+(\.\d+)?$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")


def _clean(text) -> str:
    return str(text if text is not None else "").strip()


def parse_fractional_or_decimal(text) -> Optional[float]:
    """Parse an odds expression into decimal odds.

    Accepts decimal odds ("3.5", "3") as-is and fractional odds ("5/1",
    "11/4") as ``1 + num/den``. Returns None for anything else, including
    a zero denominator and a zero numerator ("0/1" would pay nothing).
    """
    s = _clean(text)
    if _DECIMAL_RE.match(s):
        return float(s)

    m = _FRACTION_RE.match(s)
    if not m:
        return None

    num, den = int(m.group(1)), int(m.group(2))
    if not den or not num:
        return None
    return 1 + num / den


def parse_fraction(text) -> Optional[float]:
    """Parse a bare fraction or decimal into a ratio ("1/4" -> 0.25)."""
    s = _clean(text)
    if _DECIMAL_RE.match(s):
        return float(s)

    m = _FRACTION_RE.match(s)
    if not m:
        return None

    num, den = int(m.group(1)), int(m.group(2))
    if not den:
        return None
    return num / den
