import re
from typing import Optional

_DIGITS = re.compile(r"[0-9]+")
_DATE = re.compile(r"([0-9]{2})-([0-9]{2})-([0-9]{4})")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Strict non-negative integer; ``None`` for anything else ("1.5", "", "x")."""
    if raw is None or not _DIGITS.fullmatch(raw):
        return None
    return int(raw)


def is_valid_date(raw: Optional[str]) -> bool:
    """``DD-MM-YYYY`` with day 1-31 and month 1-12 (Hijri or Gregorian)."""
    if raw is None:
        return False
    match = _DATE.fullmatch(raw)
    if not match:
        return False
    day, month, _ = (int(part) for part in match.groups())
    return 1 <= day <= 31 and 1 <= month <= 12
