"""
Numeric Input Parsing

Turns raw, user-typed strings into numbers the kernels can trust.
Blank or invalid input becomes 0.0 and never raises; kernels read a zero
as "not enough input yet" and return no result.
"""

import math
import re
from typing import List, Optional, Tuple

# Digits with an optional single decimal point; grouping commas are removed first
_NUMBER_PATTERN = re.compile(r"^\d*\.?\d*$")
_DISALLOWED = re.compile(r"[^0-9.,]")


def is_blank(raw: Optional[str]) -> bool:
    """Return True when a raw value carries no input at all."""
    return raw is None or str(raw).strip() == ""


def sanitize_input(raw: Optional[str]) -> str:
    """
    Filter keystrokes the way numeric input boxes do.

    Signs, exponent markers and letters are dropped so that a negative or
    scientific value is never produced at the input layer. Only the first
    decimal point is kept.

    Args:
        raw: Text as typed

    Returns:
        Cleaned text (may be empty)
    """
    if raw is None:
        return ""
    text = _DISALLOWED.sub("", str(raw))
    if text.count(".") > 1:
        head, _, tail = text.partition(".")
        text = head + "." + tail.replace(".", "")
    return text


def parse_amount(raw: Optional[str]) -> float:
    """
    Parse an amount or percentage field.

    Percentages parse identically; callers divide by 100 where the rate is used.

    Args:
        raw: Raw field value, e.g. "5,00,000" or "7.5"

    Returns:
        Non-negative finite float, 0.0 for blank or invalid input
    """
    if is_blank(raw):
        return 0.0

    text = str(raw).strip().replace(",", "")
    if not text or text == "." or not _NUMBER_PATTERN.match(text):
        return 0.0

    value = float(text)
    if not math.isfinite(value):
        return 0.0
    return value


def parse_count(raw: Optional[str], default: int = 0) -> int:
    """Parse a whole-number field such as people or months, falling back to default."""
    value = int(parse_amount(raw))
    return value if value > 0 else default


def parse_amounts(raw: Optional[str]) -> List[float]:
    """Parse a semicolon-separated list of amounts, skipping blank or zero entries."""
    if is_blank(raw):
        return []
    values = [parse_amount(part) for part in str(raw).split(";")]
    return [v for v in values if v > 0]


def parse_pairs(raw: Optional[str]) -> List[Tuple[float, float]]:
    """
    Parse semicolon-separated "first:second" entries, e.g. "10:150;5:162.5".

    A missing or invalid half parses as 0.0; entries with neither half are skipped.
    """
    if is_blank(raw):
        return []
    pairs = []
    for part in str(raw).split(";"):
        first, _, second = part.partition(":")
        if is_blank(first) and is_blank(second):
            continue
        pairs.append((parse_amount(first), parse_amount(second)))
    return pairs


__all__ = [
    "is_blank",
    "parse_amount",
    "parse_amounts",
    "parse_count",
    "parse_pairs",
    "sanitize_input",
]
