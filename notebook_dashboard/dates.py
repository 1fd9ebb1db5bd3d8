"""
Best-effort (day, month) extraction from hand-typed status headers.

Headers look like "Nov 10", "10th Nov Status", "Status_11_10" or
"Updated Status 3rd December (re-run)". There is no year and no validation
against the calendar: the result is only used to answer "is this column
today's run?", so an unparseable header is a normal outcome and yields None.
"""

from __future__ import annotations

import re
from typing import NamedTuple

MONTH_LOOKUP = {
    "jan": 0,
    "january": 0,
    "feb": 1,
    "february": 1,
    "mar": 2,
    "march": 2,
    "apr": 3,
    "april": 3,
    "may": 4,
    "jun": 5,
    "june": 5,
    "jul": 6,
    "july": 6,
    "aug": 7,
    "august": 7,
    "sep": 8,
    "sept": 8,
    "september": 8,
    "oct": 9,
    "october": 9,
    "nov": 10,
    "november": 10,
    "dec": 11,
    "december": 11,
}

NOISE_RE = re.compile(
    r"\b(?:re-run|re run|rerun|status|remarks|updated|after|latest|history|bucket|automation)\b",
    re.IGNORECASE,
)
ORDINAL_RE = re.compile(r"\b(\d+)(?:st|nd|rd|th)\b")
NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


class StatusDate(NamedTuple):
    day: int
    month: int  # 0 = January


def tokenize_label(label: str) -> list[str]:
    cleaned = label.lower().replace("_", " ")
    cleaned = NOISE_RE.sub(" ", cleaned)
    cleaned = ORDINAL_RE.sub(r"\1", cleaned)
    cleaned = NON_ALNUM_RE.sub(" ", cleaned).strip()
    return cleaned.split()


def extract_status_date(label: str) -> StatusDate | None:
    """
    Resolve a header label to a StatusDate.

    Month names win the month slot when they come first; the first number in
    1..31 is the day and a later number in 1..12 fills the month. When either
    slot is still open and two numbers were seen, fall back to positional
    day-then-month.
    """
    if not label:
        return None

    day: int | None = None
    month: int | None = None
    digits: list[int] = []

    for token in tokenize_label(label):
        if token in MONTH_LOOKUP:
            if month is None:
                month = MONTH_LOOKUP[token]
            continue
        if not token.isdigit():
            continue
        value = int(token)
        digits.append(value)
        if 1 <= value <= 31 and day is None:
            day = value
        elif 1 <= value <= 12 and month is None:
            month = value - 1

    if (day is None or month is None) and len(digits) >= 2:
        if day is None:
            day = digits[0]
        if month is None and 1 <= digits[1] <= 12:
            month = digits[1] - 1

    if day is None or month is None:
        return None
    return StatusDate(day=day, month=month)

