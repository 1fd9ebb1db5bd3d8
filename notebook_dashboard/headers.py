"""
Header classification for the dated status/remarks columns.

Tracking workbooks grow two columns per run date, typed by hand:

    "Nov 10 Status" | "Nov 10 Remarks" | "Status 11th Nov (re-run)" | "Remarks 11 Nov"

A header is a status snapshot when it mentions "status" (except the fixed
"Automation Status" metadata column) and a remarks column when it mentions
"remark". Status and remarks columns for the same run share a suffix: the
header with the marker words and punctuation removed.
"""

from __future__ import annotations

import re

AUTOMATION_STATUS = "automation status"
SUFFIX_NOISE_RE = re.compile(r"re-run|re run|rerun|status|remarks|updated|after", re.IGNORECASE)
NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
WHITESPACE_RE = re.compile(r"\s+")


def is_status_header(header: str) -> bool:
    if not header:
        return False
    lowered = header.lower()
    if AUTOMATION_STATUS in lowered:
        return False
    return "status" in lowered


def is_remarks_header(header: str) -> bool:
    return bool(header) and "remark" in header.lower()


def extract_suffix(header: str) -> str:
    stripped = SUFFIX_NOISE_RE.sub("", header.lower())
    return NON_ALNUM_RE.sub("", stripped).strip()


def suffixes_match(status_header: str, remarks_header: str) -> bool:
    return extract_suffix(status_header) == extract_suffix(remarks_header)


def title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())


def format_status_label(header: str) -> str:
    """Display label for a status column: ``"nov_10  STATUS"`` -> ``"Nov 10 Status"``."""
    cleaned = WHITESPACE_RE.sub(" ", header.replace("_", " ")).strip()
    return title_case(cleaned)
