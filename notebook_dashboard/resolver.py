"""Pick the status entry for today and the most recent meaningful entry."""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from notebook_dashboard.dates import extract_status_date
from notebook_dashboard.models import StatusEntry

logger = logging.getLogger(__name__)


def find_status_for_today(entries: Sequence[StatusEntry], today: date | None = None) -> StatusEntry | None:
    """
    Return the first entry (column order) whose label parses to today's day
    and month and which carries a status or a remark.

    Two headers parsing to the same date resolve to the leftmost one.
    """
    today = today or date.today()
    month = today.month - 1
    for entry in entries:
        if not entry.label:
            continue
        parsed = extract_status_date(entry.label)
        if parsed is None:
            continue
        matched = parsed.day == today.day and parsed.month == month
        logger.debug("Label %r parsed as day=%s month=%s (today match: %s)", entry.label, parsed.day, parsed.month, matched)
        if matched and entry.has_content():
            return entry
    return None


def select_latest_status(entries: Sequence[StatusEntry], today_status: StatusEntry | None) -> StatusEntry | None:
    if not entries:
        return None
    if today_status is not None:
        return today_status
    for entry in reversed(entries):
        if entry.status.strip():
            return entry
    return None
