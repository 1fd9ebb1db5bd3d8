"""Merge a manually entered status into a record that has none for today."""

from __future__ import annotations

import logging
from dataclasses import replace

from notebook_dashboard.models import MANUAL_OVERRIDE_LABEL, StatusEntry, StatusOverride, TaskRecord

logger = logging.getLogger(__name__)


def override_entry(override: StatusOverride) -> StatusEntry:
    return StatusEntry(
        label=override.label or MANUAL_OVERRIDE_LABEL,
        status=override.status,
        remarks=override.remarks or "",
    )


def apply_override(record: TaskRecord, override: StatusOverride | None) -> TaskRecord:
    """
    Append the override as today's status unless the sheet already has one.

    Spreadsheet data always wins: once a column for today is filled in, the
    stored override is ignored for that record.
    """
    if override is None:
        return record
    if record.today_status is not None:
        logger.debug("Ignoring override for %s: sheet already has a status for today", record.id)
        return record

    entry = override_entry(override)
    return replace(
        record,
        statuses=[*record.statuses, entry],
        today_status=entry,
        latest_status=entry,
    )
