"""
Turn one worksheet row into a TaskRecord.

Columns 0-6 are fixed metadata (notebook, bucket, automation status,
schedule, estimated run time, days, POC). Every column after that is either
a dated status column, its remarks column, or ignored.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping, Sequence

from notebook_dashboard.cells import cell_at, is_blank_row
from notebook_dashboard.headers import format_status_label, is_remarks_header, is_status_header, suffixes_match
from notebook_dashboard.models import METADATA_FIELDS, StatusEntry, StatusOverride, TaskRecord
from notebook_dashboard.overrides import apply_override
from notebook_dashboard.resolver import find_status_for_today, select_latest_status

BASE_COLUMN_COUNT = len(METADATA_FIELDS)
SLUG_RE = re.compile(r"[^a-z0-9]+")


def create_id(sheet_key: str, row_index: int, notebook: str) -> str:
    slug = SLUG_RE.sub("-", notebook.lower())
    return f"{sheet_key}-{row_index}-{slug or 'item'}"


def find_remarks_index(headers: Sequence[str], status_index: int, consumed: list[bool]) -> int | None:
    for index in range(status_index + 1, len(headers)):
        if consumed[index] or not is_remarks_header(headers[index]):
            continue
        if suffixes_match(headers[status_index], headers[index]):
            return index
    return None


def collect_statuses(
    row: Sequence[Any],
    headers: Sequence[str],
    base_column_count: int = BASE_COLUMN_COUNT,
) -> list[StatusEntry]:
    """Pair status and remarks columns left to right, first fit, each column used once."""
    entries: list[StatusEntry] = []
    consumed = [False] * len(headers)

    for index in range(base_column_count, len(headers)):
        if consumed[index] or not is_status_header(headers[index]):
            continue

        remarks_index = find_remarks_index(headers, index, consumed)
        consumed[index] = True
        if remarks_index is not None:
            consumed[remarks_index] = True

        status = cell_at(row, index)
        remarks = cell_at(row, remarks_index) if remarks_index is not None else ""
        # untouched date columns stay out of the history
        if not status and not remarks:
            continue

        entries.append(StatusEntry(label=format_status_label(headers[index]), status=status, remarks=remarks))

    return entries


def build_record(
    row: Sequence[Any],
    headers: Sequence[str],
    sheet_key: str,
    row_index: int,
    overrides: Mapping[str, StatusOverride] | None = None,
    *,
    today: date | None = None,
    base_column_count: int = BASE_COLUMN_COUNT,
) -> TaskRecord | None:
    if is_blank_row(row):
        return None

    metadata = {name: cell_at(row, position) for position, name in enumerate(METADATA_FIELDS)}
    statuses = collect_statuses(row, headers, base_column_count)
    today_status = find_status_for_today(statuses, today)
    latest_status = select_latest_status(statuses, today_status)

    record = TaskRecord(
        id=create_id(sheet_key, row_index, metadata["notebook"]),
        statuses=statuses,
        latest_status=latest_status,
        today_status=today_status,
        **metadata,
    )
    return apply_override(record, (overrides or {}).get(record.id))
