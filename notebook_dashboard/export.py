"""Flatten dashboard records into tables for spreadsheets and CSV files."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from notebook_dashboard.models import DashboardData, StatusEntry, TaskRecord

EXPORT_COLUMNS = [
    "sheet",
    "id",
    "notebook",
    "bucket",
    "automation_status",
    "schedule",
    "estimated_run_time",
    "days",
    "poc",
    "today_label",
    "today_status",
    "today_remarks",
    "latest_label",
    "latest_status",
    "latest_remarks",
    "status_count",
]
EXPORT_FORMATS = ("csv", "xlsx")


def _entry_fields(prefix: str, entry: StatusEntry | None) -> dict[str, str]:
    if entry is None:
        return {f"{prefix}_label": "", f"{prefix}_status": "", f"{prefix}_remarks": ""}
    return {f"{prefix}_label": entry.label, f"{prefix}_status": entry.status, f"{prefix}_remarks": entry.remarks}


def record_row(sheet_key: str, record: TaskRecord) -> dict[str, object]:
    return {
        "sheet": sheet_key,
        "id": record.id,
        "notebook": record.notebook,
        "bucket": record.bucket,
        "automation_status": record.automation_status,
        "schedule": record.schedule,
        "estimated_run_time": record.estimated_run_time,
        "days": record.days,
        "poc": record.poc,
        **_entry_fields("today", record.today_status),
        **_entry_fields("latest", record.latest_status),
        "status_count": len(record.statuses),
    }


def dashboard_frame(dashboard: DashboardData) -> pd.DataFrame:
    rows = [record_row(key, record) for key, records in dashboard.items() for record in records]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def write_export(dashboard: DashboardData, output_path: Path, fmt: str = "xlsx") -> Path:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Supported: {', '.join(EXPORT_FORMATS)}")
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame = dashboard_frame(dashboard)
    if fmt == "csv":
        frame.to_csv(output_path, index=False)
        return output_path

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for key in dashboard:
            # Excel caps sheet titles at 31 characters
            frame[frame["sheet"] == key].to_excel(writer, sheet_name=key[:31], index=False)
    return output_path
