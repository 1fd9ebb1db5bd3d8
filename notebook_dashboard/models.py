from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

FOUNDATIONAL = "foundational"
KOYFIN_SCRIPTS = "koyfinScripts"
SHEET_KEYS = (FOUNDATIONAL, KOYFIN_SCRIPTS)

MANUAL_OVERRIDE_LABEL = "Manual Override"

METADATA_FIELDS = (
    "notebook",
    "bucket",
    "automation_status",
    "schedule",
    "estimated_run_time",
    "days",
    "poc",
)


@dataclass(frozen=True)
class SheetConfig:
    key: str   # stable key used in record ids
    name: str  # exact worksheet title


DEFAULT_SHEETS = (
    SheetConfig(FOUNDATIONAL, "FOUNDATIONAL DATA LOADING FOR K"),
    SheetConfig(KOYFIN_SCRIPTS, "Koyfin Automated Scripts"),
)


@dataclass(frozen=True)
class StatusEntry:
    label: str
    status: str
    remarks: str

    def has_content(self) -> bool:
        return bool(self.status.strip() or self.remarks.strip())

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "status": self.status, "remarks": self.remarks}


@dataclass(frozen=True)
class StatusOverride:
    status: str
    remarks: str | None = None
    label: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "StatusOverride":
        return cls(
            status=payload["status"],
            remarks=payload.get("remarks"),
            label=payload.get("label"),
            updated_at=payload.get("updatedAt"),
        )

    def to_dict(self) -> dict[str, str]:
        payload = {"status": self.status}
        if self.remarks is not None:
            payload["remarks"] = self.remarks
        if self.label is not None:
            payload["label"] = self.label
        if self.updated_at is not None:
            payload["updatedAt"] = self.updated_at
        return payload


StatusOverrideMap = dict[str, StatusOverride]


@dataclass
class TaskRecord:
    id: str
    notebook: str
    bucket: str
    automation_status: str
    schedule: str
    estimated_run_time: str
    days: str
    poc: str
    statuses: list[StatusEntry] = field(default_factory=list)
    latest_status: StatusEntry | None = None
    today_status: StatusEntry | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "notebook": self.notebook,
            "bucket": self.bucket,
            "automationStatus": self.automation_status,
            "schedule": self.schedule,
            "estimatedRunTime": self.estimated_run_time,
            "days": self.days,
            "poc": self.poc,
            "statuses": [entry.to_dict() for entry in self.statuses],
            "latestStatus": self.latest_status.to_dict() if self.latest_status else None,
            "todayStatus": self.today_status.to_dict() if self.today_status else None,
        }


DashboardData = dict[str, list[TaskRecord]]


def empty_dashboard(sheets=DEFAULT_SHEETS) -> DashboardData:
    return {sheet.key: [] for sheet in sheets}


def dashboard_to_dict(dashboard: DashboardData) -> dict[str, list[dict[str, Any]]]:
    return {key: [record.to_dict() for record in records] for key, records in dashboard.items()}
