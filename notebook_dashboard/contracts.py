"""Shared versioned contracts for notebook-dashboard JSON outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

CONTRACT_VERSIONS = {
    "dashboard.load": "1.0.0",
    "dashboard.report": "1.0.0",
    "dashboard.overrides": "1.0.0",
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    version = CONTRACT_VERSIONS[name]
    return {"name": name, "version": version}


def dashboard_metrics(result: dict[str, Any]) -> dict[str, Any]:
    dashboard = result["dashboard"]
    records = [record for sheet_records in dashboard.values() for record in sheet_records]
    return {
        "today": result["today"].isoformat(),
        "records_total": len(records),
        "records_per_sheet": {key: len(sheet_records) for key, sheet_records in dashboard.items()},
        "records_with_today_status": sum(1 for record in records if record.today_status is not None),
        "sheets_missing": sorted(key for key, info in result["sheets"].items() if not info["found"]),
    }


def build_run_summary(
    *,
    tool: str,
    command: str,
    input_path: Path | None,
    status: str = "ok",
    output_path: Path | None = None,
    metrics: dict[str, Any] | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "tool": tool,
        "command": command,
        "status": status,
        "generated_at": utc_now_iso(),
        "input_file": str(input_path) if input_path else None,
        "output_file": str(output_path) if output_path else None,
        "warnings_count": len(warnings or []),
        "warnings": list(warnings or []),
        "metrics": metrics or {},
    }
