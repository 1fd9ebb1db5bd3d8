#!/usr/bin/env python3
"""
Generates sample-data/notebook_tracking_sample.xlsx, a hand-maintained style
tracking workbook for trying out notebook-dashboard.

Run from the repo root:
    python sample-data/generate_xlsx.py [YYYY-MM-DD]

The optional date (default: today) decides which status column is "today".

Quirks baked in:
  Sheet "FOUNDATIONAL DATA LOADING FOR K"
    - "Automation Status" metadata column that must not count as a status
    - Status/remarks headers typed three different ways
    - A re-run column pair ("Status 10 Nov Re-run" / "Remarks 10 Nov Rerun")
    - A blank spacer row between notebooks
    - An untouched date column (no status, no remarks) for one notebook
  Sheet "Koyfin Automated Scripts"
    - Ordinal day headers ("10th Nov Status") and underscore headers
  Sheet "Notes"
    - Unrelated sheet that the loader ignores
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import openpyxl

OUTPUT = Path(__file__).parent / "notebook_tracking_sample.xlsx"

today = date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else date.today()
yesterday = today - timedelta(days=1)


def short(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


wb = openpyxl.Workbook()

# ── Sheet 1: foundational ────────────────────────────────────────────────────
ws = wb.active
ws.title = "FOUNDATIONAL DATA LOADING FOR K"
ws.append([
    "Notebook", "Bucket", "Automation Status", "Schedule", "Est. Run Time", "Days", "POC",
    f"{short(yesterday)} Status", f"{short(yesterday)} Remarks",
    f"Status {yesterday.day} {yesterday.strftime('%b')} Re-run", f"Remarks {yesterday.day} {yesterday.strftime('%b')} Rerun",
    f"Status_{today.day}_{today.month}", f"Remarks_{today.day}_{today.month}",
])
ws.append(["Daily Data Pipeline", "Core", "Automated", "Daily 06:00", 45, "Mon-Fri", "Srini",
           "Pass", "", "", "", "Pass", "on time"])
ws.append(["Index Constituents", "Core", "Manual", "Weekly", 12.5, "Mon", "Asha",
           "Fail", "timeout", "Pass", "re-ran after fix", "", ""])
ws.append([None] * 13)
ws.append(["Corporate Actions", "Events", "Automated", "Daily", 30, "Daily", "Ravi",
           "", "", "", "", "", ""])

# ── Sheet 2: koyfinScripts ───────────────────────────────────────────────────
ws_koyfin = wb.create_sheet("Koyfin Automated Scripts")
ws_koyfin.append([
    "Script", "Bucket", "Automation Status", "Schedule", "Run Time", "Days", "Owner",
    f"{yesterday.day}th {yesterday.strftime('%b')} Status", f"{yesterday.day}th {yesterday.strftime('%b')} Remarks",
    f"{today.day}th {today.strftime('%B')} Status", f"{today.day}th {today.strftime('%B')} Remarks",
])
ws_koyfin.append(["Koyfin Prices Sync", "Prices", "Automated", "Hourly", 5, "Daily", "Mei",
                  "Pass", "", "Running", "slow API"])
ws_koyfin.append(["Koyfin Fundamentals", "Fundamentals", "Automated", "Daily", 20, "Daily", "Mei",
                  "Pass", "", "", ""])

# ── Sheet 3: unrelated ───────────────────────────────────────────────────────
ws_notes = wb.create_sheet("Notes")
ws_notes.append(["Anything on this tab is ignored by the loader"])

wb.save(OUTPUT)
print(f"Created: {OUTPUT}")
