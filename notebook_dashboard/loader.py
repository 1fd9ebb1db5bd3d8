"""
loader.py — workbook bytes to DashboardData

Public API:
    dashboard = load_dashboard_data(workbook_bytes, overrides)
    result    = build_dashboard(workbook_bytes, overrides)

build_dashboard() result keys:
    dashboard   — {sheet_key: [TaskRecord, ...]} with every configured key present
    warnings    — list of warning strings (missing sheets, unreadable workbook)
    sheets      — {sheet_key: {"name", "found", "rows_read", "records"}}
    today       — the calendar day used for "today" matching

Supported inputs: .xlsx / .xlsm (openpyxl), legacy .xls (pandas + xlrd) and
.ods (pandas + odfpy). The format is sniffed from the bytes, not a filename.
A workbook that cannot be read degrades to an empty dashboard; a missing
worksheet degrades to an empty list for that sheet only.
"""

from __future__ import annotations

import io
import logging
import zipfile
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence

from notebook_dashboard.cells import is_blank_row, to_text
from notebook_dashboard.models import DEFAULT_SHEETS, DashboardData, SheetConfig, StatusOverride, TaskRecord, empty_dashboard
from notebook_dashboard.normalizer import BASE_COLUMN_COUNT, build_record

logger = logging.getLogger(__name__)

OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ZIP_SIGNATURE = b"PK\x03\x04"
ODS_MIMETYPE = b"application/vnd.oasis.opendocument.spreadsheet"

Rows = list[list[Any]]


class WorkbookReadError(ValueError):
    pass


# ══════════════════════════════════════════════════════════════════════════════
# FORMAT SNIFFING AND RAW ROW READING
# ══════════════════════════════════════════════════════════════════════════════

def detect_workbook_format(data: bytes) -> str:
    if data.startswith(OLE2_SIGNATURE):
        return "xls"
    if data.startswith(ZIP_SIGNATURE):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                names = set(archive.namelist())
                if "mimetype" in names and archive.read("mimetype").strip() == ODS_MIMETYPE:
                    return "ods"
                if {"EncryptedPackage", "EncryptionInfo"}.issubset(names):
                    raise WorkbookReadError("Password-protected / encrypted workbooks are not supported")
        except zipfile.BadZipFile as exc:
            raise WorkbookReadError(f"Could not read workbook: {exc}") from exc
        return "xlsx"
    raise WorkbookReadError("Could not read workbook: unrecognised file signature")


def _read_openpyxl_rows(data: bytes, sheet_names: Iterable[str]) -> dict[str, Rows | None]:
    from openpyxl import load_workbook

    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        raise WorkbookReadError(f"Could not read workbook: {exc}") from exc

    try:
        result: dict[str, Rows | None] = {}
        for name in sheet_names:
            if name not in workbook.sheetnames:
                result[name] = None
                continue
            result[name] = [list(values) for values in workbook[name].iter_rows(values_only=True)]
        return result
    finally:
        workbook.close()


def _read_pandas_rows(data: bytes, sheet_names: Iterable[str], engine: str) -> dict[str, Rows | None]:
    import pandas as pd

    try:
        frames = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, dtype=object, engine=engine)
    except ImportError as exc:
        package = "xlrd" if engine == "xlrd" else "odfpy"
        raise WorkbookReadError(f".{'xls' if engine == 'xlrd' else 'ods'} files require {package} — run: pip install {package}") from exc
    except Exception as exc:
        raise WorkbookReadError(f"Could not read workbook: {exc}") from exc

    result: dict[str, Rows | None] = {}
    for name in sheet_names:
        frame = frames.get(name)
        if frame is None:
            result[name] = None
            continue
        frame = frame.astype(object).where(frame.notna(), None)
        result[name] = frame.values.tolist()
    return result


def read_workbook_rows(data: bytes, sheet_names: Iterable[str]) -> dict[str, Rows | None]:
    """Raw cell rows per requested sheet; None marks a sheet missing from the workbook."""
    sheet_names = list(sheet_names)
    fmt = detect_workbook_format(data)
    if fmt == "xls":
        return _read_pandas_rows(data, sheet_names, engine="xlrd")
    if fmt == "ods":
        return _read_pandas_rows(data, sheet_names, engine="odf")
    return _read_openpyxl_rows(data, sheet_names)


# ══════════════════════════════════════════════════════════════════════════════
# SHEET NORMALIZATION
# ══════════════════════════════════════════════════════════════════════════════

def split_header(rows: Sequence[Sequence[Any]]) -> tuple[list[str], list[Sequence[Any]]]:
    """The first non-blank row is the header; everything below it is data."""
    for position, row in enumerate(rows):
        if not is_blank_row(row):
            return [to_text(value) for value in row], list(rows[position + 1:])
    return [], []


def normalize_sheet(
    rows: Sequence[Sequence[Any]],
    sheet_key: str,
    overrides: Mapping[str, StatusOverride] | None = None,
    *,
    today: date | None = None,
    base_column_count: int = BASE_COLUMN_COUNT,
) -> list[TaskRecord]:
    headers, data_rows = split_header(rows)
    records: list[TaskRecord] = []
    for row in data_rows:
        # ids count emitted rows only, so blank spacer rows never shift them
        record = build_record(
            row,
            headers,
            sheet_key,
            len(records),
            overrides,
            today=today,
            base_column_count=base_column_count,
        )
        if record is not None:
            records.append(record)
    return records


def build_dashboard(
    data: bytes | None,
    overrides: Mapping[str, StatusOverride] | None = None,
    *,
    sheets: Sequence[SheetConfig] = DEFAULT_SHEETS,
    today: date | None = None,
    base_column_count: int = BASE_COLUMN_COUNT,
) -> dict[str, Any]:
    today = today or date.today()
    overrides = overrides or {}
    dashboard = empty_dashboard(sheets)
    warnings: list[str] = []
    sheet_info = {
        sheet.key: {"name": sheet.name, "found": False, "rows_read": 0, "records": 0}
        for sheet in sheets
    }
    result = {"dashboard": dashboard, "warnings": warnings, "sheets": sheet_info, "today": today}

    if data is None:
        warnings.append("Workbook not found. Returning empty dataset.")
        logger.warning("Workbook not found. Returning empty dataset.")
        return result

    try:
        raw_rows = read_workbook_rows(data, [sheet.name for sheet in sheets])
    except WorkbookReadError as exc:
        warnings.append(f"{exc}. Returning empty dataset.")
        logger.error("Failed to read workbook: %s", exc)
        return result

    for sheet in sheets:
        rows = raw_rows.get(sheet.name)
        if rows is None:
            warnings.append(f"Worksheet '{sheet.name}' not found; '{sheet.key}' is empty.")
            logger.warning("Worksheet %r not found for sheet key %s", sheet.name, sheet.key)
            continue
        records = normalize_sheet(
            rows,
            sheet.key,
            overrides,
            today=today,
            base_column_count=base_column_count,
        )
        dashboard[sheet.key] = records
        sheet_info[sheet.key].update(found=True, rows_read=len(rows), records=len(records))
        logger.info("Loaded %d records from worksheet %r", len(records), sheet.name)

    return result


def load_dashboard_data(
    data: bytes | None,
    overrides: Mapping[str, StatusOverride] | None = None,
    **kwargs: Any,
) -> DashboardData:
    return build_dashboard(data, overrides, **kwargs)["dashboard"]


# ══════════════════════════════════════════════════════════════════════════════
# WORKBOOK LOCATION
# ══════════════════════════════════════════════════════════════════════════════

def resolve_workbook_path(
    candidates: Iterable[Path],
    exists: Callable[[Path], bool] = Path.exists,
) -> Path | None:
    """First existing candidate wins."""
    tried = []
    for candidate in candidates:
        candidate = Path(candidate)
        tried.append(str(candidate))
        if exists(candidate):
            logger.info("Using workbook path: %s", candidate)
            return candidate
        logger.debug("Workbook candidate not found: %s", candidate)
    logger.error("Workbook path could not be resolved. Tried: %s", tried)
    return None


def read_workbook_bytes(path: Path | None) -> bytes | None:
    if path is None:
        return None
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        logger.error("Failed to read workbook %s: %s", path, exc)
        return None


def load_dashboard_file(
    path: Path | None,
    overrides: Mapping[str, StatusOverride] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    return build_dashboard(read_workbook_bytes(path), overrides, **kwargs)
