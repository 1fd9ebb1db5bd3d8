"""
Configuration loading.

Priority: environment variables > TOML file > defaults. The TOML file is
taken from NOTEBOOK_DASHBOARD_CONFIG, else ./notebook-dashboard.toml, else
~/.config/notebook-dashboard/config.toml. A missing file means defaults.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notebook_dashboard.models import DEFAULT_SHEETS, SHEET_KEYS, SheetConfig
from notebook_dashboard.normalizer import BASE_COLUMN_COUNT

CONFIG_ENV = "NOTEBOOK_DASHBOARD_CONFIG"
WORKBOOK_ENV = "NOTEBOOK_DASHBOARD_WORKBOOK"
OVERRIDES_ENV = "NOTEBOOK_DASHBOARD_OVERRIDES"
TODAY_ENV = "NOTEBOOK_DASHBOARD_TODAY"
TIMEZONE_ENV = "NOTEBOOK_DASHBOARD_TIMEZONE"

LOCAL_CONFIG = Path("notebook-dashboard.toml")
USER_CONFIG = Path.home() / ".config" / "notebook-dashboard" / "config.toml"

DEFAULT_WORKBOOK_RELATIVE_PATH = Path("src") / "components" / "Koyfin Dashboard and PA nbs Execution Details_Latest 1 - SriniK.xlsx"
DEFAULT_WORKBOOK_ROOTS = (".", "windsurf-dashboard")
DEFAULT_OVERRIDES_PATH = Path("data") / "statusOverrides.json"

CONFIG_TEMPLATE = """\
# notebook-dashboard configuration

[workbook]
# path = "tracking.xlsx"
relative_path = "src/components/Koyfin Dashboard and PA nbs Execution Details_Latest 1 - SriniK.xlsx"
roots = [".", "windsurf-dashboard"]

[overrides]
path = "data/statusOverrides.json"

[sheets]
foundational = "FOUNDATIONAL DATA LOADING FOR K"
koyfinScripts = "Koyfin Automated Scripts"

[parsing]
base_columns = 7

[clock]
# timezone = "Asia/Kolkata"
# today = "2025-11-10"
"""


class ConfigError(ValueError):
    pass


@dataclass
class DashboardConfig:
    workbook_path: Path | None = None
    workbook_relative_path: Path = DEFAULT_WORKBOOK_RELATIVE_PATH
    workbook_roots: tuple[str, ...] = DEFAULT_WORKBOOK_ROOTS
    overrides_path: Path = DEFAULT_OVERRIDES_PATH
    sheets: tuple[SheetConfig, ...] = DEFAULT_SHEETS
    base_column_count: int = BASE_COLUMN_COUNT
    timezone: str | None = None
    today: date | None = None
    source: Path | None = field(default=None, compare=False)

    def workbook_candidates(self, cwd: Path | None = None) -> list[Path]:
        if self.workbook_path is not None:
            return [self.workbook_path]
        base = cwd or Path.cwd()
        return [base / root / self.workbook_relative_path for root in self.workbook_roots]

    def current_day(self) -> date:
        if self.today is not None:
            return self.today
        if self.timezone:
            return datetime.now(ZoneInfo(self.timezone)).date()
        return date.today()


def default_config_path() -> Path | None:
    explicit = os.environ.get(CONFIG_ENV)
    if explicit:
        return Path(explicit)
    if LOCAL_CONFIG.exists():
        return LOCAL_CONFIG
    if USER_CONFIG.exists():
        return USER_CONFIG
    return None


def parse_today(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid date for 'today': {value!r} (expected YYYY-MM-DD)") from exc


def parse_sheets(table: dict[str, Any]) -> tuple[SheetConfig, ...]:
    unknown = sorted(set(table) - set(SHEET_KEYS))
    if unknown:
        raise ConfigError(f"Unknown sheet keys: {', '.join(unknown)}. Supported: {', '.join(SHEET_KEYS)}")
    names = {sheet.key: sheet.name for sheet in DEFAULT_SHEETS}
    for key, name in table.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"Worksheet name for '{key}' must be a non-empty string")
        names[key] = name
    return tuple(SheetConfig(key, names[key]) for key in SHEET_KEYS)


def validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise ConfigError(f"Unknown timezone: {name!r}") from exc
    return name


def config_table(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a table")
    return section


def path_setting(section: dict[str, Any], table: str, key: str) -> Path | None:
    value = section.get(key)
    if not value:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{table}.{key} must be a string")
    return Path(value)


def build_config(raw: dict[str, Any], environ: dict[str, str] | None = None, source: Path | None = None) -> DashboardConfig:
    environ = dict(os.environ) if environ is None else environ
    config = DashboardConfig(source=source)

    workbook = config_table(raw, "workbook")
    config.workbook_path = path_setting(workbook, "workbook", "path") or config.workbook_path
    config.workbook_relative_path = path_setting(workbook, "workbook", "relative_path") or config.workbook_relative_path
    if "roots" in workbook:
        roots = workbook["roots"]
        if not isinstance(roots, list) or not all(isinstance(root, str) for root in roots):
            raise ConfigError("workbook.roots must be a list of strings")
        config.workbook_roots = tuple(roots)

    overrides = config_table(raw, "overrides")
    config.overrides_path = path_setting(overrides, "overrides", "path") or config.overrides_path

    if "sheets" in raw:
        config.sheets = parse_sheets(config_table(raw, "sheets"))

    parsing = config_table(raw, "parsing")
    if "base_columns" in parsing:
        base_columns = parsing["base_columns"]
        if not isinstance(base_columns, int) or base_columns < BASE_COLUMN_COUNT:
            raise ConfigError(f"parsing.base_columns must be an integer >= {BASE_COLUMN_COUNT}")
        config.base_column_count = base_columns

    clock = config_table(raw, "clock")
    if clock.get("timezone"):
        config.timezone = validate_timezone(clock["timezone"])
    if clock.get("today"):
        config.today = parse_today(clock["today"])

    if environ.get(WORKBOOK_ENV):
        config.workbook_path = Path(environ[WORKBOOK_ENV])
    if environ.get(OVERRIDES_ENV):
        config.overrides_path = Path(environ[OVERRIDES_ENV])
    if environ.get(TIMEZONE_ENV):
        config.timezone = validate_timezone(environ[TIMEZONE_ENV])
    if environ.get(TODAY_ENV):
        config.today = parse_today(environ[TODAY_ENV])

    return config


def load_config(path: Path | None = None, environ: dict[str, str] | None = None) -> DashboardConfig:
    config_path = path or default_config_path()
    raw: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            if path is not None:
                raise ConfigError(f"Config file not found: {config_path}")
        else:
            try:
                with open(config_path, "rb") as f:
                    raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Could not parse {config_path}: {exc}") from exc
    return build_config(raw, environ, source=config_path if raw else None)
