from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from notebook_dashboard import __version__ as TOOL_VERSION
from notebook_dashboard.config import CONFIG_TEMPLATE, ConfigError, DashboardConfig, load_config, parse_today
from notebook_dashboard.contracts import build_contract, build_run_summary, dashboard_metrics
from notebook_dashboard.dates import extract_status_date
from notebook_dashboard.export import EXPORT_FORMATS, write_export
from notebook_dashboard.headers import extract_suffix, format_status_label, is_remarks_header, is_status_header
from notebook_dashboard.loader import load_dashboard_file, resolve_workbook_path
from notebook_dashboard.logging_config import setup_logging
from notebook_dashboard.models import dashboard_to_dict
from notebook_dashboard.override_store import OverrideError, OverrideStore, override_map_to_dict

TOOL_NAME = "notebook-dashboard"
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_PARTIAL = 6


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class NotebookDashboardArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "verbose", False):
        setup_logging(logging.DEBUG)
    elif getattr(args, "quiet", False):
        setup_logging(logging.ERROR)
    else:
        setup_logging(logging.WARNING)


def resolve_config(args: argparse.Namespace) -> DashboardConfig:
    try:
        config = load_config(Path(args.config) if getattr(args, "config", None) else None)
        if getattr(args, "overrides", None):
            config.overrides_path = Path(args.overrides)
        if getattr(args, "today", None):
            config.today = parse_today(args.today)
    except ConfigError as exc:
        raise CliError(str(exc), EXIT_COMMAND_ERROR) from exc
    return config


def resolve_input(args: argparse.Namespace, config: DashboardConfig) -> Path:
    if getattr(args, "input", None):
        path = Path(args.input)
        if not path.exists():
            raise CliError(f"Input file not found: {path}", EXIT_COMMAND_ERROR)
        return path
    path = resolve_workbook_path(config.workbook_candidates())
    if path is None:
        tried = ", ".join(str(candidate) for candidate in config.workbook_candidates())
        raise CliError(f"Workbook not found. Tried: {tried}", EXIT_COMMAND_ERROR)
    return path


def load_for_command(args: argparse.Namespace) -> tuple[DashboardConfig, Path, dict[str, Any]]:
    config = resolve_config(args)
    input_path = resolve_input(args, config)
    overrides = OverrideStore(config.overrides_path).read()
    result = load_dashboard_file(
        input_path,
        overrides,
        sheets=config.sheets,
        today=config.current_day(),
        base_column_count=config.base_column_count,
    )
    return config, input_path, result


def exit_code_for_result(result: dict[str, Any]) -> int:
    if not result["warnings"]:
        return EXIT_SUCCESS
    if not any(info["found"] for info in result["sheets"].values()):
        return EXIT_PARSE_FAILED
    return EXIT_PARTIAL


def format_day(result: dict[str, Any]) -> str:
    today = result["today"]
    return f"{today.day} {MONTH_NAMES[today.month - 1]}"


def render_report_text(result: dict[str, Any], input_path: Path) -> str:
    lines = [
        "notebook-dashboard report",
        f"File: {input_path}",
        f"Today: {format_day(result)}",
    ]
    for key, records in result["dashboard"].items():
        info = result["sheets"][key]
        found = "" if info["found"] else " (worksheet missing)"
        with_today = sum(1 for record in records if record.today_status is not None)
        lines.append("")
        lines.append(f"[{key}] {info['name']}{found}")
        lines.append(f"Records: {len(records)}  With today's status: {with_today}")
        for record in records:
            if record.today_status is not None:
                entry, marker = record.today_status, "today"
            elif record.latest_status is not None:
                entry, marker = record.latest_status, "latest"
            else:
                lines.append(f"- {record.notebook or record.id}: no status")
                continue
            remarks = f" ({entry.remarks})" if entry.remarks else ""
            lines.append(f"- {record.notebook or record.id}: {entry.status or '[blank]'}{remarks} [{marker}: {entry.label}]")
    if result["warnings"]:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"- {warning}" for warning in result["warnings"])
    return "\n".join(lines) + "\n"


def render_header_explanation(header: str) -> dict[str, Any]:
    parsed = extract_status_date(header)
    return {
        "header": header,
        "is_status": is_status_header(header),
        "is_remarks": is_remarks_header(header),
        "suffix": extract_suffix(header),
        "label": format_status_label(header),
        "date": {"day": parsed.day, "month": parsed.month} if parsed else None,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = NotebookDashboardArgumentParser(prog=TOOL_NAME, description="Normalize notebook execution tracking workbooks.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--config", help="Config file path (TOML)")
        sub.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
        sub.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    def add_workbook(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("input", nargs="?", default=None, help="Workbook path (defaults to the configured location)")
        sub.add_argument("--overrides", help="Status override JSON path")
        sub.add_argument("--today", help="Treat this ISO date (YYYY-MM-DD) as today")

    load = subparsers.add_parser("load", help="Parse the workbook into dashboard JSON.")
    add_workbook(load)
    load.add_argument("--output", help="Write the JSON payload to this path")
    load.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    add_common(load)

    report = subparsers.add_parser("report", help="Summarize today's status per notebook.")
    add_workbook(report)
    report.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    add_common(report)

    export = subparsers.add_parser("export", help="Export a flat table of records.")
    add_workbook(export)
    export.add_argument("--output", required=True, help="Output file path")
    export.add_argument("--format", choices=list(EXPORT_FORMATS), default=None, help="Output format (default: from --output suffix)")
    add_common(export)

    override = subparsers.add_parser("override", help="Manage manual status overrides.")
    override_sub = override.add_subparsers(dest="override_command", required=True)
    override_set = override_sub.add_parser("set", help="Set today's status for a record id.")
    override_set.add_argument("record_id", help="Record id, e.g. foundational-0-daily-data-pipeline")
    override_set.add_argument("--status", required=True, help="Status text")
    override_set.add_argument("--remarks", help="Remarks text")
    override_set.add_argument("--label", help="Label shown in status history")
    override_clear = override_sub.add_parser("clear", help="Remove the override for a record id.")
    override_clear.add_argument("record_id", help="Record id")
    override_list = override_sub.add_parser("list", help="Show stored overrides.")
    override_list.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    for sub in (override_set, override_clear, override_list):
        sub.add_argument("--overrides", help="Status override JSON path")
        add_common(sub)

    config = subparsers.add_parser("config", help="Config helpers.")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_init = config_sub.add_parser("init", help="Write a starter config file.")
    config_init.add_argument("--path", default="notebook-dashboard.toml", help="Config output path")
    config_init.add_argument("--force", action="store_true", help="Overwrite an existing file")

    explain = subparsers.add_parser("explain-header", help="Show how a column header is classified.")
    explain.add_argument("header", help="Header text, e.g. 'Status 10th Nov'")
    explain.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    subparsers.add_parser("version", help="Show version.")
    return parser


def run_load(args: argparse.Namespace) -> int:
    _, input_path, result = load_for_command(args)
    output_path = Path(args.output) if args.output else None
    payload = {
        "contract": build_contract("dashboard.load"),
        "schema_version": build_contract("dashboard.load")["version"],
        "tool_version": TOOL_VERSION,
        "data": dashboard_to_dict(result["dashboard"]),
        "run_summary": build_run_summary(
            tool=TOOL_NAME,
            command="load",
            input_path=input_path,
            status="ok" if not result["warnings"] else "partial",
            output_path=output_path,
            metrics=dashboard_metrics(result),
            warnings=result["warnings"],
        ),
    }
    if output_path is not None:
        write_text(output_path, json_dumps(payload))
        emit_human(f"Dashboard written: {output_path}", quiet=args.quiet or args.json)
    if args.json or output_path is None:
        print(json_dumps(payload))
    return exit_code_for_result(result)


def run_report(args: argparse.Namespace) -> int:
    _, input_path, result = load_for_command(args)
    if args.json:
        payload = {
            "contract": build_contract("dashboard.report"),
            "schema_version": build_contract("dashboard.report")["version"],
            "tool_version": TOOL_VERSION,
            "today": {key: [record.to_dict() for record in records if record.today_status] for key, records in result["dashboard"].items()},
            "run_summary": build_run_summary(
                tool=TOOL_NAME,
                command="report",
                input_path=input_path,
                status="ok" if not result["warnings"] else "partial",
                metrics=dashboard_metrics(result),
                warnings=result["warnings"],
            ),
        }
        print(json_dumps(payload))
    else:
        print(render_report_text(result, input_path), end="")
    return exit_code_for_result(result)


def run_export(args: argparse.Namespace) -> int:
    output_path = Path(args.output)
    fmt = args.format or output_path.suffix.lower().lstrip(".")
    if fmt not in EXPORT_FORMATS:
        raise CliError(
            f"Cannot infer export format from '{output_path.name}'. Use --format {'/'.join(EXPORT_FORMATS)}.",
            EXIT_COMMAND_ERROR,
        )
    _, _, result = load_for_command(args)
    write_export(result["dashboard"], output_path, fmt)
    emit_human(f"Export written: {output_path}", quiet=args.quiet)
    for warning in result["warnings"]:
        emit_human(f"Warning: {warning}", quiet=args.quiet)
    return exit_code_for_result(result)


def run_override(args: argparse.Namespace) -> int:
    store = OverrideStore(resolve_config(args).overrides_path)
    try:
        if args.override_command == "set":
            store.set(args.record_id, args.status, remarks=args.remarks, label=args.label)
            emit_human(f"Override saved for {args.record_id}: {args.status}", quiet=args.quiet)
            return EXIT_SUCCESS
        if args.override_command == "clear":
            existed = args.record_id in store.read()
            store.delete(args.record_id)
            emit_human(
                f"Override removed for {args.record_id}" if existed else f"No override stored for {args.record_id}",
                quiet=args.quiet,
            )
            return EXIT_SUCCESS
    except OverrideError as exc:
        raise CliError(str(exc), EXIT_COMMAND_ERROR) from exc

    overrides = store.read()
    if args.json:
        print(json_dumps({
            "contract": build_contract("dashboard.overrides"),
            "schema_version": build_contract("dashboard.overrides")["version"],
            "overrides": override_map_to_dict(overrides),
        }))
    elif not overrides:
        print("No overrides stored.")
    else:
        for record_id, value in sorted(overrides.items()):
            remarks = f" ({value.remarks})" if value.remarks else ""
            print(f"{record_id}: {value.status}{remarks} [{value.label or 'Manual Override'}] {value.updated_at or ''}".rstrip())
    return EXIT_SUCCESS


def run_config_init(args: argparse.Namespace) -> int:
    config_path = Path(args.path)
    if config_path.exists() and not args.force:
        raise CliError(f"Refusing to overwrite existing config: {config_path}", EXIT_COMMAND_ERROR)
    write_text(config_path, CONFIG_TEMPLATE)
    emit_human(f"Config written: {config_path}")
    return EXIT_SUCCESS


def run_explain_header(args: argparse.Namespace) -> int:
    payload = render_header_explanation(args.header)
    if args.json:
        print(json_dumps(payload))
        return EXIT_SUCCESS
    date_text = "none"
    if payload["date"]:
        date_text = f"day {payload['date']['day']}, {MONTH_NAMES[payload['date']['month']]}"
    print(
        "\n".join(
            [
                f"Header: {payload['header']}",
                f"Status column: {'yes' if payload['is_status'] else 'no'}",
                f"Remarks column: {'yes' if payload['is_remarks'] else 'no'}",
                f"Pairing suffix: {payload['suffix'] or '[empty]'}",
                f"Label: {payload['label']}",
                f"Date: {date_text}",
            ]
        )
    )
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        configure_logging(args)
        if args.command == "load":
            return run_load(args)
        if args.command == "report":
            return run_report(args)
        if args.command == "export":
            return run_export(args)
        if args.command == "override":
            return run_override(args)
        if args.command == "config":
            if args.config_command == "init":
                return run_config_init(args)
        if args.command == "explain-header":
            return run_explain_header(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
