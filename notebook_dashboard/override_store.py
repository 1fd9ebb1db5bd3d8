"""
JSON-file persistence for manual status overrides.

The whole map is read and written as one document:

    {
      "foundational-0-daily-data-pipeline": {
        "status": "Pass",
        "remarks": "re-ran manually",
        "label": "Nov 11",
        "updatedAt": "2025-11-11T09:30:00Z"
      }
    }

Concurrent writers race; the last write wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from notebook_dashboard.contracts import utc_now_iso
from notebook_dashboard.models import StatusOverride, StatusOverrideMap

logger = logging.getLogger(__name__)

OPTIONAL_FIELDS = ("remarks", "label", "updatedAt")


class OverrideError(ValueError):
    pass


def parse_override(record_id: str, value: Any) -> StatusOverride:
    if not isinstance(value, dict) or not isinstance(value.get("status"), str):
        raise OverrideError(f"Invalid override for {record_id}")
    for name in OPTIONAL_FIELDS:
        if value.get(name) is not None and not isinstance(value[name], str):
            raise OverrideError(f"Invalid override for {record_id}: '{name}' must be a string")
    return StatusOverride.from_dict(value)


def parse_override_map(payload: Any) -> StatusOverrideMap:
    """Parse a stored document. Malformed entries are logged and skipped; the rest survive."""
    if not isinstance(payload, dict):
        raise OverrideError("Override document must be a JSON object")
    overrides: StatusOverrideMap = {}
    for key, value in payload.items():
        try:
            overrides[str(key)] = parse_override(str(key), value)
        except OverrideError as exc:
            logger.error("Skipping stored override: %s", exc)
    return overrides


def override_map_to_dict(overrides: Mapping[str, StatusOverride]) -> dict[str, dict[str, str]]:
    return {key: value.to_dict() for key, value in overrides.items()}


class OverrideStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> StatusOverrideMap:
        """Missing or unreadable store files read as an empty map; bad entries are dropped one by one."""
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return parse_override_map(payload or {})
        except (OSError, json.JSONDecodeError, OverrideError) as exc:
            logger.error("Failed to read status overrides from %s: %s", self.path, exc)
            return {}

    def write(self, overrides: Mapping[str, StatusOverride]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(override_map_to_dict(overrides), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )

    def patch(self, payload: Mapping[str, Any], now: str | None = None) -> StatusOverrideMap:
        """
        Merge a partial update into the stored map.

        A falsy value removes that id. Any other value must carry a string
        "status"; its fields are laid over the stored entry and updatedAt is
        stamped. Nothing is written if any value is malformed.
        """
        if not isinstance(payload, Mapping):
            raise OverrideError("Payload must be an object")

        stamp = now or utc_now_iso()
        merged = self.read()
        for record_id, value in payload.items():
            if value is None or (not isinstance(value, dict) and not value):
                merged.pop(record_id, None)
                continue
            parse_override(record_id, value)
            existing = merged[record_id].to_dict() if record_id in merged else {}
            merged[record_id] = StatusOverride.from_dict({**existing, **value, "updatedAt": stamp})

        self.write(merged)
        return merged

    def set(
        self,
        record_id: str,
        status: str,
        remarks: str | None = None,
        label: str | None = None,
        now: str | None = None,
    ) -> StatusOverrideMap:
        value: dict[str, str] = {"status": status}
        if remarks is not None:
            value["remarks"] = remarks
        if label is not None:
            value["label"] = label
        return self.patch({record_id: value}, now=now)

    def delete(self, record_id: str) -> StatusOverrideMap:
        existing = self.read()
        if record_id not in existing:
            return existing
        del existing[record_id]
        self.write(existing)
        return existing
