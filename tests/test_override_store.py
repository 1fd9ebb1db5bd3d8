import json
import tempfile
import unittest
from pathlib import Path

from notebook_dashboard.models import StatusOverride
from notebook_dashboard.override_store import OverrideError, OverrideStore, parse_override_map

STAMP = "2025-11-10T09:30:00Z"
LATER = "2025-11-10T11:00:00Z"


class OverrideStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self._tmpdir.name) / "data" / "statusOverrides.json"
        self.store = OverrideStore(self.path)

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_missing_file_reads_empty(self):
        self.assertEqual(self.store.read(), {})

    def test_malformed_file_reads_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(self.store.read(), {})
        self.path.write_text(json.dumps({"a": {"remarks": "no status"}}), encoding="utf-8")
        self.assertEqual(self.store.read(), {})

    def test_one_bad_entry_does_not_drop_the_others(self):
        self.path.parent.mkdir(parents=True)
        stored = {
            "foundational-0-a": {"status": "Pass"},
            "foundational-1-b": {"status": "Fail", "remarks": 5},
        }
        self.path.write_text(json.dumps(stored), encoding="utf-8")
        with self.assertLogs("notebook_dashboard.override_store", level="ERROR") as logs:
            self.assertEqual(list(self.store.read()), ["foundational-0-a"])
        self.assertIn("foundational-1-b", logs.output[0])

        with self.assertLogs("notebook_dashboard.override_store", level="ERROR"):
            merged = self.store.set("foundational-2-c", "Pass", now=STAMP)
        self.assertEqual(sorted(merged), ["foundational-0-a", "foundational-2-c"])
        on_disk = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(on_disk["foundational-0-a"], {"status": "Pass"})

    def test_patch_stamps_and_persists(self):
        merged = self.store.patch({"foundational-0-x": {"status": "Pass", "label": "Nov 10"}}, now=STAMP)
        self.assertEqual(merged["foundational-0-x"], StatusOverride(status="Pass", label="Nov 10", updated_at=STAMP))

        on_disk = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(on_disk, {"foundational-0-x": {"status": "Pass", "label": "Nov 10", "updatedAt": STAMP}})

    def test_patch_layers_fields_over_existing_entry(self):
        self.store.patch({"foundational-0-x": {"status": "Fail", "remarks": "timeout", "label": "Nov 10"}}, now=STAMP)
        merged = self.store.patch({"foundational-0-x": {"status": "Pass"}}, now=LATER)
        self.assertEqual(
            merged["foundational-0-x"],
            StatusOverride(status="Pass", remarks="timeout", label="Nov 10", updated_at=LATER),
        )

    def test_falsy_value_deletes(self):
        self.store.patch({"a": {"status": "Pass"}, "b": {"status": "Fail"}}, now=STAMP)
        merged = self.store.patch({"a": None, "missing": ""}, now=LATER)
        self.assertEqual(list(merged), ["b"])

    def test_invalid_value_is_rejected_without_writing(self):
        self.store.patch({"a": {"status": "Pass"}}, now=STAMP)
        before = self.path.read_text(encoding="utf-8")
        with self.assertRaisesRegex(OverrideError, "Invalid override for b"):
            self.store.patch({"a": None, "b": {"status": 5}})
        with self.assertRaisesRegex(OverrideError, "remarks"):
            self.store.patch({"b": {"status": "Pass", "remarks": ["x"]}})
        with self.assertRaises(OverrideError):
            self.store.patch({"b": {}})
        self.assertEqual(self.path.read_text(encoding="utf-8"), before)

    def test_payload_must_be_mapping(self):
        with self.assertRaisesRegex(OverrideError, "Payload must be an object"):
            self.store.patch(["a"])

    def test_set_and_delete(self):
        self.store.set("a", "Pass", remarks="fixed", now=STAMP)
        self.assertEqual(self.store.read()["a"], StatusOverride(status="Pass", remarks="fixed", updated_at=STAMP))
        self.assertEqual(self.store.delete("a"), {})
        self.assertEqual(self.store.read(), {})

    def test_delete_unknown_id_keeps_map(self):
        self.store.set("a", "Pass", now=STAMP)
        self.assertEqual(list(self.store.delete("zzz")), ["a"])

    def test_write_replaces_whole_document(self):
        self.store.set("a", "Pass", now=STAMP)
        self.store.write({"b": StatusOverride(status="Fail")})
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"b": {"status": "Fail"}})


class ParseOverrideMapTests(unittest.TestCase):
    def test_parses_camel_case_fields(self):
        overrides = parse_override_map({"a": {"status": "Pass", "updatedAt": STAMP}})
        self.assertEqual(overrides, {"a": StatusOverride(status="Pass", updated_at=STAMP)})

    def test_rejects_non_object_document(self):
        with self.assertRaises(OverrideError):
            parse_override_map(["a"])

    def test_skips_malformed_entries(self):
        with self.assertLogs("notebook_dashboard.override_store", level="ERROR"):
            overrides = parse_override_map({"a": {"status": "Pass"}, "b": {"status": 5}, "c": "Pass"})
        self.assertEqual(overrides, {"a": StatusOverride(status="Pass")})


if __name__ == "__main__":
    unittest.main()
