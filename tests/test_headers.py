import unittest
from datetime import date, datetime, time

from notebook_dashboard.cells import is_blank_row, to_text
from notebook_dashboard.headers import (
    extract_suffix,
    format_status_label,
    is_remarks_header,
    is_status_header,
    suffixes_match,
)


class HeaderClassifierTests(unittest.TestCase):
    def test_status_headers_exclude_automation_status(self):
        self.assertTrue(is_status_header("Nov 10 Status"))
        self.assertTrue(is_status_header("STATUS_11_10"))
        self.assertTrue(is_status_header("Updated status after re-run"))
        self.assertFalse(is_status_header("Automation Status"))
        self.assertFalse(is_status_header("automation status (current)"))
        self.assertFalse(is_status_header("Nov 10 Remarks"))
        self.assertFalse(is_status_header(""))

    def test_remarks_headers_match_singular_and_plural(self):
        self.assertTrue(is_remarks_header("Nov 10 Remarks"))
        self.assertTrue(is_remarks_header("remark"))
        self.assertFalse(is_remarks_header("Nov 10 Status"))
        self.assertFalse(is_remarks_header(""))

    def test_suffix_strips_marker_words_and_punctuation(self):
        self.assertEqual(extract_suffix("Nov 10 Status"), "nov10")
        self.assertEqual(extract_suffix("Nov-10 Remarks"), "nov10")
        self.assertEqual(extract_suffix("Status 10 Nov (Re-run)"), "10nov")
        self.assertEqual(extract_suffix("Remarks 10 Nov rerun"), "10nov")
        self.assertEqual(extract_suffix("Updated Status after re run"), "")
        self.assertEqual(extract_suffix("Remarks"), "")

    def test_suffixes_pair_status_and_remarks_for_same_run(self):
        self.assertTrue(suffixes_match("Status_11_10", "Remarks_11_10"))
        self.assertTrue(suffixes_match("Status", "Remarks"))
        self.assertFalse(suffixes_match("Nov 10 Status", "Nov 11 Remarks"))
        self.assertFalse(suffixes_match("Nov 10 Status", "10 Nov Remarks"))

    def test_singular_remark_is_not_a_marker_word(self):
        self.assertEqual(extract_suffix("Remark Nov 10"), "remarknov10")
        self.assertFalse(suffixes_match("Nov 10 Status", "Remark Nov 10"))
        self.assertTrue(is_remarks_header("Remark Nov 10"))

    def test_status_label_is_title_cased_and_collapsed(self):
        self.assertEqual(format_status_label("nov_10  STATUS"), "Nov 10 Status")
        self.assertEqual(format_status_label("  10th nov status "), "10th Nov Status")
        self.assertEqual(format_status_label("Status_11_2"), "Status 11 2")


class CellTextTests(unittest.TestCase):
    def test_numbers_render_without_scientific_notation(self):
        self.assertEqual(to_text(45), "45")
        self.assertEqual(to_text(45.0), "45")
        self.assertEqual(to_text(12.5), "12.5")
        self.assertEqual(to_text(1e-7), "0.0000001")
        self.assertEqual(to_text(1e20), "100000000000000000000")
        self.assertEqual(to_text(float("nan")), "")

    def test_other_cell_types(self):
        self.assertEqual(to_text(None), "")
        self.assertEqual(to_text("  Pass  "), "Pass")
        self.assertEqual(to_text(True), "TRUE")
        self.assertEqual(to_text(datetime(2025, 11, 10)), "2025-11-10")
        self.assertEqual(to_text(datetime(2025, 11, 10, 6, 30)), "2025-11-10 06:30:00")
        self.assertEqual(to_text(date(2025, 11, 10)), "2025-11-10")
        self.assertEqual(to_text(time(6, 30)), "06:30:00")

    def test_blank_row_detection(self):
        self.assertTrue(is_blank_row([None, "", "   "]))
        self.assertTrue(is_blank_row([]))
        self.assertFalse(is_blank_row([None, 0]))


if __name__ == "__main__":
    unittest.main()
