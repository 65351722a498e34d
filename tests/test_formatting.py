"""Tests for awkbench.formatting: shared text formatting helpers."""

from __future__ import annotations

import unittest

from awkbench.formatting import format_size, format_table, truncate


class TestFormatTable(unittest.TestCase):
    def test_basic(self) -> None:
        headers = ["AWK", "Resolved"]
        rows = [["gawk", "/usr/bin/gawk"], ["mawk", "not found"]]
        text = format_table(headers, rows)
        lines = text.splitlines()
        self.assertEqual(len(lines), 3)  # header + 2 rows
        self.assertEqual(lines[0], "  AWK   Resolved")
        self.assertEqual(lines[1], "  gawk  /usr/bin/gawk")

    def test_truncation(self) -> None:
        text = format_table(["Invocation"], [["a" * 50]], max_col_width={0: 10})
        self.assertIn("aaaaaaa...", text)
        self.assertNotIn("a" * 50, text)

    def test_right_alignment(self) -> None:
        rows = [["alpha", "100"], ["beta", "2"]]
        text = format_table(["Name", "Count"], rows, alignments=["l", "r"])
        lines = text.splitlines()
        self.assertTrue(lines[2].endswith("    2"))
        self.assertTrue(lines[1].endswith("  100"))

    def test_short_rows_padded(self) -> None:
        text = format_table(["A", "B"], [["x"]])
        self.assertEqual(text.splitlines()[1], "  x")

    def test_indent(self) -> None:
        text = format_table(["A"], [["x"]], indent=0)
        self.assertEqual(text.splitlines(), ["A", "x"])

    def test_empty_rows(self) -> None:
        self.assertEqual(len(format_table(["Name", "Value"], []).splitlines()), 1)

    def test_empty_headers(self) -> None:
        self.assertEqual(format_table([], [["a", "b"]]), "")


class TestTruncate(unittest.TestCase):
    def test_short(self) -> None:
        self.assertEqual(truncate("hello", 10), "hello")

    def test_long(self) -> None:
        result = truncate("hello world", 8)
        self.assertEqual(result, "hello...")

    def test_exact_length(self) -> None:
        self.assertEqual(truncate("hello", 5), "hello")

    def test_tiny_limit(self) -> None:
        self.assertEqual(truncate("hello", 2), "..")


class TestFormatSize(unittest.TestCase):
    def test_mib(self) -> None:
        self.assertEqual(format_size(10 << 20), "10.0 MB")
        self.assertEqual(format_size(1536 * 1024), "1.5 MB")
        self.assertEqual(format_size(0), "0.0 MB")


if __name__ == "__main__":
    unittest.main()
