"""Tests for awkbench.bench.dataset: sizes and synthetic data generation."""

from __future__ import annotations

import re
import tempfile
import unittest
from pathlib import Path

from awkbench.bench.dataset import (
    CATEGORIES,
    MIB,
    DatasetGenerator,
    parse_size,
    size_label,
)

SIZE = 16 * 1024


class TestSizes(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(size_label(SIZE), "16KB")
        self.assertEqual(size_label(MIB), "1MB")
        self.assertEqual(size_label(500 * MIB), "500MB")
        self.assertEqual(size_label(2 << 30), "2GB")

    def test_parse_labels(self) -> None:
        self.assertEqual(parse_size("1MB"), MIB)
        self.assertEqual(parse_size("10MB"), 10 * MIB)
        self.assertEqual(parse_size("100mb"), 100 * MIB)
        self.assertEqual(parse_size(" 500MB "), 500 * MIB)

    def test_parse_names(self) -> None:
        self.assertEqual(parse_size("small"), MIB)
        self.assertEqual(parse_size("XLarge"), 500 * MIB)

    def test_parse_invalid(self) -> None:
        for text in ("", "2MB", "10", "huge"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError) as cm:
                    parse_size(text)
                self.assertIn("Invalid size", str(cm.exception))


class TestDatasetGenerator(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _lines(self, path: Path) -> list[str]:
        return path.read_text(encoding="utf-8").splitlines()

    def test_reaches_requested_size(self) -> None:
        path = DatasetGenerator().generate_numeric(self.tmp, SIZE)
        size = path.stat().st_size
        self.assertGreaterEqual(size, SIZE)
        self.assertLess(size, SIZE + 200)

    def test_same_seed_same_bytes(self) -> None:
        first = self.tmp / "first"
        second = self.tmp / "second"
        first.mkdir()
        second.mkdir()
        a = DatasetGenerator(7).generate_text(first, SIZE)
        b = DatasetGenerator(7).generate_text(second, SIZE)
        self.assertEqual(a.read_bytes(), b.read_bytes())

    def test_different_seed_differs(self) -> None:
        first = self.tmp / "first"
        second = self.tmp / "second"
        first.mkdir()
        second.mkdir()
        a = DatasetGenerator(1).generate_numeric(first, SIZE)
        b = DatasetGenerator(2).generate_numeric(second, SIZE)
        self.assertNotEqual(a.read_bytes(), b.read_bytes())

    def test_numeric_format(self) -> None:
        path = DatasetGenerator().generate_numeric(self.tmp, SIZE)
        self.assertEqual(path.name, "numeric_16KB.txt")
        pattern = re.compile(r"^\d+ \d+\.\d{6} \d+ \d+\.\d{6} \d+$")
        for line in self._lines(path):
            self.assertRegex(line, pattern)

    def test_text_format(self) -> None:
        path = DatasetGenerator().generate_text(self.tmp, SIZE)
        self.assertEqual(path.name, "text_16KB.txt")
        for line in self._lines(path):
            self.assertTrue(5 <= len(line.split()) <= 15, line)

    def test_csv_format(self) -> None:
        path = DatasetGenerator().generate_csv(self.tmp, SIZE)
        self.assertEqual(path.name, "data_16KB.csv")
        lines = self._lines(path)
        self.assertEqual(lines[0], "id,name,value,category,score")
        ids = [int(line.split(",")[0]) for line in lines[1:]]
        self.assertEqual(ids, list(range(1, len(ids) + 1)))
        for line in lines[1:]:
            self.assertRegex(line, r"^\d+,[a-z]+,\d+\.\d{2},[ABCD],\d{1,2}$")

    def test_keyvalue_format(self) -> None:
        path = DatasetGenerator().generate_keyvalue(self.tmp, SIZE)
        self.assertEqual(path.name, "keyvalue_16KB.txt")
        for line in self._lines(path):
            self.assertRegex(line, r"^key\d{3} \d{1,3}$")

    def test_log_format(self) -> None:
        path = DatasetGenerator().generate_log(self.tmp, SIZE)
        self.assertEqual(path.name, "log_16KB.txt")
        pattern = (
            r"^2024-01-05 \d{2}:\d{2}:\d{2} \d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3} "
            r"[A-Z]+ [A-Z][a-z].*$"
        )
        for line in self._lines(path):
            self.assertRegex(line, pattern)

    def test_generate_all_creates_directory(self) -> None:
        target = self.tmp / "nested" / "data"
        files = DatasetGenerator().generate_all(target, SIZE)
        self.assertEqual(tuple(files), CATEGORIES)
        for path in files.values():
            self.assertTrue(path.is_file())
            self.assertEqual(path.parent, target)


if __name__ == "__main__":
    unittest.main()
