"""Tests for awkbench.bench.results: session records and persistence."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from awkbench.bench.results import BenchFailure, SessionResult, load_results
from awkbench.bench.timing import TIMEOUT, ExecutionFailure
from bench_test_helpers import make_result


def _session() -> SessionResult:
    return SessionResult(
        results=[
            make_result("gawk", "sum.awk", 20),
            make_result("mawk", "sum.awk", 10),
            make_result("mawk", "count.awk", 5),
        ],
        failures=[BenchFailure("goawk", "sum.awk", "exit", "goawk on sum.awk: exit status 2")],
    )


class TestBenchFailure(unittest.TestCase):
    def test_from_exception(self) -> None:
        exc = ExecutionFailure("gawk", "sum.awk", TIMEOUT, "timed out after 1s")
        failure = BenchFailure.from_exception(exc)
        self.assertEqual(failure.candidate, "gawk")
        self.assertEqual(failure.program, "sum.awk")
        self.assertEqual(failure.kind, TIMEOUT)
        self.assertEqual(failure.message, "gawk on sum.awk: timed out after 1s")

    def test_dict(self) -> None:
        failure = BenchFailure("gawk", "sum.awk", "start", "boom")
        self.assertEqual(BenchFailure.from_dict(failure.to_dict()), failure)


class TestSessionResult(unittest.TestCase):
    def test_ranking_is_derived(self) -> None:
        ranking = _session().ranking
        self.assertEqual([e.candidate for e in ranking], ["mawk", "gawk"])

    def test_names_in_first_seen_order(self) -> None:
        session = _session()
        self.assertEqual(session.candidates, ["gawk", "mawk"])
        self.assertEqual(session.programs, ["sum.awk", "count.awk"])

    def test_to_dict(self) -> None:
        data = _session().to_dict(generated="2025-01-01T00:00:00+00:00")
        self.assertEqual(data["generated"], "2025-01-01T00:00:00+00:00")
        self.assertEqual(len(data["results"]), 3)
        self.assertEqual(data["ranking"][0]["awk"], "mawk")
        self.assertEqual(data["failures"][0]["awk"], "goawk")

    def test_from_dict_recomputes_ranking(self) -> None:
        data = _session().to_dict()
        data["ranking"] = []
        restored = SessionResult.from_dict(data)
        self.assertEqual(len(restored.results), 3)
        self.assertEqual(len(restored.failures), 1)
        self.assertEqual(restored.ranking[0].candidate, "mawk")


class TestLoadResults(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_load(self) -> None:
        path = self.tmp / "results.json"
        path.write_text(json.dumps(_session().to_dict(generated="stamp")))
        session, generated = load_results(path)
        self.assertEqual(generated, "stamp")
        self.assertEqual(session.results[1].candidate, "mawk")
        self.assertEqual(session.failures[0].program, "sum.awk")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_results(self.tmp / "nope.json")

    def test_not_a_results_file(self) -> None:
        path = self.tmp / "other.json"
        path.write_text(json.dumps({"packages": []}))
        with self.assertRaises(ValueError):
            load_results(path)

    def test_malformed_entry(self) -> None:
        data = _session().to_dict()
        del data["results"][0]["mean_ns"]
        for document in (data, {"results": [{"program": "sum.awk"}]}, {"results": [1]}):
            with self.subTest(document=document):
                path = self.tmp / "malformed.json"
                path.write_text(json.dumps(document))
                with self.assertRaises(ValueError):
                    load_results(path)

    def test_invalid_json(self) -> None:
        path = self.tmp / "broken.json"
        path.write_text("{not json")
        with self.assertRaises(ValueError):
            load_results(path)


if __name__ == "__main__":
    unittest.main()
