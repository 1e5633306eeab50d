from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

import main as treeline_main

FEED = [
    {"createdAt": "2023-01-01T10:00:00Z", "value": 5},
    {"createdAt": "2023-01-01T20:00:00Z", "value": 3},
    {"createdAt": "2023-01-02T09:00:00Z", "value": 2},
]


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.feed = Path(self._tmp.name) / "trees.json"
        self.feed.write_text(json.dumps(FEED), encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = treeline_main.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_summary_prints_days_and_total(self) -> None:
        code, out, _ = self._run("--feed-file", str(self.feed), "summary")
        self.assertEqual(code, 0)
        self.assertIn("2023-01-01  total=8  cumulative=8", out)
        self.assertIn("2023-01-02  total=2  cumulative=10", out)
        self.assertIn("trees planted: 10", out)

    def test_probe_reports_hovered_point(self) -> None:
        code, out, _ = self._run(
            "--feed-file", str(self.feed), "probe", "--width", "100", "--height", "160", "--pointer-x", "90"
        )
        self.assertEqual(code, 0)
        self.assertIn("hover: 2023-01-02 value=10", out)
        self.assertIn("days: 1st@0 2nd@100", out)

    def test_missing_feed_fails_with_exit_code_one(self) -> None:
        code, _, err = self._run("--log-level", "CRITICAL", "--feed-file", str(self.feed.with_name("nope.json")), "summary")
        self.assertEqual(code, 1)
        self.assertIn("ingestion failed", err)

    def test_bad_timezone_is_an_argument_error(self) -> None:
        code, _, err = self._run("--feed-file", str(self.feed), "--timezone", "Nowhere/Town", "summary")
        self.assertEqual(code, 2)
        self.assertIn("unknown timezone", err)

    def test_bad_log_level_is_an_argument_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run("--log-level", "bogus", "--feed-file", str(self.feed), "summary")
        self.assertEqual(ctx.exception.code, 2)

    def test_log_level_is_case_insensitive(self) -> None:
        code, _, _ = self._run("--log-level", "error", "--feed-file", str(self.feed), "summary")
        self.assertEqual(code, 0)

    def test_wrongly_typed_config_file_is_an_argument_error(self) -> None:
        config = self.feed.with_name("treeline.toml")
        config.write_text("[treeline]\ntimezone = 5\n", encoding="utf-8")
        code, _, err = self._run("--config", str(config), "--feed-file", str(self.feed), "summary")
        self.assertEqual(code, 2)
        self.assertIn("must be a string", err)

    def test_far_pan_still_prints_a_frame(self) -> None:
        code, out, _ = self._run(
            "--feed-file", str(self.feed), "probe", "--width", "100", "--zoom-x=-1e12", "--pointer-x", "5"
        )
        self.assertEqual(code, 0)
        self.assertIn("days: \n", out)
        self.assertIn("hover: 2023-01-02 value=10", out)


if __name__ == "__main__":
    unittest.main()
