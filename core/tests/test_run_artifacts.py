"""Tests for run artifact writer."""

import json
import tempfile
import unittest
from pathlib import Path

from core.errors import OutputIOError
from core.run_artifacts import write_run_report


class TestRunArtifacts(unittest.TestCase):
    def test_write_run_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_run_report(
                report={"status": "success", "types_bound": 1},
                run_id="run-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            self.assertEqual(Path(path).name, "bindgen-run-123.json")
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["run_id"], "run-123")
            self.assertEqual(payload["status"], "success")
            self.assertEqual(payload["types_bound"], 1)
            self.assertIn("timestamp_utc", payload)
            self.assertEqual(sorted(p.name for p in Path(tmpdir).iterdir()), ["bindgen-run-123.json"])

    def test_creates_output_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "reports" / "nested"
            path = write_run_report(report={}, run_id="r", output_dir=str(target))
            self.assertTrue(Path(path).is_file())

    def test_unwritable_location_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "file"
            blocker.write_text("x", encoding="utf-8")
            with self.assertRaises(OutputIOError):
                write_run_report(report={}, run_id="r", output_dir=str(blocker))


if __name__ == "__main__":
    unittest.main()
