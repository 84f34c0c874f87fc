"""
Unit tests for writer.py

Tests output path derivation, planning and the staged replacement of the
output tree.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.errors import MappingError, OutputIOError, RenderError
from bindings.emitter import emit
from bindings.models import BindingDescriptor, ConstructorBinding
from bindings.writer import base_dir_for, output_path_for, plan_outputs, write


def block_for(module_path, *names):
    return emit(
        [BindingDescriptor(name=n, constructor=ConstructorBinding()) for n in names],
        module_path,
    )


class TestOutputPaths(unittest.TestCase):
    """Test pure path derivation."""

    def test_mirrors_layout(self):
        base = Path("/proj/ts")
        out = Path("/out")
        self.assertEqual(output_path_for(base / "index.ts", base, out), Path("/out/index.rs"))
        self.assertEqual(output_path_for(base / "sub" / "foo.ts", base, out), Path("/out/sub/foo.rs"))

    def test_outside_base_is_mapping_error(self):
        with self.assertRaises(MappingError) as ctx:
            output_path_for(Path("/proj/other/x.ts"), Path("/proj/ts"), Path("/out"))
        self.assertEqual(ctx.exception.path, "/proj/other/x.ts")

    def test_base_dir_is_entry_parent(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            self.assertEqual(base_dir_for(root / "index.ts"), root)


class TestWrite(unittest.TestCase):
    """Test writing to disk."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.root = Path(self._tmpdir.name).resolve()
        self.src = self.root / "ts"
        self.entry = self.src / "index.ts"
        self.out = self.root / "out"

    def _siblings(self):
        return sorted(p.name for p in self.root.iterdir())

    def test_writes_mirrored_tree(self):
        pairs = [
            (self.entry, block_for(self.entry, "App")),
            (self.src / "sub" / "x.ts", block_for(self.src / "sub" / "x.ts")),
        ]
        written = write(pairs, self.entry, self.out)

        self.assertEqual(written, [self.out / "index.rs", self.out / "sub" / "x.rs"])
        text = (self.out / "index.rs").read_text(encoding="utf-8")
        self.assertIn("// Generated by tsbindgen from index.ts. Do not edit.", text)
        self.assertIn("pub type App;", text)
        sub_text = (self.out / "sub" / "x.rs").read_text(encoding="utf-8")
        self.assertIn("from sub/x.ts", sub_text)
        self.assertIn('extern "C" {}', sub_text)

    def test_replaces_previous_contents(self):
        stale = self.out / "stale.rs"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        write([(self.entry, block_for(self.entry, "A"))], self.entry, self.out)

        self.assertFalse(stale.exists())
        self.assertTrue((self.out / "index.rs").is_file())
        self.assertEqual(self._siblings(), ["out"])

    def test_creates_missing_parents(self):
        out = self.root / "deep" / "nested" / "out"
        write([(self.entry, block_for(self.entry))], self.entry, out)
        self.assertTrue((out / "index.rs").is_file())

    def test_render_failure_leaves_output_untouched(self):
        sentinel = self.out / "keep.rs"
        sentinel.parent.mkdir(parents=True)
        sentinel.write_text("keep", encoding="utf-8")

        with self.assertRaises(RenderError):
            write([(self.entry, block_for(self.entry, "A", "A"))], self.entry, self.out)

        self.assertEqual(sentinel.read_text(encoding="utf-8"), "keep")
        self.assertEqual(self._siblings(), ["out"])

    def test_refuses_to_replace_source_directory(self):
        with self.assertRaises(OutputIOError):
            write([(self.entry, block_for(self.entry))], self.entry, self.src)
        with self.assertRaises(OutputIOError):
            write([(self.entry, block_for(self.entry))], self.entry, self.root)

    def test_output_file_blocking_directory(self):
        blocker = self.root / "file"
        blocker.write_text("x", encoding="utf-8")
        with self.assertRaises(OutputIOError):
            write([(self.entry, block_for(self.entry))], self.entry, blocker / "out")

    def _rename_failing_on(self, *failing):
        """Wrap os.rename so the given call numbers (1-based) fail."""
        real_rename = os.rename
        calls = []

        def rename(src, dst):
            calls.append((src, dst))
            if len(calls) in failing:
                raise OSError("boom")
            return real_rename(src, dst)

        return rename, calls

    def _previous_output(self):
        previous = self.out / "previous.rs"
        previous.parent.mkdir(parents=True)
        previous.write_text("previous run", encoding="utf-8")

    def test_failed_swap_restores_previous_output(self):
        self._previous_output()
        rename, calls = self._rename_failing_on(2)

        with patch("bindings.writer.os.rename", side_effect=rename):
            with self.assertRaises(OutputIOError) as ctx:
                write([(self.entry, block_for(self.entry, "A"))], self.entry, self.out)

        self.assertEqual(len(calls), 3)
        self.assertIn("boom", str(ctx.exception))
        self.assertEqual((self.out / "previous.rs").read_text(encoding="utf-8"), "previous run")
        self.assertEqual(self._siblings(), ["out"])

    def test_failed_restore_names_backup(self):
        self._previous_output()
        rename, calls = self._rename_failing_on(2, 3)

        with patch("bindings.writer.os.rename", side_effect=rename):
            with self.assertRaises(OutputIOError) as ctx:
                write([(self.entry, block_for(self.entry, "A"))], self.entry, self.out)

        self.assertEqual(len(calls), 3)
        siblings = self._siblings()
        self.assertEqual(len(siblings), 1)
        backup = self.root / siblings[0]
        self.assertTrue(backup.name.startswith(".out.old-"))
        self.assertIn(str(backup), str(ctx.exception))
        self.assertEqual((backup / "previous.rs").read_text(encoding="utf-8"), "previous run")
        self.assertFalse(self.out.exists())


class TestPlanOutputs(unittest.TestCase):

    def test_collision_is_mapping_error(self):
        base = Path("/proj")
        pairs = [
            (base / "a.ts", block_for(base / "a.ts")),
            (base / "a.ts", block_for(base / "a.ts")),
        ]
        with self.assertRaises(MappingError):
            plan_outputs(pairs, base / "index.ts", Path("/out"))

    def test_plan_is_pure(self):
        base = Path("/proj")
        planned = plan_outputs([(base / "m" / "a.ts", block_for(base / "m" / "a.ts", "A"))], base / "index.ts", Path("/out"))

        self.assertEqual(len(planned), 1)
        self.assertEqual(planned[0].relative_path, Path("m/a.rs"))
        self.assertIn("pub type A;", planned[0].text)
        self.assertFalse(Path("/out/m/a.rs").exists())


if __name__ == "__main__":
    unittest.main()
