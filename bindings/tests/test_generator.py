"""
Integration tests for generator.py

Runs the full resolve, map and write pipeline over the fixture project and
over small temporary projects.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from core.errors import MappingError, ParseError, ResolutionError
from bindings.generator import generate_bindings
from bindings.type_mapping import TypeMapping

FIXTURE_PROJECT = Path(__file__).parents[2] / "extraction" / "tests" / "fixtures" / "project"


class TestGenerateFixtureProject(unittest.TestCase):
    """Generate bindings for the checked-in fixture project."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.root = Path(self._tmpdir.name).resolve()
        self.src = self.root / "ts"
        shutil.copytree(FIXTURE_PROJECT, self.src)
        self.entry = self.src / "index.ts"
        self.out = self.root / "output"

    def test_layout_and_contents(self):
        result = generate_bindings(self.entry, self.out)

        self.assertEqual(
            sorted(p.relative_to(self.out).as_posix() for p in self.out.rglob("*.rs")),
            ["index.rs", "shapes/circle.rs", "util.rs"],
        )
        self.assertEqual(len(result.graph), 3)
        self.assertEqual(result.types_bound, 3)
        self.assertEqual(result.entry, self.entry)

        # The only class in the entry module is exported, so nothing is bound
        index_rs = (self.out / "index.rs").read_text(encoding="utf-8")
        self.assertIn('extern "C" {}', index_rs)
        self.assertNotIn("App", index_rs)

        circle_rs = (self.out / "shapes" / "circle.rs").read_text(encoding="utf-8")
        self.assertIn("// Generated by tsbindgen from shapes/circle.ts. Do not edit.", circle_rs)
        self.assertIn(
            "pub fn new(radius: f64, center: JsValue, label: JsValue) -> Circle;",
            circle_rs,
        )
        self.assertIn("pub fn new() -> Unit;", circle_rs)

        util_rs = (self.out / "util.rs").read_text(encoding="utf-8")
        self.assertIn("pub fn new() -> Point;", util_rs)

    def test_diagnostics(self):
        result = generate_bindings(self.entry, self.out)
        counts = result.diagnostics.counts()

        self.assertEqual(counts["exported_class"], 1)
        self.assertEqual(counts["parameter_property"], 2)
        self.assertEqual(counts["opaque_type"], 2)
        self.assertEqual(counts["property"], 1)
        self.assertEqual(counts["method"], 1)
        self.assertEqual(counts["variable_declaration"], 1)
        self.assertEqual(counts["function_declaration"], 1)
        exported = [e for e in result.diagnostics.entries if e.kind == "exported_class"]
        self.assertEqual(exported[0].name, "App")
        self.assertEqual(exported[0].module, self.entry)

    def test_rerun_is_byte_identical(self):
        generate_bindings(self.entry, self.out)
        first = {p: p.read_bytes() for p in self.out.rglob("*.rs")}
        generate_bindings(self.entry, self.out)
        second = {p: p.read_bytes() for p in self.out.rglob("*.rs")}
        self.assertEqual(first, second)

    def test_type_overrides(self):
        mapping = TypeMapping.with_overrides({"Point": "JsValue", "number": "f32"})
        generate_bindings(self.entry, self.out, type_mapping=mapping)
        circle_rs = (self.out / "shapes" / "circle.rs").read_text(encoding="utf-8")
        self.assertIn("pub fn new(radius: f32, center: JsValue, label: JsValue) -> Circle;", circle_rs)

    def test_report(self):
        report = generate_bindings(self.entry, self.out).to_report()

        self.assertEqual(report["entry"], str(self.entry))
        self.assertEqual(report["output_root"], str(self.out))
        self.assertEqual(len(report["modules"]), 3)
        self.assertEqual(len(report["outputs"]), 3)
        self.assertEqual(report["types_bound"], 3)
        self.assertIn("opaque_type", report["unsupported_counts"])
        kinds = {edge["kind"] for edge in report["edges"]}
        self.assertEqual(kinds, {"import", "export_all"})


class TestGenerateFailures(unittest.TestCase):
    """Failures abort before the output tree is touched."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.root = Path(self._tmpdir.name).resolve()
        self.src = self.root / "ts"
        self.src.mkdir()
        self.out = self.root / "output"
        self.sentinel = self.out / "sentinel.rs"
        self.sentinel.parent.mkdir()
        self.sentinel.write_text("previous run", encoding="utf-8")

    def write(self, name, text):
        path = self.src / name
        path.write_text(text, encoding="utf-8")
        return path

    def assert_output_untouched(self):
        self.assertEqual(self.sentinel.read_text(encoding="utf-8"), "previous run")
        self.assertEqual(sorted(p.name for p in self.root.iterdir()), ["output", "ts"])

    def test_parse_failure(self):
        entry = self.write("index.ts", 'import "./bad";\nexport class Ok {}\n')
        self.write("bad.ts", "export class Bad {\n    constructor(x: number {\n}\n")

        with self.assertRaises(ParseError):
            generate_bindings(entry, self.out)
        self.assert_output_untouched()

    def test_resolution_failure(self):
        entry = self.write("index.ts", 'import "./missing";\n')
        with self.assertRaises(ResolutionError):
            generate_bindings(entry, self.out)
        self.assert_output_untouched()

    def test_mapping_failure(self):
        entry = self.write("index.ts", "class NoType { constructor(value) {} }\n")
        with self.assertRaises(MappingError) as ctx:
            generate_bindings(entry, self.out)
        self.assertEqual(ctx.exception.class_name, "NoType")
        self.assert_output_untouched()

    def test_module_outside_entry_directory(self):
        outside = self.root / "shared.ts"
        outside.write_text("export class Shared {}\n", encoding="utf-8")
        entry = self.write("index.ts", 'import "../shared";\n')

        with self.assertRaises(MappingError):
            generate_bindings(entry, self.out)
        self.assertEqual(self.sentinel.read_text(encoding="utf-8"), "previous run")


if __name__ == "__main__":
    unittest.main()
