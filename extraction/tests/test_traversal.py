"""
Unit tests for traversal.py

Tests directive extraction, class extraction, constructor parameter
classification and top-level item tagging.
"""

import unittest
from pathlib import Path

from extraction.extractor import parse_module, parse_source
from extraction.models import (
    AnnotationKind,
    DirectiveKind,
    ItemKind,
    MemberKind,
    ParamKind,
)


def _only_class(source: str):
    module = parse_source(source)
    classes = module.classes
    assert len(classes) == 1, classes
    return classes[0]


class TestDirectives(unittest.TestCase):
    """Test import and export directive extraction."""

    def test_named_import(self):
        module = parse_source('import { A } from "./a";')
        self.assertEqual(len(module.directives), 1)
        directive = module.directives[0]
        self.assertEqual(directive.kind, DirectiveKind.IMPORT)
        self.assertEqual(directive.specifier, "./a")
        self.assertEqual(module.import_specifiers, ["./a"])

    def test_side_effect_and_default_imports(self):
        module = parse_source("import './side';\nimport Def from '../def';\nimport * as ns from './ns';\n")
        self.assertEqual(module.import_specifiers, ["./side", "../def", "./ns"])

    def test_type_only_import_is_an_edge(self):
        module = parse_source('import type { T } from "./types";')
        self.assertEqual(module.import_specifiers, ["./types"])

    def test_export_all(self):
        module = parse_source('export * from "./util";')
        self.assertEqual(module.export_all_specifiers, ["./util"])
        self.assertEqual(module.import_specifiers, [])

    def test_named_reexports_are_not_export_all(self):
        module = parse_source('export { a } from "./b";\nexport * as ns from "./c";\n')
        self.assertEqual(module.export_all_specifiers, [])
        kinds = [d.kind for d in module.directives]
        self.assertEqual(kinds, [DirectiveKind.EXPORT, DirectiveKind.EXPORT])
        self.assertEqual([d.specifier for d in module.directives], ["./b", "./c"])

    def test_local_export_has_no_specifier(self):
        module = parse_source("const a = 1;\nexport { a };\n")
        directive = module.directives[0]
        self.assertEqual(directive.kind, DirectiveKind.EXPORT)
        self.assertIsNone(directive.specifier)


class TestClassExtraction(unittest.TestCase):
    """Test class declarations and their members."""

    def test_plain_class(self):
        class_decl = _only_class("class Test {\n    constructor(param: number) {}\n}\n")

        self.assertEqual(class_decl.name, "Test")
        self.assertFalse(class_decl.exported)
        self.assertEqual(class_decl.start_line, 1)
        self.assertEqual(class_decl.end_line, 3)
        self.assertEqual(len(class_decl.constructors), 1)
        param = class_decl.constructor.params[0]
        self.assertEqual(param.kind, ParamKind.NAMED)
        self.assertEqual(param.name, "param")
        self.assertEqual(param.annotation.kind, AnnotationKind.KEYWORD)
        self.assertEqual(param.annotation.text, "number")

    def test_exported_class_is_a_declaration(self):
        module = parse_source("export class Foo {}\nexport abstract class Bar {}\n")

        self.assertEqual([c.name for c in module.classes], ["Foo", "Bar"])
        self.assertTrue(all(c.exported for c in module.classes))
        self.assertTrue(all(item.kind == ItemKind.DECLARATION for item in module.items))

    def test_class_without_constructor(self):
        class_decl = _only_class("class Empty {}")
        self.assertIsNone(class_decl.constructor)
        self.assertEqual(class_decl.members, ())

    def test_abstract_class(self):
        class_decl = _only_class("abstract class Shape {\n    abstract area(): number;\n}\n")
        self.assertTrue(class_decl.is_abstract)
        self.assertEqual([m.kind for m in class_decl.members], [MemberKind.METHOD])

    def test_ambient_class(self):
        class_decl = _only_class("declare class Ext {\n    constructor(x: number);\n}\n")
        self.assertTrue(class_decl.is_ambient)
        self.assertFalse(class_decl.constructor.has_body)
        self.assertEqual(class_decl.constructor.params[0].name, "x")

    def test_members_are_classified(self):
        source = """
class Widget {
    width: number;
    static count = 0;
    [key: string]: any;
    constructor(width: number) { this.width = width; }
    get area(): number { return 1; }
    static create(): Widget { return new Widget(1); }
    draw(): void {}
}
"""
        class_decl = _only_class(source)
        kinds = [(m.kind, m.name) for m in class_decl.members]

        self.assertIn((MemberKind.PROPERTY, "width"), kinds)
        self.assertIn((MemberKind.PROPERTY, "count"), kinds)
        self.assertIn((MemberKind.ACCESSOR, "area"), kinds)
        self.assertIn((MemberKind.METHOD, "create"), kinds)
        self.assertIn((MemberKind.METHOD, "draw"), kinds)
        self.assertIn(MemberKind.INDEX_SIGNATURE, [k for k, _ in kinds])
        statics = {m.name for m in class_decl.members if m.is_static}
        self.assertEqual(statics, {"count", "create"})
        self.assertEqual(len(class_decl.properties), 2)
        self.assertEqual(len(class_decl.methods), 3)

    def test_constructor_overloads_are_kept_in_order(self):
        source = """
class Pair {
    constructor(a: number);
    constructor(a: number, b: number);
    constructor(a: number, b?: number) {}
}
"""
        class_decl = _only_class(source)
        self.assertEqual(len(class_decl.constructors), 3)
        self.assertEqual(len(class_decl.constructor.params), 1)


class TestConstructorParameters(unittest.TestCase):
    """Test constructor parameter classification."""

    def test_parameter_forms(self):
        source = (
            "class P {\n"
            "    constructor(private a: number, readonly b: string, c?: boolean,"
            " { d }: Opts, ...rest: number[]) {}\n"
            "}\n"
        )
        params = _only_class(source).constructor.params
        self.assertEqual(
            [p.kind for p in params],
            [
                ParamKind.PARAMETER_PROPERTY,
                ParamKind.PARAMETER_PROPERTY,
                ParamKind.NAMED,
                ParamKind.DESTRUCTURED,
                ParamKind.REST,
            ],
        )
        self.assertEqual(params[0].name, "a")
        self.assertTrue(params[2].optional)
        self.assertEqual(params[2].name, "c")
        self.assertEqual(params[4].name, "rest")

    def test_annotation_kinds(self):
        source = (
            "class T {\n"
            "    constructor(a: string[], b: Foo, c: number | string, d: Map<string, number>, e: any, f) {}\n"
            "}\n"
        )
        params = _only_class(source).constructor.params
        kinds = [p.annotation.kind if p.annotation else None for p in params]
        self.assertEqual(
            kinds,
            [
                AnnotationKind.COMPOUND,
                AnnotationKind.REFERENCE,
                AnnotationKind.COMPOUND,
                AnnotationKind.COMPOUND,
                AnnotationKind.KEYWORD,
                None,
            ],
        )
        self.assertEqual(params[1].annotation.text, "Foo")
        self.assertEqual(params[4].annotation.text, "any")


class TestModuleItems(unittest.TestCase):
    """Test top-level item tagging on the sample module."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_sample_module(self):
        module = parse_module(self.fixtures_dir / "testing.ts")

        self.assertEqual([c.name for c in module.classes], ["Test"])
        test_class = module.classes[0]
        self.assertEqual([p.name for p in test_class.constructor.params], ["param"])
        self.assertEqual(
            [m.name for m in test_class.properties],
            ["internal_num", "other_num", "test"],
        )

        other_kinds = {item.other_decl.kind for item in module.items if item.other_decl}
        for kind in (
            "function_declaration",
            "variable_declaration",
            "interface_declaration",
            "type_alias_declaration",
            "enum_declaration",
        ):
            self.assertIn(kind, other_kinds)
        self.assertEqual(module.directives, [])

    def test_items_keep_source_order(self):
        module = parse_source(
            'import { a } from "./a";\nclass A {}\nconsole.log(a);\nexport * from "./b";\n'
        )
        self.assertEqual(
            [item.kind for item in module.items],
            [ItemKind.DIRECTIVE, ItemKind.DECLARATION, ItemKind.STATEMENT, ItemKind.DIRECTIVE],
        )
        self.assertEqual([item.line for item in module.items], [1, 2, 3, 4])


if __name__ == "__main__":
    unittest.main()
