"""
Configuration constants for TypeScript module extraction.

Defines the tree-sitter-typescript node type strings used to split a module
into directives and declarations and to walk class bodies.
"""

from typing import Dict, FrozenSet, Set

# Standard source extension forced onto every import/export specifier
SOURCE_EXTENSION: str = ".ts"

# Module directives
IMPORT_STATEMENT: str = "import_statement"
EXPORT_STATEMENT: str = "export_statement"
IMPORT_REQUIRE_CLAUSE: str = "import_require_clause"

# Class declaration forms
CLASS_DECLARATION_TYPES: Set[str] = {
    "class_declaration",
    "abstract_class_declaration",
}

# Anonymous class expression (``export default class {}``)
CLASS_EXPRESSION: str = "class"

# ``declare ...`` wrapper around a declaration
AMBIENT_DECLARATION: str = "ambient_declaration"

# Other top-level declarations; recognized and reported, never mapped
OTHER_DECLARATION_TYPES: Dict[str, str] = {
    "function_declaration": "function_declaration",
    "generator_function_declaration": "function_declaration",
    "function_signature": "function_declaration",
    "lexical_declaration": "variable_declaration",
    "variable_declaration": "variable_declaration",
    "interface_declaration": "interface_declaration",
    "type_alias_declaration": "type_alias_declaration",
    "enum_declaration": "enum_declaration",
    "module": "namespace_declaration",
    "internal_module": "namespace_declaration",
}

# Class body members
METHOD_DEFINITION: str = "method_definition"
METHOD_SIGNATURE: str = "method_signature"
ABSTRACT_METHOD_SIGNATURE: str = "abstract_method_signature"
PUBLIC_FIELD_DEFINITION: str = "public_field_definition"
INDEX_SIGNATURE: str = "index_signature"
CLASS_STATIC_BLOCK: str = "class_static_block"
CONSTRUCTOR_NAME: str = "constructor"

# Nodes inside a class body that are not members
NON_MEMBER_TYPES: FrozenSet[str] = frozenset({"comment", "decorator"})

# Accessor keywords on method_definition
ACCESSOR_KEYWORDS: FrozenSet[str] = frozenset({"get", "set"})

# Constructor parameters
REQUIRED_PARAMETER: str = "required_parameter"
OPTIONAL_PARAMETER: str = "optional_parameter"
PARAMETER_TYPES: Set[str] = {REQUIRED_PARAMETER, OPTIONAL_PARAMETER}

# Children that turn a parameter into a parameter property
PARAMETER_PROPERTY_MARKERS: FrozenSet[str] = frozenset({
    "accessibility_modifier",
    "override_modifier",
    "readonly",
})

IDENTIFIER: str = "identifier"
REST_PATTERN: str = "rest_pattern"
THIS_NODE: str = "this"

# Type annotations
PREDEFINED_TYPE: str = "predefined_type"
TYPE_IDENTIFIER: str = "type_identifier"

# String literal content
STRING_FRAGMENT: str = "string_fragment"
ESCAPE_SEQUENCE: str = "escape_sequence"
