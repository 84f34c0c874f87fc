"""
AST traversal and module model extraction logic.

This module walks a tree-sitter TypeScript tree and reduces it to a
``TsModule``: an ordered list of top-level items tagged as declarations,
directives or plain statements. Class declarations are extracted down to
constructor parameters and a record of every other member.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from tree_sitter import Node, Tree

from extraction.config import (
    ABSTRACT_METHOD_SIGNATURE,
    ACCESSOR_KEYWORDS,
    AMBIENT_DECLARATION,
    CLASS_DECLARATION_TYPES,
    CLASS_EXPRESSION,
    CLASS_STATIC_BLOCK,
    CONSTRUCTOR_NAME,
    ESCAPE_SEQUENCE,
    EXPORT_STATEMENT,
    IDENTIFIER,
    IMPORT_REQUIRE_CLAUSE,
    IMPORT_STATEMENT,
    INDEX_SIGNATURE,
    METHOD_DEFINITION,
    METHOD_SIGNATURE,
    NON_MEMBER_TYPES,
    OPTIONAL_PARAMETER,
    OTHER_DECLARATION_TYPES,
    PARAMETER_PROPERTY_MARKERS,
    PARAMETER_TYPES,
    PREDEFINED_TYPE,
    PUBLIC_FIELD_DEFINITION,
    REST_PATTERN,
    STRING_FRAGMENT,
    THIS_NODE,
    TYPE_IDENTIFIER,
)
from extraction.models import (
    AnnotationKind,
    ClassDeclaration,
    ClassMember,
    ConstructorDeclaration,
    ConstructorParam,
    DirectiveKind,
    ImportDirective,
    ItemKind,
    MemberKind,
    ModuleItem,
    OtherDeclaration,
    ParamKind,
    TsModule,
    TypeAnnotation,
)

logger = logging.getLogger(__name__)

# Top-level nodes that are neither items nor statements
_SKIPPED_TOP_LEVEL = frozenset({"comment", "hash_bang_line", "empty_statement"})


def node_text(node: Optional[Node]) -> str:
    """Decode a node's source text (empty string for ``None``)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def line_of(node: Node) -> int:
    """1-indexed start line of a node."""
    return node.start_point.row + 1


def _has_keyword(node: Node, keyword: str) -> bool:
    """Check for an anonymous keyword token among a node's direct children."""
    return any(not child.is_named and child.type == keyword for child in node.children)


def string_literal_value(node: Node) -> str:
    """Return the contents of a string literal node without its quotes.

    Escape sequences are kept verbatim; module specifiers do not use them.
    """
    parts = [
        node_text(child)
        for child in node.children
        if child.type in (STRING_FRAGMENT, ESCAPE_SEQUENCE)
    ]
    if parts:
        return "".join(parts)
    return node_text(node).strip("'\"")


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------

def extract_import_directive(node: Node) -> ImportDirective:
    """Build the directive for an ``import_statement`` node.

    Handles ``import ... from "x"``, ``import "x"`` and
    ``import a = require("x")``.
    """
    source = node.child_by_field_name("source")
    if source is None:
        for child in node.named_children:
            if child.type == IMPORT_REQUIRE_CLAUSE:
                source = child.child_by_field_name("source")
                break
    specifier = string_literal_value(source) if source is not None else None
    return ImportDirective(kind=DirectiveKind.IMPORT, specifier=specifier, line=line_of(node))


def extract_export_directive(node: Node) -> ImportDirective:
    """Build the directive for an ``export_statement`` without a declaration.

    Only ``export * from "x"`` is an export-all edge; named re-exports and
    ``export * as ns from "x"`` keep their specifier but are plain exports.
    """
    source = node.child_by_field_name("source")
    if source is None:
        return ImportDirective(kind=DirectiveKind.EXPORT, specifier=None, line=line_of(node))

    kind = DirectiveKind.EXPORT_ALL if _has_keyword(node, "*") else DirectiveKind.EXPORT
    return ImportDirective(kind=kind, specifier=string_literal_value(source), line=line_of(node))


# ---------------------------------------------------------------------------
# Constructor parameters
# ---------------------------------------------------------------------------

def extract_type_annotation(node: Optional[Node]) -> Optional[TypeAnnotation]:
    """Classify a ``type_annotation`` node.

    Args:
        node: The ``type_annotation`` node (``: T``), or ``None``.

    Returns:
        The annotation, or None when the parameter is unannotated.
    """
    if node is None:
        return None
    inner = node.named_children[0] if node.named_children else None
    if inner is None:
        return None

    if inner.type == PREDEFINED_TYPE:
        kind = AnnotationKind.KEYWORD
    elif inner.type == TYPE_IDENTIFIER:
        kind = AnnotationKind.REFERENCE
    else:
        kind = AnnotationKind.COMPOUND
    return TypeAnnotation(kind=kind, text=node_text(inner).strip(), node_type=inner.type)


def extract_parameter(node: Node) -> Optional[ConstructorParam]:
    """Extract one ``required_parameter`` / ``optional_parameter`` node."""
    if node.type not in PARAMETER_TYPES:
        return None

    pattern = node.child_by_field_name("pattern")
    annotation = extract_type_annotation(node.child_by_field_name("type"))
    optional = node.type == OPTIONAL_PARAMETER
    name = node_text(pattern) if pattern is not None and pattern.type == IDENTIFIER else None

    if any(child.type in PARAMETER_PROPERTY_MARKERS for child in node.children):
        kind = ParamKind.PARAMETER_PROPERTY
    elif pattern is None or pattern.type == THIS_NODE:
        if pattern is not None or any(child.type == THIS_NODE for child in node.children):
            kind = ParamKind.THIS
            name = THIS_NODE
        else:
            kind = ParamKind.DESTRUCTURED
    elif pattern.type == IDENTIFIER:
        kind = ParamKind.NAMED
    elif pattern.type == REST_PATTERN:
        kind = ParamKind.REST
        name = node_text(pattern).lstrip(".") or None
    else:
        kind = ParamKind.DESTRUCTURED

    return ConstructorParam(
        kind=kind,
        name=name,
        annotation=annotation,
        optional=optional,
        line=line_of(node),
    )


def extract_constructor(node: Node) -> ConstructorDeclaration:
    """Extract a constructor member (definition or signature)."""
    params: List[ConstructorParam] = []
    parameters = node.child_by_field_name("parameters")
    if parameters is not None:
        for child in parameters.named_children:
            param = extract_parameter(child)
            if param is not None:
                params.append(param)
    return ConstructorDeclaration(
        params=tuple(params),
        line=line_of(node),
        has_body=node.child_by_field_name("body") is not None,
    )


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

def _member_name(node: Node) -> Optional[str]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    if name_node.type == "string":
        return string_literal_value(name_node)
    return node_text(name_node)


def _is_constructor(node: Node) -> bool:
    if node.type not in (METHOD_DEFINITION, METHOD_SIGNATURE):
        return False
    name_node = node.child_by_field_name("name")
    return name_node is not None and name_node.type != "string" and node_text(name_node) == CONSTRUCTOR_NAME


def extract_class_member(node: Node) -> Optional[ClassMember]:
    """Classify a non-constructor class body member."""
    if node.type in (METHOD_DEFINITION, METHOD_SIGNATURE, ABSTRACT_METHOD_SIGNATURE):
        accessor = any(_has_keyword(node, kw) for kw in ACCESSOR_KEYWORDS)
        kind = MemberKind.ACCESSOR if accessor else MemberKind.METHOD
    elif node.type == PUBLIC_FIELD_DEFINITION:
        kind = MemberKind.PROPERTY
    elif node.type == INDEX_SIGNATURE:
        kind = MemberKind.INDEX_SIGNATURE
    elif node.type == CLASS_STATIC_BLOCK:
        kind = MemberKind.STATIC_BLOCK
    else:
        logger.debug("Unknown class member %s at line %d", node.type, line_of(node))
        return None

    return ClassMember(
        kind=kind,
        name=_member_name(node),
        line=line_of(node),
        is_static=_has_keyword(node, "static"),
    )


def extract_class(node: Node, exported: bool = False, is_ambient: bool = False) -> Optional[ClassDeclaration]:
    """Extract a class declaration node.

    Args:
        node: A ``class_declaration`` or ``abstract_class_declaration`` node.
        exported: Whether the declaration sits under an ``export``.
        is_ambient: Whether the declaration sits under ``declare``.

    Returns:
        The class declaration, or None for anonymous classes.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug("Skipping anonymous class at line %d", line_of(node))
        return None

    constructors: List[ConstructorDeclaration] = []
    members: List[ClassMember] = []
    body = node.child_by_field_name("body")
    if body is not None:
        for child in body.named_children:
            if child.type in NON_MEMBER_TYPES:
                continue
            if _is_constructor(child):
                constructors.append(extract_constructor(child))
                continue
            member = extract_class_member(child)
            if member is not None:
                members.append(member)

    class_decl = ClassDeclaration(
        name=node_text(name_node),
        constructors=tuple(constructors),
        members=tuple(members),
        exported=exported,
        is_abstract=node.type == "abstract_class_declaration",
        is_ambient=is_ambient,
        start_line=line_of(node),
        end_line=node.end_point.row + 1,
    )
    logger.debug(
        "Extracted class %s at line %d (%d constructor(s), %d member(s))",
        class_decl.name,
        class_decl.start_line,
        len(constructors),
        len(members),
    )
    return class_decl


# ---------------------------------------------------------------------------
# Top-level items
# ---------------------------------------------------------------------------

def _declaration_item(
    node: Node,
    exported: bool = False,
    is_ambient: bool = False,
    outer: Optional[Node] = None,
) -> Optional[ModuleItem]:
    """Build a declaration item, unwrapping ``declare`` when present."""
    outer = outer or node
    if node.type == AMBIENT_DECLARATION:
        inner = node.named_children[0] if node.named_children else None
        if inner is not None and (inner.type in CLASS_DECLARATION_TYPES or inner.type in OTHER_DECLARATION_TYPES):
            return _declaration_item(inner, exported=exported, is_ambient=True, outer=outer)
        return ModuleItem(
            kind=ItemKind.DECLARATION,
            node_type=outer.type,
            line=line_of(outer),
            other_decl=OtherDeclaration(kind="ambient_declaration", name=None, line=line_of(node)),
        )

    if node.type in CLASS_DECLARATION_TYPES:
        class_decl = extract_class(node, exported=exported, is_ambient=is_ambient)
        if class_decl is None:
            other = OtherDeclaration(kind="anonymous_class", name=None, line=line_of(node))
            return ModuleItem(kind=ItemKind.DECLARATION, node_type=outer.type, line=line_of(outer), other_decl=other)
        return ModuleItem(
            kind=ItemKind.DECLARATION,
            node_type=outer.type,
            line=line_of(outer),
            class_decl=class_decl,
        )

    if node.type in OTHER_DECLARATION_TYPES:
        name_node = node.child_by_field_name("name")
        other = OtherDeclaration(
            kind=OTHER_DECLARATION_TYPES[node.type],
            name=node_text(name_node) or None,
            line=line_of(node),
        )
        return ModuleItem(kind=ItemKind.DECLARATION, node_type=outer.type, line=line_of(outer), other_decl=other)

    return None


def extract_item(node: Node) -> Optional[ModuleItem]:
    """Classify one top-level node of a module.

    Returns:
        The module item, or None for comments and other trivia.
    """
    if node.type in _SKIPPED_TOP_LEVEL:
        return None

    if node.type == IMPORT_STATEMENT:
        return ModuleItem(
            kind=ItemKind.DIRECTIVE,
            node_type=node.type,
            line=line_of(node),
            directive=extract_import_directive(node),
        )

    if node.type == EXPORT_STATEMENT:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            item = _declaration_item(declaration, exported=True, outer=node)
            if item is not None:
                return item
        value = node.child_by_field_name("value")
        if value is not None and value.type == CLASS_EXPRESSION:
            other = OtherDeclaration(kind="anonymous_class", name=None, line=line_of(value))
            return ModuleItem(kind=ItemKind.DECLARATION, node_type=node.type, line=line_of(node), other_decl=other)
        return ModuleItem(
            kind=ItemKind.DIRECTIVE,
            node_type=node.type,
            line=line_of(node),
            directive=extract_export_directive(node),
        )

    item = _declaration_item(node)
    if item is not None:
        return item

    # ``namespace X {}`` can surface as an expression statement
    if node.type == "expression_statement" and len(node.named_children) == 1:
        item = _declaration_item(node.named_children[0], outer=node)
        if item is not None:
            return item

    return ModuleItem(kind=ItemKind.STATEMENT, node_type=node.type, line=line_of(node))


def extract_module_items(tree: Tree) -> Tuple[ModuleItem, ...]:
    """Extract the ordered top-level items of a parsed module."""
    items: List[ModuleItem] = []
    for child in tree.root_node.named_children:
        item = extract_item(child)
        if item is not None:
            items.append(item)
    return tuple(items)


def build_module(tree: Tree, file_path: Path) -> TsModule:
    """Reduce a parsed tree to a ``TsModule``.

    This is the main entry point for model extraction.

    Args:
        tree: The parsed, error-free tree.
        file_path: Canonical path of the module.

    Returns:
        The module model.
    """
    items = extract_module_items(tree)
    module = TsModule(path=Path(file_path), items=items)
    logger.debug(
        "Extracted %d items (%d classes, %d directives) from %s",
        len(items),
        len(module.classes),
        len(module.directives),
        file_path,
    )
    return module
