"""
Layer 1: Extraction Engine

Tree-sitter-based TypeScript parser, module model extractor, and module
graph resolver.
"""

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
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes, ensure_valid
from extraction.traversal import build_module, extract_module_items
from extraction.extractor import parse_module, parse_source
from extraction.resolver import (
    ModuleEdge,
    ModuleGraph,
    ModuleResolver,
    canonicalize,
    resolve,
    resolve_specifier,
)

__all__ = [
    # Data models
    "AnnotationKind",
    "ClassDeclaration",
    "ClassMember",
    "ConstructorDeclaration",
    "ConstructorParam",
    "DirectiveKind",
    "ImportDirective",
    "ItemKind",
    "MemberKind",
    "ModuleItem",
    "OtherDeclaration",
    "ParamKind",
    "TsModule",
    "TypeAnnotation",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "ensure_valid",
    # Mid-level extraction
    "build_module",
    "extract_module_items",
    "parse_module",
    "parse_source",
    # Module graph
    "ModuleEdge",
    "ModuleGraph",
    "ModuleResolver",
    "canonicalize",
    "resolve",
    "resolve_specifier",
]
