"""
Data models for extracted TypeScript modules.

A parsed module is reduced to an ordered list of top-level items. Class
declarations keep just enough structure to produce foreign bindings:
constructor parameters with their annotations, and a record of every other
member so unsupported constructs stay visible.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class ItemKind(str, Enum):
    """Tag for a top-level module item."""

    DECLARATION = "declaration"
    DIRECTIVE = "directive"
    STATEMENT = "statement"


class DirectiveKind(str, Enum):
    """Module directives that can introduce an edge in the module graph."""

    IMPORT = "import"
    EXPORT_ALL = "export_all"
    EXPORT = "export"


class AnnotationKind(str, Enum):
    """Shape of a type annotation."""

    KEYWORD = "keyword"
    REFERENCE = "reference"
    COMPOUND = "compound"


class ParamKind(str, Enum):
    """Closed set of constructor parameter forms."""

    NAMED = "named"
    PARAMETER_PROPERTY = "parameter_property"
    DESTRUCTURED = "destructured"
    REST = "rest"
    THIS = "this"


class MemberKind(str, Enum):
    """Closed set of class body members."""

    PROPERTY = "property"
    METHOD = "method"
    ACCESSOR = "accessor"
    INDEX_SIGNATURE = "index_signature"
    STATIC_BLOCK = "static_block"


@dataclass(frozen=True)
class TypeAnnotation:
    """A parameter's declared type.

    Attributes:
        kind: Keyword (``number``), simple reference (``Foo``), or compound
            (arrays, unions, generics, object and function types).
        text: Source text of the type, without the leading colon.
        node_type: tree-sitter node type of the annotation.
    """

    kind: AnnotationKind
    text: str
    node_type: str


@dataclass(frozen=True)
class ConstructorParam:
    """A single constructor parameter."""

    kind: ParamKind
    name: Optional[str]
    annotation: Optional[TypeAnnotation]
    optional: bool
    line: int


@dataclass(frozen=True)
class ClassMember:
    """A class body member other than the mapped constructor."""

    kind: MemberKind
    name: Optional[str]
    line: int
    is_static: bool = False


@dataclass(frozen=True)
class ConstructorDeclaration:
    """A ``constructor(...)`` member."""

    params: Tuple[ConstructorParam, ...]
    line: int
    has_body: bool = True


@dataclass(frozen=True)
class ClassDeclaration:
    """A named class declaration.

    Attributes:
        name: Class identifier.
        constructors: Every constructor member in source order.
        members: Properties, methods and other non-constructor members.
        exported: Whether the class carries an ``export`` modifier.
        is_abstract: ``abstract class``.
        is_ambient: ``declare class``.
        start_line: 1-indexed start line.
        end_line: 1-indexed end line.
    """

    name: str
    constructors: Tuple[ConstructorDeclaration, ...]
    members: Tuple[ClassMember, ...]
    exported: bool
    is_abstract: bool
    is_ambient: bool
    start_line: int
    end_line: int

    @property
    def constructor(self) -> Optional[ConstructorDeclaration]:
        """The constructor used for binding, if any."""
        return self.constructors[0] if self.constructors else None

    @property
    def properties(self) -> List[ClassMember]:
        return [m for m in self.members if m.kind == MemberKind.PROPERTY]

    @property
    def methods(self) -> List[ClassMember]:
        return [m for m in self.members if m.kind in (MemberKind.METHOD, MemberKind.ACCESSOR)]


@dataclass(frozen=True)
class ImportDirective:
    """An import or export directive.

    ``specifier`` is ``None`` for directives without a source module, such
    as ``export { a }`` or ``export default value``.
    """

    kind: DirectiveKind
    specifier: Optional[str]
    line: int


@dataclass(frozen=True)
class OtherDeclaration:
    """A top-level declaration that is not a class."""

    kind: str
    name: Optional[str]
    line: int


@dataclass(frozen=True)
class ModuleItem:
    """One top-level item of a module, in source order.

    Exactly one of ``class_decl``, ``other_decl`` or ``directive`` is set
    for declaration and directive items; statements carry none.
    """

    kind: ItemKind
    node_type: str
    line: int
    class_decl: Optional[ClassDeclaration] = None
    other_decl: Optional[OtherDeclaration] = None
    directive: Optional[ImportDirective] = None


@dataclass(frozen=True)
class TsModule:
    """A parsed TypeScript module."""

    path: Path
    items: Tuple[ModuleItem, ...] = field(default_factory=tuple)

    @property
    def directives(self) -> List[ImportDirective]:
        return [item.directive for item in self.items if item.directive is not None]

    @property
    def classes(self) -> List[ClassDeclaration]:
        return [item.class_decl for item in self.items if item.class_decl is not None]

    @property
    def import_specifiers(self) -> List[str]:
        """Source specifiers of every import directive."""
        return [
            d.specifier for d in self.directives
            if d.kind == DirectiveKind.IMPORT and d.specifier is not None
        ]

    @property
    def export_all_specifiers(self) -> List[str]:
        """Source specifiers of every ``export * from`` directive."""
        return [
            d.specifier for d in self.directives
            if d.kind == DirectiveKind.EXPORT_ALL and d.specifier is not None
        ]
