"""
Type mappings from TypeScript annotations to wasm-bindgen Rust types.

The table maps a closed set of primitive keyword kinds to Rust types and
sends everything else to the opaque ``JsValue``. It is extensible: extra
keywords (``bigint``) or simple type names (``Date``) can be registered,
either programmatically or from the ``types`` config section.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from core.errors import ConfigValidationError
from extraction.models import AnnotationKind, TypeAnnotation

logger = logging.getLogger(__name__)


class PrimitiveKind(str, Enum):
    """Closed set of primitive annotation kinds."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    VOID = "void"
    OTHER = "other"


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

OPAQUE_TYPE: str = "JsValue"

DEFAULT_TYPE_MAP: Dict[str, str] = {
    PrimitiveKind.NUMBER.value: "f64",
    PrimitiveKind.STRING.value: "String",
    PrimitiveKind.BOOLEAN.value: "bool",
    PrimitiveKind.VOID.value: "()",
}

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_RUST_TYPE_RE = re.compile(
    rf"^(?:\(\)|&?(?:'static\s+)?(?:{_IDENT}::)*{_IDENT}(?:<[A-Za-z0-9_:<>, &']+>)?)$"
)


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one annotation."""

    rust_type: str
    opaque: bool
    primitive: PrimitiveKind = PrimitiveKind.OTHER


def is_valid_rust_type(text: str) -> bool:
    """Check that ``text`` looks like a Rust type usable in a signature."""
    return bool(_RUST_TYPE_RE.match(text.strip()))


def primitive_kind(annotation: TypeAnnotation) -> PrimitiveKind:
    """Classify an annotation into the closed primitive kind set."""
    if annotation.kind == AnnotationKind.KEYWORD:
        try:
            return PrimitiveKind(annotation.text)
        except ValueError:
            return PrimitiveKind.OTHER
    return PrimitiveKind.OTHER


class TypeMapping:
    """Extensible TypeScript -> Rust type table.

    Args:
        mappings: Initial table; defaults to ``DEFAULT_TYPE_MAP``.
        opaque_type: Rust type used for anything unmapped.
    """

    def __init__(self, mappings: Optional[Mapping[str, str]] = None, opaque_type: str = OPAQUE_TYPE) -> None:
        self._table: Dict[str, str] = {}
        self.opaque_type = opaque_type
        for name, rust_type in (DEFAULT_TYPE_MAP if mappings is None else mappings).items():
            self.register(name, rust_type)

    def register(self, name: str, rust_type: str) -> None:
        """Add or override a mapping.

        Raises:
            ValueError: If ``rust_type`` is not valid Rust type syntax.
        """
        if not name or not name.strip():
            raise ValueError("type name must be non-empty")
        if not is_valid_rust_type(rust_type):
            raise ValueError(f"invalid Rust type {rust_type!r} for {name!r}")
        key, value = name.strip(), rust_type.strip()
        previous = self._table.get(key)
        self._table[key] = value
        if previous is not None and previous != value:
            logger.debug("Type mapping for %s overridden: %s -> %s", key, previous, value)

    def lookup(self, name: str) -> Optional[str]:
        return self._table.get(name)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._table)

    def map_annotation(self, annotation: TypeAnnotation) -> MappedType:
        """Map an annotation to its binding type.

        Primitive keywords are looked up by their kind, other keywords and
        simple type names by their text. Compound annotations (arrays,
        unions, generics, object types) and unknown names map to the
        opaque type.
        """
        kind = primitive_kind(annotation)
        if kind is not PrimitiveKind.OTHER:
            key = kind.value
        elif annotation.kind in (AnnotationKind.KEYWORD, AnnotationKind.REFERENCE):
            key = annotation.text
        else:
            key = None
        rust_type = self._table.get(key) if key is not None else None
        if rust_type is not None:
            return MappedType(rust_type=rust_type, opaque=False, primitive=kind)
        return MappedType(rust_type=self.opaque_type, opaque=True, primitive=kind)

    @classmethod
    def with_overrides(cls, overrides: Optional[Mapping[str, str]] = None) -> "TypeMapping":
        """Default table plus config-supplied mappings.

        Raises:
            ConfigValidationError: If an override is invalid.
        """
        mapping = cls()
        for name, rust_type in (overrides or {}).items():
            try:
                mapping.register(name, rust_type)
            except ValueError as exc:
                raise ConfigValidationError(str(exc), operation="config") from exc
        return mapping


DEFAULT_TYPE_MAPPING = TypeMapping()
