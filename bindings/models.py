"""Data models for generated foreign bindings."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class BindingParam:
    """One constructor parameter in the binding signature."""

    name: str
    rust_type: str
    source_type: str


@dataclass(frozen=True)
class ConstructorBinding:
    """``#[wasm_bindgen(constructor)] pub fn new(...)`` signature."""

    params: Tuple[BindingParam, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UnsupportedMember:
    """A recognized construct that produced no binding output.

    Attributes:
        kind: What was skipped (``property``, ``method``,
            ``parameter_property``, ``opaque_type``, ``function_declaration``...).
        name: Member, parameter or declaration name when known.
        line: 1-indexed source line.
        class_name: Owning class, or None for top-level declarations.
        module: Module path, when known.
        detail: Short human-readable note.
    """

    kind: str
    name: Optional[str]
    line: int
    class_name: Optional[str] = None
    module: Optional[Path] = None
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["module"] = str(self.module) if self.module is not None else None
        return payload


@dataclass(frozen=True)
class BindingDescriptor:
    """Bindings for one class: an opaque type plus its constructor.

    ``methods`` and ``properties`` are reserved and currently always empty;
    the skipped members are listed in ``unsupported``.
    """

    name: str
    constructor: ConstructorBinding
    methods: Tuple[Any, ...] = field(default_factory=tuple)
    properties: Tuple[Any, ...] = field(default_factory=tuple)
    unsupported: Tuple[UnsupportedMember, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BindingBlock:
    """All binding descriptors of one module, rendered as one extern block."""

    module_path: Optional[Path]
    descriptors: Tuple[BindingDescriptor, ...] = field(default_factory=tuple)

    @property
    def type_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.descriptors)
