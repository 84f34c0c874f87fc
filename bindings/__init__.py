"""
Layer 2: Binding Generation

Maps TypeScript class declarations to wasm-bindgen binding descriptors,
renders them as Rust source, and writes the output tree.
"""

from bindings.models import (
    BindingBlock,
    BindingDescriptor,
    BindingParam,
    ConstructorBinding,
    UnsupportedMember,
)
from bindings.type_mapping import (
    DEFAULT_TYPE_MAP,
    DEFAULT_TYPE_MAPPING,
    OPAQUE_TYPE,
    PrimitiveKind,
    TypeMapping,
)
from bindings.mapper import MappingDiagnostics, map_class, map_module
from bindings.emitter import emit
from bindings.render import render_block
from bindings.writer import TARGET_EXTENSION, output_path_for, plan_outputs, write
from bindings.generator import GenerationResult, generate_bindings, map_graph

__all__ = [
    "BindingBlock",
    "BindingDescriptor",
    "BindingParam",
    "ConstructorBinding",
    "UnsupportedMember",
    "DEFAULT_TYPE_MAP",
    "DEFAULT_TYPE_MAPPING",
    "OPAQUE_TYPE",
    "PrimitiveKind",
    "TypeMapping",
    "MappingDiagnostics",
    "map_class",
    "map_module",
    "emit",
    "render_block",
    "TARGET_EXTENSION",
    "output_path_for",
    "plan_outputs",
    "write",
    "GenerationResult",
    "generate_bindings",
    "map_graph",
]
