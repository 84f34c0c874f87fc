"""
Rendering of binding blocks as wasm-bindgen Rust source.

Every identifier and type in a block is validated before any text is
produced, so a malformed block fails with ``RenderError`` instead of
yielding a file that will not compile.
"""

import logging
import unicodedata
from typing import Optional

from core.errors import RenderError
from bindings.codegen import CodeGen
from bindings.models import BindingBlock, BindingDescriptor
from bindings.type_mapping import is_valid_rust_type

logger = logging.getLogger(__name__)

GENERATOR_NAME = "tsbindgen"

PRELUDE_IMPORT = "use wasm_bindgen::prelude::*;"

# Strict and reserved keywords; emitted as raw identifiers
RUST_KEYWORDS = frozenset({
    "abstract", "as", "async", "await", "become", "box", "break", "const",
    "continue", "do", "dyn", "else", "enum", "extern", "false", "final", "fn",
    "for", "gen", "if", "impl", "in", "let", "loop", "macro", "match", "mod",
    "move", "mut", "override", "priv", "pub", "ref", "return", "static",
    "struct", "trait", "true", "try", "type", "typeof", "unsafe", "unsized",
    "use", "virtual", "where", "while", "yield",
})

# Keywords that cannot be written as raw identifiers
NON_RAW_KEYWORDS = frozenset({"crate", "self", "Self", "super"})


def rust_ident(name: str, allow_underscore: bool = False, block: Optional[BindingBlock] = None) -> str:
    """Convert a TypeScript identifier into a Rust identifier.

    Non-ASCII names are accepted in NFC form, which is how rustc compares
    identifiers.

    Raises:
        RenderError: If ``name`` cannot be expressed as a Rust identifier.
    """
    path = block.module_path if block is not None else None
    ident = unicodedata.normalize("NFC", name or "")
    if not ident or "$" in ident or not ident.isidentifier():
        raise RenderError(f"{name!r} is not a valid Rust identifier", path=path, operation="render")
    if ident in NON_RAW_KEYWORDS or (ident == "_" and not allow_underscore):
        raise RenderError(f"{name!r} cannot be used as a Rust identifier", path=path, operation="render")
    if ident in RUST_KEYWORDS:
        return f"r#{ident}"
    return ident


def _render_descriptor(gen: CodeGen, descriptor: BindingDescriptor, block: BindingBlock) -> None:
    type_name = rust_ident(descriptor.name, block=block)

    params = []
    seen = set()
    for param in descriptor.constructor.params:
        if not is_valid_rust_type(param.rust_type):
            raise RenderError(
                f"invalid Rust type {param.rust_type!r} for parameter '{param.name}' of '{descriptor.name}'",
                path=block.module_path,
                operation="render",
            )
        ident = rust_ident(param.name, allow_underscore=True, block=block)
        if ident in seen and ident != "_":
            raise RenderError(
                f"duplicate parameter '{param.name}' in constructor of '{descriptor.name}'",
                path=block.module_path,
                operation="render",
            )
        seen.add(ident)
        params.append(f"{ident}: {param.rust_type}")

    gen.line("#[wasm_bindgen]")
    gen.line(f"pub type {type_name};")
    gen.line("#[wasm_bindgen(constructor)]")
    gen.line(f"pub fn new({', '.join(params)}) -> {type_name};")


def render_block(block: BindingBlock, source_label: Optional[str] = None) -> str:
    """Render a binding block as formatted Rust source.

    Args:
        block: The module's binding block.
        source_label: Source path shown in the header comment; defaults to
            the module file name.

    Returns:
        Deterministic source text ending with a newline.

    Raises:
        RenderError: If the block contains an invalid identifier or type, or
            declares the same type twice.
    """
    names = [unicodedata.normalize("NFC", d.name or "") for d in block.descriptors]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise RenderError(
            "duplicate type declaration(s): " + ", ".join(duplicates),
            path=block.module_path,
            operation="render",
        )

    label = source_label
    if label is None and block.module_path is not None:
        label = block.module_path.name

    gen = CodeGen()
    if label:
        gen.line(f"// Generated by {GENERATOR_NAME} from {label}. Do not edit.")
    gen.line(PRELUDE_IMPORT)
    gen.line()
    gen.line("#[wasm_bindgen]")
    if not block.descriptors:
        gen.line('extern "C" {}')
    else:
        with gen.block('extern "C" {'):
            for descriptor in block.descriptors:
                _render_descriptor(gen, descriptor, block)

    text = gen.output()
    logger.debug("Rendered %d type(s) for %s", len(block.descriptors), label or "<block>")
    return text
