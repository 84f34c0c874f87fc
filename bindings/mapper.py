"""
Declaration mapping: TypeScript classes to binding descriptors.

Each class maps to one opaque exported type and one constructor signature.
Mapping a class depends only on that class's own declaration. Everything
the mapper recognizes but cannot express yet (properties, methods,
parameter-property shorthand, non-primitive annotations...) is recorded as
an ``UnsupportedMember`` instead of disappearing silently.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from core.errors import MappingError
from extraction.models import (
    AnnotationKind,
    ClassDeclaration,
    ConstructorParam,
    MemberKind,
    ParamKind,
    TsModule,
)
from bindings.models import BindingDescriptor, BindingParam, ConstructorBinding, UnsupportedMember
from bindings.type_mapping import DEFAULT_TYPE_MAPPING, TypeMapping

logger = logging.getLogger(__name__)

_PARAM_DETAILS: Dict[ParamKind, str] = {
    ParamKind.PARAMETER_PROPERTY: "parameter-property shorthand dropped; generated constructor arity differs",
    ParamKind.DESTRUCTURED: "destructured parameter dropped",
    ParamKind.REST: "rest parameter dropped",
    ParamKind.THIS: "this parameter dropped",
}

_MEMBER_DETAILS: Dict[MemberKind, str] = {
    MemberKind.PROPERTY: "class properties are not bound yet",
    MemberKind.METHOD: "methods are not bound yet",
    MemberKind.ACCESSOR: "accessors are not bound yet",
    MemberKind.INDEX_SIGNATURE: "index signatures have no binding",
    MemberKind.STATIC_BLOCK: "static blocks have no binding",
}


class MappingDiagnostics:
    """Collects unsupported constructs across a run."""

    def __init__(self) -> None:
        self.entries: List[UnsupportedMember] = []

    def extend(self, entries: Iterable[UnsupportedMember]) -> None:
        for entry in entries:
            logger.debug(
                "Unsupported %s %r in %s (line %d): %s",
                entry.kind,
                entry.name,
                entry.class_name or (entry.module.name if entry.module else "<module>"),
                entry.line,
                entry.detail,
            )
            self.entries.append(entry)

    def counts(self) -> Dict[str, int]:
        """Number of entries per kind, sorted by kind."""
        return dict(sorted(Counter(entry.kind for entry in self.entries).items()))

    def to_dict_list(self) -> List[dict]:
        return [entry.to_dict() for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        summary = ", ".join(f"{kind}={count}" for kind, count in self.counts().items())
        return f"MappingDiagnostics({summary or 'none'})"


def map_param(
    param: ConstructorParam,
    class_name: str,
    type_mapping: TypeMapping,
    module_path: Optional[Path] = None,
) -> Tuple[Optional[BindingParam], List[UnsupportedMember]]:
    """Map one constructor parameter.

    Returns:
        ``(binding_param, unsupported)``; ``binding_param`` is None when the
        parameter is dropped from the signature.

    Raises:
        MappingError: If a plain named parameter has no type annotation.
    """
    if param.kind != ParamKind.NAMED:
        note = UnsupportedMember(
            kind=param.kind.value,
            name=param.name,
            line=param.line,
            class_name=class_name,
            module=module_path,
            detail=_PARAM_DETAILS.get(param.kind, ""),
        )
        return None, [note]

    if param.annotation is None:
        raise MappingError(
            f"missing type annotation on constructor parameter '{param.name}' of class '{class_name}'",
            path=module_path,
            class_name=class_name,
            param_name=param.name,
        )

    mapped = type_mapping.map_annotation(param.annotation)
    unsupported: List[UnsupportedMember] = []
    if mapped.opaque and param.annotation.kind != AnnotationKind.KEYWORD:
        unsupported.append(
            UnsupportedMember(
                kind="opaque_type",
                name=param.name,
                line=param.line,
                class_name=class_name,
                module=module_path,
                detail=f"'{param.annotation.text}' mapped to {mapped.rust_type}",
            )
        )
    binding = BindingParam(name=param.name, rust_type=mapped.rust_type, source_type=param.annotation.text)
    return binding, unsupported


def map_class(
    class_decl: ClassDeclaration,
    type_mapping: Optional[TypeMapping] = None,
    module_path: Optional[Path] = None,
) -> BindingDescriptor:
    """Map a class declaration to its binding descriptor.

    Args:
        class_decl: The class to map.
        type_mapping: Type table; defaults to ``DEFAULT_TYPE_MAPPING``.
        module_path: Owning module, used only for diagnostics.

    Returns:
        The descriptor. A class without a constructor gets an empty
        constructor binding.

    Raises:
        MappingError: If a constructor parameter lacks a type annotation.
    """
    type_mapping = type_mapping or DEFAULT_TYPE_MAPPING
    logger.debug("Mapping class: %s", class_decl.name)

    params: List[BindingParam] = []
    unsupported: List[UnsupportedMember] = []

    constructor = class_decl.constructor
    if constructor is not None:
        for param in constructor.params:
            binding, notes = map_param(param, class_decl.name, type_mapping, module_path)
            unsupported.extend(notes)
            if binding is not None:
                params.append(binding)

    for extra in class_decl.constructors[1:]:
        unsupported.append(
            UnsupportedMember(
                kind="constructor_overload",
                name="constructor",
                line=extra.line,
                class_name=class_decl.name,
                module=module_path,
                detail="only the first constructor is bound",
            )
        )

    for member in class_decl.members:
        unsupported.append(
            UnsupportedMember(
                kind=member.kind.value,
                name=member.name,
                line=member.line,
                class_name=class_decl.name,
                module=module_path,
                detail=_MEMBER_DETAILS.get(member.kind, ""),
            )
        )

    return BindingDescriptor(
        name=class_decl.name,
        constructor=ConstructorBinding(params=tuple(params)),
        unsupported=tuple(unsupported),
    )


def map_module(
    module: TsModule,
    type_mapping: Optional[TypeMapping] = None,
    diagnostics: Optional[MappingDiagnostics] = None,
) -> List[BindingDescriptor]:
    """Map every local class declaration of a module.

    Directives and plain statements are dropped. Classes declared under an
    ``export`` belong to the export directive and produce no binding; they
    and every other declaration are reported to ``diagnostics`` and skipped.

    Args:
        module: Parsed module.
        type_mapping: Type table; defaults to ``DEFAULT_TYPE_MAPPING``.
        diagnostics: Optional collector for unsupported constructs.

    Returns:
        Descriptors in source order.
    """
    descriptors: List[BindingDescriptor] = []
    skipped: List[UnsupportedMember] = []

    for item in module.items:
        class_decl = item.class_decl
        if class_decl is not None and class_decl.exported:
            skipped.append(
                UnsupportedMember(
                    kind="exported_class",
                    name=class_decl.name,
                    line=class_decl.start_line,
                    module=module.path,
                    detail="exported declarations are not bound",
                )
            )
        elif class_decl is not None:
            descriptor = map_class(class_decl, type_mapping, module_path=module.path)
            descriptors.append(descriptor)
            skipped.extend(descriptor.unsupported)
        elif item.other_decl is not None:
            skipped.append(
                UnsupportedMember(
                    kind=item.other_decl.kind,
                    name=item.other_decl.name,
                    line=item.other_decl.line,
                    module=module.path,
                    detail="only class declarations are bound",
                )
            )

    if diagnostics is not None:
        diagnostics.extend(skipped)

    logger.debug("Mapped %d classes from %s", len(descriptors), module.path)
    return descriptors
