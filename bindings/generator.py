"""
Top-level binding generation pipeline.

One linear pass: resolve the module graph, then parse, map and emit each
module, then write every block. Resolution and mapping finish completely
before the output tree is touched, so resolution, parse and mapping
failures never modify existing output.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from core.structured_logging import phase_scope
from extraction.extractor import parse_module
from extraction.resolver import ModuleGraph, ModuleResolver
from bindings.emitter import emit
from bindings.mapper import MappingDiagnostics, map_module
from bindings.models import BindingBlock
from bindings.type_mapping import DEFAULT_TYPE_MAPPING, TypeMapping
from bindings.writer import absolutize, write

logger = logging.getLogger(__name__)

MappedBlocks = List[Tuple[Path, BindingBlock]]


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    entry: Path
    output_root: Path
    graph: ModuleGraph
    outputs: List[Path] = field(default_factory=list)
    diagnostics: MappingDiagnostics = field(default_factory=MappingDiagnostics)
    types_bound: int = 0

    def to_report(self) -> Dict[str, Any]:
        """JSON-serializable summary for run reports."""
        return {
            "entry": str(self.entry),
            "output_root": str(self.output_root),
            "modules": [str(p) for p in self.graph.modules],
            "edges": [
                {
                    "owner": str(edge.owner),
                    "specifier": edge.specifier,
                    "kind": edge.kind.value,
                    "target": str(edge.target),
                }
                for edge in self.graph.edges
            ],
            "outputs": [str(p) for p in self.outputs],
            "types_bound": self.types_bound,
            "unsupported_counts": self.diagnostics.counts(),
            "unsupported": self.diagnostics.to_dict_list(),
        }


def map_graph(
    graph: ModuleGraph,
    type_mapping: Optional[TypeMapping] = None,
    diagnostics: Optional[MappingDiagnostics] = None,
) -> MappedBlocks:
    """Parse, map and emit every module of the graph, in graph order."""
    type_mapping = type_mapping or DEFAULT_TYPE_MAPPING
    mapped: MappedBlocks = []
    for module_path in graph.modules:
        module = parse_module(module_path)
        logger.debug("Mapping %d items from file: %s", len(module.items), module_path)
        descriptors = map_module(module, type_mapping, diagnostics)
        mapped.append((module_path, emit(descriptors, module_path)))
    return mapped


def generate_bindings(
    entry_file: Union[str, Path],
    output_dir: Union[str, Path],
    type_mapping: Optional[TypeMapping] = None,
    resolver: Optional[ModuleResolver] = None,
) -> GenerationResult:
    """Generate Rust bindings for every module reachable from ``entry_file``.

    Args:
        entry_file: Entry ``.ts`` module.
        output_dir: Output root; its previous contents are replaced.
        type_mapping: Type table; defaults to ``DEFAULT_TYPE_MAPPING``.
        resolver: Module resolver; defaults to ``ModuleResolver()``.

    Returns:
        The run result.

    Raises:
        BindgenError: Any resolution, parse, mapping, render or output
            failure; the first one aborts the run.
    """
    resolver = resolver or ModuleResolver()
    diagnostics = MappingDiagnostics()

    with phase_scope("resolve"):
        logger.info("Mapping files...")
        graph = resolver.resolve(entry_file)
        logger.info("Files mapped: %d module(s).", len(graph))

    with phase_scope("map"):
        logger.info("Mapping statements")
        mapped = map_graph(graph, type_mapping, diagnostics)
        types_bound = sum(len(block.descriptors) for _, block in mapped)
        logger.info("Statements mapped: %d type(s).", types_bound)
        if len(diagnostics):
            logger.info("Skipped unsupported constructs: %s", diagnostics)

    with phase_scope("write"):
        outputs = write(mapped, entry_file, output_dir)

    return GenerationResult(
        entry=graph.entry,
        output_root=absolutize(output_dir),
        graph=graph,
        outputs=outputs,
        diagnostics=diagnostics,
        types_bound=types_bound,
    )
