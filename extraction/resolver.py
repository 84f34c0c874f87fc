"""
Module graph resolution.

Starting from an entry file, discovers every module reachable through
``import`` and ``export * from`` directives. Traversal uses an explicit
worklist and a visited set keyed by canonical path, so cycles and diamond
dependencies are visited exactly once and deep import chains cannot exhaust
the interpreter stack.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple, Union

from core.errors import ResolutionError
from extraction.config import SOURCE_EXTENSION
from extraction.extractor import parse_module
from extraction.models import DirectiveKind, TsModule

logger = logging.getLogger(__name__)

ParseFn = Callable[[Path], TsModule]


@dataclass(frozen=True)
class ModuleEdge:
    """A resolved import or export-all edge."""

    owner: Path
    specifier: str
    kind: DirectiveKind
    target: Path


@dataclass(frozen=True)
class ModuleVisit:
    """Result of visiting one not-yet-visited module."""

    path: Path
    edges: Tuple[ModuleEdge, ...] = field(default_factory=tuple)

    @property
    def targets(self) -> Tuple[Path, ...]:
        return tuple(edge.target for edge in self.edges)


@dataclass(frozen=True)
class ModuleGraph:
    """Sorted, deduplicated set of modules reachable from the entry.

    Order is deterministic but carries no dependency meaning.
    """

    entry: Path
    modules: Tuple[Path, ...]
    edges: Tuple[ModuleEdge, ...] = field(default_factory=tuple)

    def __iter__(self):
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, path: object) -> bool:
        return path in self.modules


def canonicalize(path: Union[str, Path]) -> Path:
    """Return the canonical absolute path of an existing file.

    Raises:
        ResolutionError: If the path does not exist, is not a file, or
            cannot be resolved (e.g. a symlink loop).
    """
    try:
        resolved = Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ResolutionError(
            f"module does not exist or cannot be canonicalized ({exc.__class__.__name__})",
            path=path,
            operation="canonicalize",
        ) from exc
    if not resolved.is_file():
        raise ResolutionError("module path is not a file", path=resolved, operation="canonicalize")
    return resolved


def specifier_candidate(owner: Path, specifier: str) -> Path:
    """Join a specifier to its owner's directory and force the ``.ts`` suffix.

    The last suffix is replaced, so ``./a.js`` and ``./a`` both become
    ``./a.ts``. No bare-specifier or index-file lookup is attempted.
    """
    joined = owner.parent / specifier
    try:
        return joined.with_suffix(SOURCE_EXTENSION)
    except ValueError as exc:
        raise ResolutionError(
            f"cannot derive a module path from specifier {specifier!r}",
            path=owner,
            operation="resolve",
        ) from exc


def resolve_specifier(owner: Path, specifier: str) -> Path:
    """Resolve a specifier relative to ``owner`` to a canonical module path."""
    candidate = specifier_candidate(owner, specifier)
    try:
        return canonicalize(candidate)
    except ResolutionError as exc:
        raise ResolutionError(
            f"cannot resolve {specifier!r} imported from {owner}: {exc.message}",
            path=candidate,
            operation="resolve",
        ) from exc


class ModuleResolver:
    """Builds the ``ModuleGraph`` reachable from an entry file.

    Args:
        parse: Module parser; defaults to ``parse_module``.
    """

    def __init__(self, parse: Optional[ParseFn] = None) -> None:
        self._parse: ParseFn = parse or parse_module

    def visit(self, module_path: Path, visited: Set[Path]) -> Optional[ModuleVisit]:
        """Parse one module and resolve its outgoing edges.

        Args:
            module_path: Canonical path of the module.
            visited: Canonical paths already visited; updated in place.

        Returns:
            The visit, or None when the module was already visited.

        Raises:
            ParseError: If the module does not parse.
            ResolutionError: If an edge target cannot be resolved.
        """
        if module_path in visited:
            logger.debug("File already source mapped. Ignoring: %s", module_path)
            return None

        module = self._parse(module_path)
        visited.add(module_path)

        edges: List[ModuleEdge] = []
        specifiers = [(DirectiveKind.IMPORT, s) for s in module.import_specifiers]
        specifiers += [(DirectiveKind.EXPORT_ALL, s) for s in module.export_all_specifiers]
        for kind, specifier in specifiers:
            target = resolve_specifier(module_path, specifier)
            logger.debug("%s edge %s -> %s", kind.value, specifier, target)
            edges.append(ModuleEdge(owner=module_path, specifier=specifier, kind=kind, target=target))

        return ModuleVisit(path=module_path, edges=tuple(edges))

    def resolve(self, entry_path: Union[str, Path]) -> ModuleGraph:
        """Discover every module reachable from ``entry_path``.

        Args:
            entry_path: The entry ``.ts`` file.

        Returns:
            The sorted, deduplicated module graph.

        Raises:
            ResolutionError: If any reached path cannot be canonicalized.
            ParseError: If any reached module fails to parse.
        """
        entry = canonicalize(entry_path)
        visited: Set[Path] = set()
        found: List[Path] = []
        edges: List[ModuleEdge] = []

        worklist: List[Path] = [entry]
        while worklist:
            current = worklist.pop()
            visit = self.visit(current, visited)
            if visit is None:
                continue
            found.append(visit.path)
            edges.extend(visit.edges)
            # Reverse so targets pop in source order
            worklist.extend(reversed(visit.targets))

        modules = tuple(sorted(set(found)))
        for module_path in modules:
            logger.debug("Source mapped file: %s", module_path)
        logger.debug("Total files mapped: %d", len(modules))
        return ModuleGraph(entry=entry, modules=modules, edges=tuple(edges))


def resolve(entry_path: Union[str, Path]) -> ModuleGraph:
    """Resolve the module graph with the default parser."""
    return ModuleResolver().resolve(entry_path)
