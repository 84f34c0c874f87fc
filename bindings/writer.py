"""
Output writing for rendered bindings.

Output paths mirror each module's location relative to the entry file's
directory, with ``.ts`` replaced by ``.rs``. Every path is derived and every
block rendered before the filesystem is touched. Files are then written to
a staging directory next to the output root, which is swapped into place
by renaming, so a failed run never leaves a half-written output tree.
"""

import logging
import os
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from core.errors import MappingError, OutputIOError
from bindings.models import BindingBlock
from bindings.render import render_block

logger = logging.getLogger(__name__)

TARGET_EXTENSION = ".rs"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class PlannedOutput:
    """One rendered file waiting to be written."""

    module_path: Path
    relative_path: Path
    output_path: Path
    text: str


def absolutize(path: PathLike) -> Path:
    """Absolute, normalized path; symlinks are resolved where they exist."""
    return Path(path).expanduser().resolve()


def base_dir_for(entry_path: PathLike) -> Path:
    """Directory every module path is made relative to."""
    return absolutize(entry_path).parent


def output_path_for(
    module_path: PathLike,
    base_dir: Path,
    out_root: Path,
    extension: str = TARGET_EXTENSION,
) -> Path:
    """Map a module path to its output file path.

    Example:
        ``<base>/sub/foo.ts`` with out root ``<out>`` -> ``<out>/sub/foo.rs``.

    Raises:
        MappingError: If the module is not inside ``base_dir``.
    """
    module = Path(module_path)
    try:
        relative = module.relative_to(base_dir)
    except ValueError as exc:
        raise MappingError(
            f"module is outside the entry directory {base_dir}",
            path=module,
            operation="output_path",
        ) from exc
    return (out_root / relative).with_suffix(extension)


def plan_outputs(
    pairs: Iterable[Tuple[Path, BindingBlock]],
    entry_path: PathLike,
    output_root: PathLike,
) -> List[PlannedOutput]:
    """Derive output paths and render every block, without any I/O.

    Raises:
        MappingError: If a module lies outside the entry directory or two
            modules map to the same output file.
        RenderError: If a block cannot be rendered.
    """
    base_dir = base_dir_for(entry_path)
    out_root = absolutize(output_root)

    planned: List[PlannedOutput] = []
    claimed = {}
    for module_path, block in pairs:
        output_path = output_path_for(module_path, base_dir, out_root)
        relative_path = output_path.relative_to(out_root)
        if relative_path in claimed:
            raise MappingError(
                f"output {relative_path} is produced by both {claimed[relative_path]} and {module_path}",
                path=module_path,
                operation="output_path",
            )
        claimed[relative_path] = module_path
        source_label = Path(module_path).relative_to(base_dir).as_posix()
        text = render_block(block, source_label=source_label)
        planned.append(
            PlannedOutput(
                module_path=Path(module_path),
                relative_path=relative_path,
                output_path=output_path,
                text=text,
            )
        )

    logger.debug("Mappings: %s", [str(p.output_path) for p in planned])
    return planned


def _check_output_root(out_root: Path, base_dir: Path) -> None:
    if out_root == base_dir or out_root in base_dir.parents:
        raise OutputIOError(
            f"refusing to replace an output root that contains the source directory {base_dir}",
            path=out_root,
            operation="clear",
        )


def _write_file(target: Path, text: str) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as exc:
        raise OutputIOError(f"failed to write output file: {exc}", path=target, operation="write") from exc


def _stage(planned: List[PlannedOutput], out_root: Path) -> Path:
    try:
        out_root.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{out_root.name}.staging-", dir=out_root.parent))
    except OSError as exc:
        raise OutputIOError(f"failed to create staging directory: {exc}", path=out_root, operation="stage") from exc

    try:
        for item in planned:
            logger.debug("Writing file: %s", item.output_path)
            _write_file(staging / item.relative_path, item.text)
    except OutputIOError:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    return staging


def _swap_into_place(staging: Path, out_root: Path) -> None:
    """Replace ``out_root`` with ``staging``; an absent root is fine.

    The staging directory never outlives a failed swap. If the previous
    output cannot be moved back, the error names the backup holding it.
    """
    backup: Optional[Path] = None
    if out_root.exists() or out_root.is_symlink():
        backup = out_root.parent / f".{out_root.name}.old-{uuid.uuid4().hex[:8]}"
        try:
            os.rename(out_root, backup)
        except OSError as exc:
            shutil.rmtree(staging, ignore_errors=True)
            raise OutputIOError(f"failed to clear output directory: {exc}", path=out_root, operation="clear") from exc

    try:
        os.rename(staging, out_root)
    except OSError as exc:
        message = f"failed to move output into place: {exc}"
        try:
            if backup is not None:
                try:
                    os.rename(backup, out_root)
                except OSError as restore_exc:
                    message += f"; previous output left at {backup} ({restore_exc})"
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
        raise OutputIOError(message, path=out_root, operation="replace") from exc

    if backup is not None:
        try:
            if backup.is_dir() and not backup.is_symlink():
                shutil.rmtree(backup)
            else:
                backup.unlink()
        except OSError as exc:
            logger.warning("Previous output left at %s: %s", backup, exc)


def write(
    pairs: Iterable[Tuple[Path, BindingBlock]],
    entry_path: PathLike,
    output_root: PathLike,
) -> List[Path]:
    """Render and write every binding block, replacing the output root.

    Args:
        pairs: ``(module_path, block)`` for every resolved module.
        entry_path: The entry file; its directory is the path base.
        output_root: Directory whose contents are replaced.

    Returns:
        Written output paths, in input order.

    Raises:
        MappingError: If an output path cannot be derived.
        RenderError: If a block cannot be rendered.
        OutputIOError: If the output tree cannot be written or replaced.
    """
    out_root = absolutize(output_root)
    base_dir = base_dir_for(entry_path)
    _check_output_root(out_root, base_dir)

    planned = plan_outputs(pairs, entry_path, out_root)
    staging = _stage(planned, out_root)
    _swap_into_place(staging, out_root)

    logger.info("Wrote %d file(s) to %s", len(planned), out_root)
    return [item.output_path for item in planned]
