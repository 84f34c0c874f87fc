"""Aggregation of a module's binding descriptors into one binding block."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from bindings.models import BindingBlock, BindingDescriptor

logger = logging.getLogger(__name__)


def emit(descriptors: Iterable[BindingDescriptor], module_path: Optional[Path] = None) -> BindingBlock:
    """Wrap a module's descriptors into a single extern block.

    Pure aggregation: descriptor order is preserved and nothing is rendered.
    """
    block = BindingBlock(module_path=module_path, descriptors=tuple(descriptors))
    logger.debug("Emitted binding block with %d type(s) for %s", len(block.descriptors), module_path)
    return block
