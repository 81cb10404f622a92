"""
Chunk partitioning.

Walks a stylesheet's top-level nodes in order and groups them into chunks whose
selector weight stays within a size bound. A node is never split: a single node
heavier than the bound ends up alone in its own chunk.
"""

import logging
from typing import List, Optional

from css_split.core.base import Chunk, InvalidOptionError, StylesheetRoot
from css_split.core.counter import selector_weight

logger = logging.getLogger(__name__)


def partition(root: StylesheetRoot, size: int) -> List[Chunk]:
    """
    Group top-level nodes into size-bounded chunks.

    Args:
        root: Parsed stylesheet
        size: Maximum selector weight per chunk

    Returns:
        Chunks in document order. An empty stylesheet gives no chunks.
    """
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise InvalidOptionError(f"size must be a positive integer, got {size!r}")

    chunks: List[Chunk] = []
    chunk: Optional[Chunk] = None

    for node in root.nodes:
        weight = selector_weight(node)
        if chunk is None or chunk.weight + weight > size:
            chunk = Chunk(index=len(chunks), root=root)
            chunks.append(chunk)
            if weight > size:
                logger.debug(
                    f"Node of weight {weight} exceeds size {size}, "
                    f"placing it in chunk {chunk.index}"
                )
        chunk.append(node, weight)

    logger.debug(
        f"Partitioned {root.source_path or '<input>'} into {len(chunks)} chunks: "
        f"{[c.weight for c in chunks]}"
    )
    return chunks
