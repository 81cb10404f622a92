"""
Chunk serialization.

Writes a chunk's nodes back out as the exact source text they were parsed
from and, when the stylesheet came with a source map, builds a map for the
chunk that points at the stylesheet's own sources rather than at the unsplit
stylesheet.
"""

import logging
from typing import Callable, List, Optional, Tuple

from css_split.core.base import Chunk, NamingContext, Other, RenderedChunk, StyleNode
from css_split.core.sourcemap import Mapping, SourceMap, SourceMapGenerator, compose

logger = logging.getLogger(__name__)

NameFor = Callable[[NamingContext], str]


def _is_blank(node: StyleNode) -> bool:
    return isinstance(node, Other) and getattr(node.raw, "type", None) == "whitespace"


def node_text(node: StyleNode) -> str:
    """Source text of a node, or its tinycss2 serialization when built by hand."""
    if node.text is not None:
        return node.text
    return node.raw.serialize()


def _trim(nodes: List[StyleNode]) -> List[StyleNode]:
    """Drop whitespace nodes at both ends of a chunk."""
    start, end = 0, len(nodes)
    while start < end and _is_blank(nodes[start]):
        start += 1
    while end > start and _is_blank(nodes[end - 1]):
        end -= 1
    return nodes[start:end]


def _advance(line: int, column: int, text: str) -> Tuple[int, int]:
    """Move a 0-based (line, column) cursor past ``text``."""
    newlines = text.count("\n")
    if not newlines:
        return line, column + len(text)
    return line + newlines, len(text) - text.rfind("\n") - 1


class ChunkSerializer:
    """
    Turns chunks into rendered chunk files.

    Args:
        input_map: Decoded map of the unsplit stylesheet, if it had one
        on_render: Optional callback invoked with every rendered chunk
    """

    def __init__(
        self,
        input_map: Optional[SourceMap] = None,
        on_render: Optional[Callable[[RenderedChunk], None]] = None
    ):
        self.input_map = input_map
        self.on_render = on_render

    def render(self, chunk: Chunk, name_for: NameFor) -> RenderedChunk:
        """
        Serialize one chunk.

        Args:
            chunk: Chunk produced by the partitioner
            name_for: Resolves the output name from the chunk's naming context

        Returns:
            RenderedChunk with text, resolved name and optional map
        """
        source = chunk.root.source_path or "<input>"
        pieces: List[str] = []
        mappings: List[Mapping] = []
        line = column = 0

        for node in _trim(chunk.nodes):
            text = node_text(node)
            if not _is_blank(node):
                mappings.extend(self._node_mappings(node, text, line, column, source))
            pieces.append(text)
            line, column = _advance(line, column, text)

        css = "".join(pieces)
        name = name_for(NamingContext(file=source, index=chunk.index, content=css))

        css_map = None
        if self.input_map is not None:
            css_map = self._build_map(mappings, name)

        rendered = RenderedChunk(index=chunk.index, name=name, css=css, map=css_map)
        if self.on_render:
            self.on_render(rendered)
        return rendered

    def _node_mappings(
        self, node: StyleNode, text: str, line: int, column: int, source: str
    ) -> List[Mapping]:
        """Map the first non-blank column of every generated line of a node."""
        original_line = node.raw.source_line - 1
        original_column = node.raw.source_column - 1
        mappings = [Mapping(line, column, source, original_line, original_column)]
        for offset, text_line in enumerate(text.split("\n")[1:], start=1):
            indent = len(text_line) - len(text_line.lstrip(" \t"))
            if indent == len(text_line):
                continue
            mappings.append(Mapping(
                line + offset, indent, source, original_line + offset, indent
            ))
        return mappings

    def _build_map(self, mappings: List[Mapping], name: str) -> dict:
        generator = SourceMapGenerator()
        for mapping in mappings:
            traced = compose(mapping, self.input_map)
            if traced is not None:
                generator.add(traced)

        for source in generator.sources:
            content = self.input_map.content_for(source)
            if content is not None:
                generator.set_source_content(source, content)

        logger.debug(f"Built source map for {name} with {len(generator)} mappings")
        return generator.to_dict(name)
