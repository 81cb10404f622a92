"""
Stylesheet parsing on top of tinycss2.

Turns stylesheet text into a ``StylesheetRoot`` made of ``Rule``, ``AtRule``
and ``Other`` nodes. Comments and whitespace are kept as ``Other`` nodes and
every top-level node carries its source text, so writing the nodes out in
order reproduces the input.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import tinycss2

from css_split.core.base import (
    AtRule,
    Other,
    Rule,
    StyleNode,
    StylesheetParseError,
    StylesheetRoot,
)

logger = logging.getLogger(__name__)


def split_selectors(prelude: List[Any]) -> Tuple[str, ...]:
    """
    Split a rule prelude into its comma-separated selectors.

    Commas inside functions and brackets are nested in block tokens by
    tinycss2 and never split. Empty groups are dropped.
    """
    groups: List[List[Any]] = [[]]
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            groups.append([])
        else:
            groups[-1].append(token)

    selectors = []
    for group in groups:
        text = tinycss2.serialize(group).strip()
        if text:
            selectors.append(text)
    return tuple(selectors)


def convert_node(raw: Any, text: Optional[str] = None) -> StyleNode:
    """Wrap a tinycss2 node in the matching stylesheet node variant."""
    if raw.type == "qualified-rule":
        return Rule(selectors=split_selectors(raw.prelude), raw=raw, text=text)
    if raw.type == "at-rule":
        children = None
        if raw.content is not None:
            children = tuple(
                convert_node(child)
                for child in tinycss2.parse_blocks_contents(raw.content)
            )
        return AtRule(name=raw.lower_at_keyword, children=children, raw=raw, text=text)
    return Other(raw=raw, text=text)


def normalize_newlines(text: str) -> str:
    """Apply the input preprocessing tinycss2 positions are counted against."""
    return (text.replace("\0", "\uFFFD")
            .replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n"))


def _offsets(text: str, raws: List[Any]) -> List[int]:
    """Character offset of each node start from its 1-based line and column."""
    line_starts = [0]
    line_starts.extend(index + 1 for index, char in enumerate(text) if char == "\n")
    return [line_starts[raw.source_line - 1] + raw.source_column - 1 for raw in raws]


def parse_stylesheet(
    text: str,
    source_path: Optional[str] = None,
    input_map: Optional[Dict[str, Any]] = None
) -> StylesheetRoot:
    """
    Parse stylesheet text into a root of top-level nodes.

    Every top-level node keeps the exact slice of the input it was parsed
    from, so writing the slices back out never re-serializes tokens (strings
    keep their quotes, escapes such as ``\\9`` or ``\\201C`` stay escaped).
    Line endings are normalized to ``\\n`` first.

    Args:
        text: Already-compiled CSS text
        source_path: Name of the asset the text came from
        input_map: Source map of ``text`` back to its own sources, if any

    Returns:
        StylesheetRoot holding the nodes in document order

    Raises:
        StylesheetParseError: If tinycss2 reports a top-level parse error
    """
    text = normalize_newlines(text)
    raws = tinycss2.parse_stylesheet(text, skip_comments=False, skip_whitespace=False)
    for raw in raws:
        if raw.type == "error":
            raise StylesheetParseError(
                raw.message, file=source_path,
                line=raw.source_line, column=raw.source_column
            )

    offsets = _offsets(text, raws) + [len(text)]
    nodes = [
        convert_node(raw, text[offsets[index]:offsets[index + 1]])
        for index, raw in enumerate(raws)
    ]

    logger.debug(f"Parsed {len(nodes)} top-level nodes from {source_path or '<input>'}")
    return StylesheetRoot(nodes=tuple(nodes), source_path=source_path, input_map=input_map)
