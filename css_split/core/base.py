"""
Base data structures for the stylesheet splitting engine.

This module defines the node variants a parsed stylesheet is made of, the
stylesheet root, the chunks produced by partitioning, the rendered chunk files
and the exception hierarchy shared by the whole library.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class NodeKind(Enum):
    """Kinds of top-level (or nested) stylesheet nodes."""

    RULE = "rule"
    AT_RULE = "atrule"
    OTHER = "other"


@dataclass(frozen=True)
class Rule:
    """
    A qualified rule such as ``a, b:hover { color: red }``.

    ``raw`` is the underlying tinycss2 node, kept for its source position.
    ``text`` is the exact source text of a top-level node, which is what gets
    written out; nested nodes leave it unset.
    """

    selectors: Tuple[str, ...]
    raw: Any = field(default=None, compare=False, repr=False)
    text: Optional[str] = field(default=None, compare=False, repr=False)

    kind = NodeKind.RULE


@dataclass(frozen=True)
class AtRule:
    """
    An at-rule such as ``@media print { ... }`` or ``@import url(x);``.

    ``children`` is None when the at-rule has no block at all, and a (possibly
    empty) tuple of nodes when it does.
    """

    name: str
    children: Optional[Tuple["StyleNode", ...]] = None
    raw: Any = field(default=None, compare=False, repr=False)
    text: Optional[str] = field(default=None, compare=False, repr=False)

    kind = NodeKind.AT_RULE


@dataclass(frozen=True)
class Other:
    """Comments, whitespace and declarations outside a rule."""

    raw: Any = field(default=None, compare=False, repr=False)
    text: Optional[str] = field(default=None, compare=False, repr=False)

    kind = NodeKind.OTHER


StyleNode = Union[Rule, AtRule, Other]


@dataclass(frozen=True)
class StylesheetRoot:
    """
    A parsed stylesheet: ordered top-level nodes plus document metadata.

    Roots are never mutated; partitioning builds new roots through ``clone``.
    """

    nodes: Tuple[StyleNode, ...] = ()
    source_path: Optional[str] = None
    input_map: Optional[Dict[str, Any]] = None

    def clone(self, nodes: Optional[List[StyleNode]] = None) -> "StylesheetRoot":
        """Return a root with the same metadata and the given nodes."""
        return StylesheetRoot(
            nodes=tuple(nodes or ()),
            source_path=self.source_path,
            input_map=self.input_map,
        )


@dataclass
class Chunk:
    """
    A contiguous, order-preserving slice of a stylesheet's top-level nodes.

    Chunks are created on overflow and appended to until the next overflow.
    """

    index: int
    root: StylesheetRoot
    nodes: List[StyleNode] = field(default_factory=list)
    weight: int = 0

    def append(self, node: StyleNode, weight: int) -> None:
        """Add a node and its weight to the chunk."""
        self.nodes.append(node)
        self.weight += weight

    def to_root(self) -> StylesheetRoot:
        """Freeze the chunk into a stylesheet root of its own."""
        return self.root.clone(self.nodes)


@dataclass(frozen=True)
class NamingContext:
    """Per-chunk input to the name interpolator."""

    file: str
    index: int
    content: str = ""

    @property
    def part(self) -> int:
        """1-based chunk number used in generated names."""
        return self.index + 1


@dataclass(frozen=True)
class RenderedChunk:
    """A serialized chunk ready to become a build asset."""

    index: int
    name: str
    css: str
    map: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class SplitResult:
    """
    The outcome of splitting one stylesheet asset.

    When ``chunks`` holds a single element (or none) no split occurred and the
    asset is left untouched.
    """

    file: str
    chunks: Tuple[RenderedChunk, ...] = ()

    @property
    def is_split(self) -> bool:
        return len(self.chunks) > 1

    @property
    def names(self) -> List[str]:
        return [chunk.name for chunk in self.chunks]


class CssSplitError(Exception):
    """Base class for every error raised by css_split."""


class OptionsError(CssSplitError, TypeError):
    """An option was given a value of an unsupported type."""


class InvalidOptionError(CssSplitError, ValueError):
    """An option has the right type but an unusable value."""


class StylesheetParseError(CssSplitError):
    """The input stylesheet text could not be parsed."""

    def __init__(self, message: str, file: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.file = file
        self.line = line
        self.column = column
        location = file or "<input>"
        if line is not None:
            location = f"{location}:{line}:{column}"
        super().__init__(f"{location}: {message}")


class SourceMapError(CssSplitError):
    """An input source map could not be decoded."""


class HostContractError(CssSplitError):
    """The host build handed over inconsistent assets or bundles."""


class BuildError(CssSplitError):
    """A build hook signalled failure."""
