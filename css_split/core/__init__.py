"""
Core splitting engine: node model, counting, partitioning, serialization,
naming, source maps, host interfaces and asset rewriting.
"""

from css_split.core.base import (
    AtRule,
    BuildError,
    Chunk,
    CssSplitError,
    HostContractError,
    InvalidOptionError,
    NamingContext,
    NodeKind,
    OptionsError,
    Other,
    RenderedChunk,
    Rule,
    SourceMapError,
    SplitResult,
    StyleNode,
    StylesheetParseError,
    StylesheetRoot,
)
from css_split.core.counter import selector_weight, total_weight
from css_split.core.host import (
    Bundle,
    Compilation,
    HookPoint,
    RawSource,
    Source,
    SourceMapSource,
)
from css_split.core.naming import interpolate, normalize_imports
from css_split.core.parser import parse_stylesheet
from css_split.core.partitioner import partition
from css_split.core.rewriter import AssetRewriter, manifest_content
from css_split.core.serializer import ChunkSerializer
from css_split.core.sourcemap import SourceMap, SourceMapGenerator

__all__ = [
    "AtRule",
    "BuildError",
    "Chunk",
    "CssSplitError",
    "HostContractError",
    "InvalidOptionError",
    "NamingContext",
    "NodeKind",
    "OptionsError",
    "Other",
    "RenderedChunk",
    "Rule",
    "SourceMapError",
    "SplitResult",
    "StyleNode",
    "StylesheetParseError",
    "StylesheetRoot",
    "selector_weight",
    "total_weight",
    "Bundle",
    "Compilation",
    "HookPoint",
    "RawSource",
    "Source",
    "SourceMapSource",
    "interpolate",
    "normalize_imports",
    "parse_stylesheet",
    "partition",
    "AssetRewriter",
    "manifest_content",
    "ChunkSerializer",
    "SourceMap",
    "SourceMapGenerator",
]
