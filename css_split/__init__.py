"""
css_split

Splits generated stylesheets into several files, each under a maximum selector
count, for rendering engines that ignore rules past a fixed per-file limit.

Public API Examples:

Plugin:
    from css_split import CSSSplitPlugin, Compilation
    compilation = Compilation.from_files(["dist/styles.css"], public_path="/static")
    CSSSplitPlugin(size=4000, imports=True).run(compilation)
    compilation.emit("dist")

Engine:
    from css_split import parse_stylesheet, partition
    root = parse_stylesheet(open("styles.css").read(), source_path="styles.css")
    chunks = partition(root, 4000)

Configuration:
    from css_split import load_options, CSSSplitPlugin
    plugin = CSSSplitPlugin(load_options("css_split.yaml"))
"""

from css_split.core.base import (
    AtRule,
    BuildError,
    Chunk,
    CssSplitError,
    HostContractError,
    InvalidOptionError,
    NamingContext,
    OptionsError,
    Other,
    RenderedChunk,
    Rule,
    SourceMapError,
    SplitResult,
    StylesheetParseError,
    StylesheetRoot,
)
from css_split.core.counter import selector_weight, total_weight
from css_split.core.host import (
    Bundle,
    Compilation,
    HookPoint,
    RawSource,
    SourceMapSource,
)
from css_split.core.naming import interpolate, normalize_imports
from css_split.core.parser import parse_stylesheet
from css_split.core.partitioner import partition
from css_split.core.rewriter import AssetRewriter
from css_split.core.serializer import ChunkSerializer
from css_split.config import PluginOptions, load_options
from css_split.plugin import CSSSplitPlugin

from css_split.logging_config import (
    configure_logging,
    LogConfig,
    LogLevel,
    get_logger,
    user_info,
    user_success,
    user_warning,
    user_error,
    debug_operation,
    performance_log,
)

# Sensible defaults for library use; call configure_logging() to override
configure_logging(level=LogLevel.NORMAL, console_output=True)

__version__ = "0.1.0"

__all__ = [
    # Model
    "AtRule",
    "Chunk",
    "NamingContext",
    "Other",
    "RenderedChunk",
    "Rule",
    "SplitResult",
    "StylesheetRoot",

    # Errors
    "BuildError",
    "CssSplitError",
    "HostContractError",
    "InvalidOptionError",
    "OptionsError",
    "SourceMapError",
    "StylesheetParseError",

    # Engine
    "selector_weight",
    "total_weight",
    "parse_stylesheet",
    "partition",
    "ChunkSerializer",
    "interpolate",
    "normalize_imports",
    "AssetRewriter",

    # Host
    "Bundle",
    "Compilation",
    "HookPoint",
    "RawSource",
    "SourceMapSource",

    # Plugin and configuration
    "CSSSplitPlugin",
    "PluginOptions",
    "load_options",

    # Logging
    "configure_logging",
    "LogConfig",
    "LogLevel",
    "get_logger",
    "user_info",
    "user_success",
    "user_warning",
    "user_error",
    "debug_operation",
    "performance_log",

    "__version__",
]
