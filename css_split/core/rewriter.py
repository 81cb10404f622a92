"""
Asset rewriting.

Splitting one stylesheet asset happens in two steps. ``split`` is pure: it
parses, partitions, renders and names the chunks. ``apply`` is the only place
the build's asset set and bundle file lists are touched.
"""

import logging
import time
from typing import TYPE_CHECKING, Callable, List, Optional

from css_split.core.base import (
    HostContractError,
    InvalidOptionError,
    NamingContext,
    RenderedChunk,
    SplitResult,
)
from css_split.core.host import Bundle, Compilation, RawSource, Source, SourceMapSource
from css_split.core.naming import interpolate
from css_split.core.parser import parse_stylesheet
from css_split.core.partitioner import partition
from css_split.core.serializer import ChunkSerializer
from css_split.core.sourcemap import load_map

if TYPE_CHECKING:
    from css_split.config import PluginOptions

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_PATH = "./"


def strip_trailing_slash(path: str) -> str:
    """Remove one trailing ``/`` from a URL."""
    return path[:-1] if path.endswith("/") else path


def manifest_content(public_path: str, names: List[str]) -> str:
    """
    Build the text of an imports manifest.

    Args:
        public_path: Build public path; empty means ``./``
        names: Chunk file names in chunk order
    """
    prefix = strip_trailing_slash(public_path or DEFAULT_PUBLIC_PATH)
    return "\n".join(f'@import "{prefix}/{name}";' for name in names)


class AssetRewriter:
    """
    Splits stylesheet assets and rewrites the build around the result.

    Args:
        options: Validated plugin options
        on_render: Optional callback invoked with every rendered chunk
    """

    def __init__(
        self,
        options: "PluginOptions",
        on_render: Optional[Callable[[RenderedChunk], None]] = None
    ):
        self.options = options
        self.on_render = on_render

    def split(self, key: str, asset: Source) -> SplitResult:
        """
        Split one asset without touching the build.

        Args:
            key: Asset name in the build
            asset: The asset itself

        Returns:
            SplitResult with every rendered chunk in order
        """
        start_time = time.time()
        text, input_map = asset.source_and_map()
        root = parse_stylesheet(text, source_path=key, input_map=input_map)
        chunks = partition(root, self.options.size)

        serializer = ChunkSerializer(load_map(input_map), on_render=self.on_render)
        filename = self.options.filename
        rendered = tuple(
            serializer.render(chunk, lambda context: interpolate(filename, context))
            for chunk in chunks
        )
        names = [chunk.name for chunk in rendered]
        if len(set(names)) != len(names):
            raise InvalidOptionError(
                f"filename {filename!r} gives several chunks of {key} the same name: {names}"
            )

        logger.debug(
            f"Split {key} into {len(rendered)} chunks in {time.time() - start_time:.3f}s"
        )
        return SplitResult(file=key, chunks=rendered)

    def apply(self, result: SplitResult, compilation: Compilation, bundles: List[Bundle]) -> None:
        """
        Replace an asset with its chunks in every bundle that lists it.

        The chunks and the imports manifest are added to the asset set once.
        Each bundle gets the chunk names appended, loses the original unless
        ``preserve`` is set, and lists the manifest when the ``imports``
        option names one. Results with a single chunk are left alone.

        Raises:
            HostContractError: If the asset or a bundle entry is missing
        """
        if not result.is_split:
            logger.debug(f"{result.file} fits in one chunk, leaving it untouched")
            return

        key = result.file
        if key not in compilation.assets:
            raise HostContractError(f"Asset {key!r} is not part of the build")
        if not bundles:
            raise HostContractError(f"No bundle lists {key!r}")
        for bundle in bundles:
            if key not in bundle.files:
                raise HostContractError(f"Bundle {bundle.name!r} does not list {key!r}")

        for chunk in result.chunks:
            if chunk.map is not None:
                compilation.assets[chunk.name] = SourceMapSource(chunk.css, chunk.name, chunk.map)
            else:
                compilation.assets[chunk.name] = RawSource(chunk.css)

        manifest = self.options.imports_name(NamingContext(file=key, index=0))
        for bundle in bundles:
            bundle.files.extend(result.names)
            if not self.options.preserve:
                bundle.files.remove(key)
            if manifest is not False and manifest not in bundle.files:
                bundle.files.append(manifest)

        content = manifest_content(compilation.public_path, result.names)
        if not self.options.preserve:
            del compilation.assets[key]
        if manifest is not False:
            compilation.assets[manifest] = RawSource(content)

        logger.info(
            f"Split {key} into {len(result.chunks)} files for {len(bundles)} bundle(s)"
            + (f", imports in {manifest}" if manifest is not False else "")
        )

    def rewrite(
        self, key: str, compilation: Compilation, bundles: Optional[List[Bundle]] = None
    ) -> SplitResult:
        """
        Split and apply in one go.

        ``bundles`` defaults to every bundle of the build that lists ``key``.
        """
        if key not in compilation.assets:
            raise HostContractError(f"Asset {key!r} is not part of the build")
        if bundles is None:
            bundles = [bundle for bundle in compilation.bundles if key in bundle.files]
        result = self.split(key, compilation.assets[key])
        self.apply(result, compilation, bundles)
        return result
