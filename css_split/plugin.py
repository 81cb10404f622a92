"""
Build plugin that splits stylesheet assets into size-bounded files.

Some legacy rendering engines ignore every rule past a fixed number of
selectors per stylesheet (about 4000 for old Internet Explorer). The plugin
walks every bundle of a build, splits each stylesheet that is over the limit
into several files, and optionally writes an imports manifest pulling the
pieces back together.

Examples:
    Immediate mode:
    ```python
    compilation = Compilation.from_files(["dist/styles.css"], public_path="/static")
    CSSSplitPlugin(size=4000, imports=True).run(compilation)
    ```

    Deferred mode, when another plugin also rewrites assets after optimization:
    ```python
    plugin = CSSSplitPlugin(PluginOptions(size=4000, defer=True))
    plugin.apply(compilation)
    compilation.call(HookPoint.PRE_EMIT)
    ```
"""

import re
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional

from css_split.config import PluginOptions
from css_split.core.base import HostContractError, RenderedChunk, SplitResult
from css_split.core.host import Bundle, Compilation, Done, HookPoint
from css_split.core.rewriter import AssetRewriter
from css_split.logging_config import debug_operation, get_logger, performance_log

logger = get_logger(__name__)

PLUGIN_NAME = "CSSSplitPlugin"

_CSS_RE = re.compile(r"\.css$")


def is_css(name: str) -> bool:
    """Detect if a file should be considered for splitting."""
    return bool(_CSS_RE.search(name))


class CSSSplitPlugin:
    """
    Splits stylesheet assets of a build.

    Args:
        options: Validated options; keyword arguments override or replace them
        on_render: Optional callback invoked with every rendered chunk
        **overrides: Individual options (``size``, ``imports``, ``filename``,
            ``preserve``, ``defer``, ``workers``)

    Raises:
        OptionsError: If ``imports`` is neither a boolean nor a string
        InvalidOptionError: If another option has an unusable value
    """

    def __init__(
        self,
        options: Optional[PluginOptions] = None,
        on_render: Optional[Callable[[RenderedChunk], None]] = None,
        **overrides: Any
    ):
        if options is None:
            options = PluginOptions.from_dict(overrides)
        elif overrides:
            options = PluginOptions.from_dict({**options.to_dict(), **overrides})
        self.options = options
        self.rewriter = AssetRewriter(options, on_render=on_render)

    @property
    def hook_point(self) -> HookPoint:
        return HookPoint.PRE_EMIT if self.options.defer else HookPoint.POST_OPTIMIZE

    def apply(self, compilation: Compilation) -> None:
        """Register the plugin on exactly one hook point of ``compilation``."""
        compilation.tap(self.hook_point, PLUGIN_NAME, self.process)
        logger.debug(f"{PLUGIN_NAME} registered at {self.hook_point.value}")

    def run(self, compilation: Compilation) -> None:
        """Register the plugin and run its hook point right away."""
        self.apply(compilation)
        compilation.call(self.hook_point)

    def process(self, compilation: Compilation, bundles: List[Bundle], done: Done) -> None:
        """
        Hook body: split every stylesheet of every bundle, then signal ``done``.

        All assets are split concurrently. Nothing is written to the build
        until every split succeeded; the first failure is handed to ``done``
        and the build is left as it was.
        """
        start_time = time.time()
        # A stylesheet shared by several bundles is split once and applied to all
        work: Dict[str, List[Bundle]] = {}
        for bundle in bundles:
            for name in bundle.files:
                if is_css(name):
                    holders = work.setdefault(name, [])
                    if not holders or holders[-1] is not bundle:
                        holders.append(bundle)
        names = list(work)
        debug_operation("css_split_discover", {
            "hook": self.hook_point.value,
            "assets": names,
        })

        try:
            results = self._split_all(compilation, names)
            for name, result in zip(names, results):
                self.rewriter.apply(result, compilation, work[name])
        except Exception as e:
            logger.error(f"{PLUGIN_NAME} failed: {e}")
            done(e)
            return

        split_count = sum(1 for result in results if result.is_split)
        performance_log("css_split", time.time() - start_time,
                        assets=len(names), split=split_count)
        logger.info(f"Checked {len(names)} stylesheets, split {split_count}")
        done(None)

    def _split_all(self, compilation: Compilation, names: List[str]) -> List[SplitResult]:
        """Split every asset on a thread pool and return results in ``names`` order."""
        if not names:
            return []
        missing = [name for name in names if name not in compilation.assets]
        if missing:
            raise HostContractError(f"Bundles list assets missing from the build: {missing}")

        results: List[Optional[SplitResult]] = [None] * len(names)
        with ThreadPoolExecutor(max_workers=self.options.workers) as executor:
            future_to_index = {
                executor.submit(self.rewriter.split, name, compilation.assets[name]): index
                for index, name in enumerate(names)
            }
            try:
                for future in as_completed(future_to_index):
                    results[future_to_index[future]] = future.result()
            except Exception:
                for future in future_to_index:
                    future.cancel()
                raise
        return results
