"""
Host build interfaces.

The splitting engine does not depend on a particular build tool. This module
defines the small surface it needs from one (assets with optional source maps,
bundles listing their files, a public path and two hook points) together with
an in-memory implementation used by the command line and the tests.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from css_split.core.base import BuildError, HostContractError

logger = logging.getLogger(__name__)

Done = Callable[[Optional[BaseException]], None]

_ANNOTATION_RE = re.compile(r"\s*/\*# sourceMappingURL=[^*]*\*/\s*$")


class HookPoint(Enum):
    """Points of the build lifecycle a plugin can hook into."""

    POST_OPTIMIZE = "post-optimize"  # after per-bundle asset optimization
    PRE_EMIT = "pre-emit"            # right before assets are written


class Source:
    """A readable build asset."""

    def source(self) -> str:
        raise NotImplementedError

    def map(self) -> Optional[Dict[str, Any]]:
        return None

    def source_and_map(self) -> Tuple[str, Optional[Dict[str, Any]]]:
        return self.source(), self.map()


class RawSource(Source):
    """An asset without a source map."""

    def __init__(self, text: str):
        self._text = text

    def source(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"RawSource({len(self._text)} chars)"


class SourceMapSource(Source):
    """An asset carrying a source map of its text."""

    def __init__(self, text: str, name: str, source_map: Union[str, Dict[str, Any], None]):
        self._text = text
        self.name = name
        if isinstance(source_map, str):
            source_map = json.loads(source_map)
        self._map = source_map

    def source(self) -> str:
        return self._text

    def map(self) -> Optional[Dict[str, Any]]:
        return self._map

    def __repr__(self) -> str:
        return f"SourceMapSource({self.name!r}, {len(self._text)} chars)"


@dataclass
class Bundle:
    """A named group of output files, in emit order."""

    name: str
    files: List[str] = field(default_factory=list)


@dataclass
class _Tap:
    name: str
    fn: Callable[["Compilation", List[Bundle], Done], None]


class Compilation:
    """
    In-memory build state: named assets, bundles and hook registrations.

    Examples:
        ```python
        compilation = Compilation.from_files(["dist/styles.css"])
        CSSSplitPlugin(size=4000).run(compilation)
        compilation.emit("dist")
        ```
    """

    def __init__(
        self,
        assets: Optional[Dict[str, Source]] = None,
        bundles: Optional[List[Bundle]] = None,
        public_path: str = ""
    ):
        self.assets: Dict[str, Source] = dict(assets or {})
        self.bundles: List[Bundle] = list(bundles or [])
        self.public_path = public_path
        self._taps: Dict[HookPoint, List[_Tap]] = {point: [] for point in HookPoint}

    def tap(self, point: HookPoint, name: str, fn: Callable[["Compilation", List[Bundle], Done], None]) -> None:
        """Register ``fn`` to run at ``point``."""
        self._taps[point].append(_Tap(name, fn))
        logger.debug(f"Tapped {name} into {point.value}")

    def taps(self, point: HookPoint) -> List[str]:
        return [tap.name for tap in self._taps[point]]

    def call(self, point: HookPoint) -> None:
        """
        Run every hook registered at ``point`` in registration order.

        Raises:
            BuildError: If a hook reports failure or never signals completion
        """
        for tap in self._taps[point]:
            outcome: List[Optional[BaseException]] = []
            tap.fn(self, self.bundles, outcome.append)
            if not outcome:
                raise BuildError(f"{tap.name} did not signal completion at {point.value}")
            if outcome[0] is not None:
                raise BuildError(f"{tap.name} failed at {point.value}: {outcome[0]}") from outcome[0]

    def emit(self, output_dir: Union[str, Path]) -> List[Path]:
        """
        Write every asset under ``output_dir``.

        Assets with a source map also get ``<name>.map`` and a
        ``sourceMappingURL`` annotation.
        """
        output_dir = Path(output_dir)
        written = []
        for name, asset in self.assets.items():
            text, source_map = asset.source_and_map()
            target = output_dir / name
            target.parent.mkdir(parents=True, exist_ok=True)
            if source_map is not None:
                map_target = target.with_name(target.name + ".map")
                map_target.write_text(json.dumps(source_map), encoding="utf-8")
                written.append(map_target)
                text = f"{text}\n/*# sourceMappingURL={map_target.name} */"
            target.write_text(text, encoding="utf-8")
            written.append(target)
        logger.debug(f"Emitted {len(written)} files to {output_dir}")
        return written

    @classmethod
    def from_files(
        cls,
        paths: Iterable[Union[str, Path]],
        bundle_name: str = "main",
        public_path: str = ""
    ) -> "Compilation":
        """
        Build a compilation holding stylesheet files from disk.

        A sibling ``<file>.map`` is loaded as the asset's source map. Assets
        are keyed by file name, so two paths sharing one are rejected.

        Raises:
            FileNotFoundError: If a path is not a file
            HostContractError: If two paths have the same file name
        """
        assets: Dict[str, Source] = {}
        bundle = Bundle(bundle_name)
        for path in paths:
            path = Path(path)
            if not path.is_file():
                raise FileNotFoundError(f"Stylesheet not found: {path}")
            if path.name in assets:
                raise HostContractError(f"Two stylesheets are named {path.name!r}: {path}")
            text = _ANNOTATION_RE.sub("", path.read_text(encoding="utf-8"))
            map_path = path.with_name(path.name + ".map")
            if map_path.is_file():
                assets[path.name] = SourceMapSource(
                    text, path.name, map_path.read_text(encoding="utf-8")
                )
            else:
                assets[path.name] = RawSource(text)
            bundle.files.append(path.name)
        return cls(assets=assets, bundles=[bundle], public_path=public_path)
