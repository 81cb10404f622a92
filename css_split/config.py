"""
Plugin configuration.

Options are validated once, when they are built, so that a bad configuration
fails before any build hook runs. They can also be loaded from YAML or JSON
files, either as a top-level mapping or under a ``css_split`` section.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from css_split.core.base import InvalidOptionError
from css_split.core.naming import DEFAULT_FILENAME, ImportsName, names_each_chunk, normalize_imports

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 4000
CONFIG_SECTION = "css_split"


@dataclass(frozen=True)
class PluginOptions:
    """
    Immutable, validated plugin options.

    Attributes:
        size: Maximum selector weight per generated file
        imports: False for no manifest, True for a default manifest name, or a
            filename template for the manifest
        filename: Template for generated chunk names
        preserve: Keep the original unsplit asset
        defer: Split at final emit instead of after chunk asset optimization
        workers: Thread pool size for splitting assets (None lets the pool decide)
    """

    size: int = DEFAULT_SIZE
    imports: Union[bool, str] = False
    filename: str = DEFAULT_FILENAME
    preserve: bool = False
    defer: bool = False
    workers: Optional[int] = None
    imports_name: ImportsName = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise InvalidOptionError(f"size must be a positive integer, got {self.size!r}")
        if not isinstance(self.filename, str) or not self.filename:
            raise InvalidOptionError(f"filename must be a non-empty template, got {self.filename!r}")
        if not names_each_chunk(self.filename):
            raise InvalidOptionError(
                f"filename must contain [part] or [hash] to name each chunk, got {self.filename!r}"
            )
        if self.workers is not None and (
            isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1
        ):
            raise InvalidOptionError(f"workers must be a positive integer, got {self.workers!r}")
        object.__setattr__(self, "imports_name", normalize_imports(self.imports, bool(self.preserve)))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PluginOptions":
        """Build options from a mapping, rejecting unknown keys."""
        data = dict(data or {})
        known = {f.name for f in fields(cls) if f.init}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidOptionError(f"Unknown option(s): {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}

    def replace(self, **changes: Any) -> "PluginOptions":
        """Return a copy with some options changed (None values are ignored)."""
        data = self.to_dict()
        data.update({key: value for key, value in changes.items() if value is not None})
        return PluginOptions.from_dict(data)


def load_options(config_path: Union[str, Path]) -> PluginOptions:
    """
    Load plugin options from a YAML or JSON file.

    Args:
        config_path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        Validated PluginOptions

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidOptionError: If the file format or its keys are not supported
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        if config_path.suffix.lower() in ['.yaml', '.yml']:
            raw_config = yaml.safe_load(f)
        elif config_path.suffix.lower() == '.json':
            raw_config = json.load(f)
        else:
            raise InvalidOptionError(f"Unsupported configuration file format: {config_path.suffix}")

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise InvalidOptionError(f"Configuration must be a mapping: {config_path}")
    if CONFIG_SECTION in raw_config:
        raw_config = raw_config[CONFIG_SECTION] or {}

    logger.debug(f"Loaded options from {config_path}: {raw_config}")
    return PluginOptions.from_dict(raw_config)
