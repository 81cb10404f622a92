"""
Shared fixtures for the css_split test suite.
"""

from typing import Dict, List, Optional

import pytest

from css_split.core.base import Other, StyleNode
from css_split.core.host import Bundle, Compilation, RawSource, Source

TWELVE_RULES = """
one {}
two {}
three {}
four {}
five {}
six {}
seven {}
eight {}
nine {}
ten {}
eleven {}
twelve {}
"""


def rules_of(nodes: List[StyleNode]) -> List[StyleNode]:
    """Nodes that are not whitespace or comments."""
    return [node for node in nodes if not isinstance(node, Other)]


@pytest.fixture
def twelve_rules() -> str:
    return TWELVE_RULES


@pytest.fixture
def make_compilation():
    """Factory for a one-bundle compilation holding the given assets."""

    def factory(
        assets: Dict[str, str],
        public_path: str = "/foo",
        extra_files: Optional[List[str]] = None,
        sources: Optional[Dict[str, Source]] = None
    ) -> Compilation:
        all_assets: Dict[str, Source] = {name: RawSource(text) for name, text in assets.items()}
        all_assets.update(sources or {})
        files = list(extra_files or []) + list(all_assets)
        for name in extra_files or []:
            all_assets.setdefault(name, RawSource("console.log('hi');"))
        return Compilation(
            assets=all_assets,
            bundles=[Bundle("main", files)],
            public_path=public_path,
        )

    return factory
