#!/usr/bin/env python3
"""
Basic Usage Examples - Splitting Stylesheets with css_split

This script walks through counting selectors, splitting a stylesheet inside a
build and writing the results to disk.

Run with: python examples/01_basic_usage.py
"""

import tempfile
from pathlib import Path

from css_split import CSSSplitPlugin, Compilation, parse_stylesheet, partition, total_weight

SAMPLE = Path(__file__).resolve().parent.parent / "test_data" / "styles.css"


def example_1_count_selectors():
    """Count the selectors that limit a stylesheet."""
    print("\n🎯 Example 1: Counting Selectors")
    print("=" * 50)

    root = parse_stylesheet(SAMPLE.read_text(encoding="utf-8"), source_path=SAMPLE.name)
    print(f"📊 {SAMPLE.name}: {total_weight(root.nodes)} selectors")

    for size in (3, 5, 10):
        chunks = partition(root, size)
        print(f"📄 size={size}: {len(chunks)} files, weights {[chunk.weight for chunk in chunks]}")


def example_2_split_in_build():
    """Split a stylesheet inside an in-memory build."""
    print("\n🎯 Example 2: Splitting in a Build")
    print("=" * 50)

    compilation = Compilation.from_files([SAMPLE], public_path="/static/")
    CSSSplitPlugin(size=5, imports=True).run(compilation)

    for bundle in compilation.bundles:
        print(f"📦 {bundle.name}: {bundle.files}")
    print(f"📄 Manifest:\n{compilation.assets['styles.css'].source()}")


def example_3_write_files():
    """Split and write the results to a directory."""
    print("\n🎯 Example 3: Writing Files")
    print("=" * 50)

    with tempfile.TemporaryDirectory() as out_dir:
        compilation = Compilation.from_files([SAMPLE])
        CSSSplitPlugin(size=5, filename="[name].[hash:8].[ext]").run(compilation)
        for path in compilation.emit(out_dir):
            print(f"💾 {path.name} ({path.stat().st_size} bytes)")


if __name__ == "__main__":
    print("🚀 css_split basic usage")
    example_1_count_selectors()
    example_2_split_in_build()
    example_3_write_files()
    print("\n✅ Done")
