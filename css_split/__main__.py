#!/usr/bin/env python3
"""
Entry point for running css_split as a module.

This allows the package to be run with:
    python -m css_split
"""

from css_split.cli import main

if __name__ == "__main__":
    main()
