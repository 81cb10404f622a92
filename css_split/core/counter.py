"""
Selector counting.

Legacy engines stop applying rules after a fixed number of selectors per
stylesheet, so the weight of a node is the number of selectors it adds to the
file it lands in.
"""

from typing import Iterable

from css_split.core.base import AtRule, Other, Rule, StyleNode


def selector_weight(node: StyleNode) -> int:
    """
    Get the number of selectors contributed by a node.

    Args:
        node: Rule, AtRule or Other node

    Returns:
        Selector count for a rule, ``1 + children`` for an at-rule with a
        block, 0 for everything else.
    """
    if isinstance(node, Rule):
        return len(node.selectors)
    if isinstance(node, AtRule):
        if node.children is None:
            return 0
        return 1 + total_weight(node.children)
    if isinstance(node, Other):
        return 0
    raise TypeError(f"Not a stylesheet node: {node!r}")


def total_weight(nodes: Iterable[StyleNode]) -> int:
    """Sum the weights of a sequence of nodes."""
    return sum(selector_weight(node) for node in nodes)
