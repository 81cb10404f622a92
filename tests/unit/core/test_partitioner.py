"""
Tests for chunk partitioning.

Covers the size bound, ordering, oversized nodes and empty input.
"""

import pytest

from css_split.core.base import InvalidOptionError, Rule, StylesheetRoot
from css_split.core.counter import selector_weight, total_weight
from css_split.core.parser import parse_stylesheet
from css_split.core.partitioner import partition
from tests.conftest import TWELVE_RULES, rules_of


def rule_counts(chunks):
    return [len(rules_of(chunk.nodes)) for chunk in chunks]


class TestPartition:
    """Test suite for partition()."""

    def setup_method(self):
        self.root = parse_stylesheet(TWELVE_RULES, source_path="styles.css")

    def test_breaks_input_into_chunks_of_max_size(self):
        """Test splitting twelve rules into chunks of five."""
        chunks = partition(self.root, 5)
        assert len(chunks) == 3
        assert rule_counts(chunks) == [5, 5, 2]
        assert [chunk.weight for chunk in chunks] == [5, 5, 2]

    def test_counts_multiple_selectors_per_rule(self):
        """Test that rules with several selectors weigh more."""
        root = parse_stylesheet(TWELVE_RULES.replace("two", "two-a, two-b"))
        chunks = partition(root, 5)
        assert len(chunks) == 3
        assert rule_counts(chunks) == [4, 5, 3]
        assert [chunk.weight for chunk in chunks] == [5, 5, 3]

    def test_at_rule_gets_its_own_chunk(self):
        """Test that an at-rule too big to fit starts a chunk."""
        root = parse_stylesheet(TWELVE_RULES + " @media print { a {} b {} c {} }")
        chunks = partition(root, 5)
        assert len(chunks) == 4
        assert rule_counts(chunks)[3] == 1
        assert chunks[3].weight == 4

    def test_nested_at_rules(self):
        """Test partitioning nested at-rules."""
        media = "@media print { @media print { a {} b {} c {} } }"
        chunks = partition(parse_stylesheet(TWELVE_RULES + media), 5)
        assert len(chunks) == 4
        assert rule_counts(chunks)[3] == 1
        assert chunks[3].weight == 5

    def test_oversized_node_stays_whole_and_alone(self):
        """Test that an oversized node is never broken up."""
        root = parse_stylesheet("a {}\nb, c, d, e, f, g, h {}\ni {}")
        chunks = partition(root, 3)
        assert rule_counts(chunks) == [1, 1, 1]
        assert [chunk.weight for chunk in chunks] == [1, 7, 1]
        assert rules_of(chunks[1].nodes)[0].selectors == ("b", "c", "d", "e", "f", "g", "h")

    def test_oversized_first_node(self):
        """Test an oversized node at the start."""
        chunks = partition(parse_stylesheet("a, b, c {}\nd {}"), 2)
        assert [chunk.weight for chunk in chunks] == [3, 1]

    def test_no_chunk_overflows_before_its_last_node(self):
        """Test that only a chunk's last node may push it over the bound."""
        text = "\n".join(
            ", ".join(f"s{i}-{j}" for j in range(i % 4 + 1)) + " {}"
            for i in range(40)
        )
        root = parse_stylesheet(text)
        for size in (1, 2, 3, 5, 8, 100):
            for chunk in partition(root, size):
                weights = [selector_weight(node) for node in chunk.nodes]
                rules = [w for w in weights if w]
                if len(rules) == 1:
                    continue
                assert chunk.weight <= size

    def test_concatenation_reproduces_original_nodes(self):
        """Test that chunks concatenate back into the input nodes."""
        root = parse_stylesheet(TWELVE_RULES + "@media print { a {} }\n/* tail */")
        chunks = partition(root, 4)
        flattened = [node for chunk in chunks for node in chunk.nodes]
        assert len(flattened) == len(root.nodes)
        assert all(a is b for a, b in zip(flattened, root.nodes))
        assert sum(chunk.weight for chunk in chunks) == total_weight(root.nodes)

    def test_chunks_are_indexed_and_share_metadata(self):
        """Test chunk indexes and shared root metadata."""
        chunks = partition(self.root, 5)
        assert [chunk.index for chunk in chunks] == [0, 1, 2]
        for chunk in chunks:
            assert chunk.root is self.root
            assert chunk.to_root().source_path == "styles.css"

    def test_root_is_not_mutated(self):
        """Test that partitioning leaves the root alone."""
        before = self.root.nodes
        partition(self.root, 2)
        assert self.root.nodes is before

    def test_single_chunk_when_under_bound(self):
        """Test input that fits in one chunk."""
        chunks = partition(self.root, 4000)
        assert len(chunks) == 1
        assert chunks[0].weight == 12

    def test_empty_input_gives_no_chunks(self):
        """Test that empty input gives no chunks."""
        assert partition(StylesheetRoot(), 5) == []
        assert partition(parse_stylesheet(""), 5) == []

    def test_whitespace_only_input_gives_one_empty_chunk(self):
        """Test input holding only whitespace."""
        chunks = partition(parse_stylesheet("\n  /* nothing */\n"), 5)
        assert len(chunks) == 1
        assert chunks[0].weight == 0

    def test_deterministic(self):
        """Test that partitioning is deterministic."""
        first = partition(self.root, 3)
        second = partition(self.root, 3)
        assert [c.nodes for c in first] == [c.nodes for c in second]

    @pytest.mark.parametrize("size", [0, -1, 2.5, "5", True])
    def test_invalid_size(self, size):
        """Test that a non-positive size is rejected."""
        with pytest.raises(InvalidOptionError):
            partition(self.root, size)

    def test_rules_are_rule_nodes(self):
        """Test that chunk rules are Rule nodes."""
        chunk = partition(self.root, 5)[0]
        assert all(isinstance(node, Rule) for node in rules_of(chunk.nodes))
