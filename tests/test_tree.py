"""Tests for merging dependent chains into one tree and rendering it."""

import pytest

from npm_overrides_audit.models import PathSegment, UnifiedTreeNode
from npm_overrides_audit.tree import (
    EmptyInput,
    count_nodes,
    iter_specifier_conflicts,
    render,
    unify,
)


# =============================================================================
# Helper Functions
# =============================================================================


def chain(*parts):
    """Build a chain from ``"a@1"`` or ``("a@1", "^1.0.0")`` parts."""
    segments = []
    for part in parts:
        if isinstance(part, tuple):
            segments.append(PathSegment(part[0], part[1]))
        else:
            segments.append(PathSegment(part))
    return tuple(segments)


# =============================================================================
# unify Tests
# =============================================================================


class TestUnify:
    """Test folding chains into a tree"""

    def test_empty_input_raises(self):
        """Unifying nothing is a caller error"""
        with pytest.raises(EmptyInput):
            unify([])

    def test_single_segment_chain_is_bare_root(self):
        """A package nothing depends on yields a childless root"""
        tree = unify([chain("send@0.19.1")])

        assert tree.identity == "send@0.19.1"
        assert tree.children == {}

    def test_shared_prefix_is_not_duplicated(self):
        """a > b > c and a > b > d share the b node"""
        tree = unify([chain("a@1", "b@2", "c@3"), chain("a@1", "b@2", "d@4")])

        assert tree.identity == "a@1"
        assert list(tree.children) == ["b@2"]
        assert list(tree.children["b@2"].children) == ["c@3", "d@4"]
        assert count_nodes(tree) == 4

    def test_same_name_different_versions_are_siblings(self):
        """Identity includes the version, so both versions stay visible"""
        tree = unify([chain("a@1", "b@1.0.0"), chain("a@1", "b@2.0.0")])

        assert list(tree.children) == ["b@1.0.0", "b@2.0.0"]

    def test_duplicate_chain_does_not_change_tree(self):
        """Unifying with a repeated chain gives the same tree"""
        chains = [chain("a@1", ("b@2", "^2"), ("c@3", "~3")), chain("a@1", ("d@4", "4"))]

        once = unify(chains)
        twice = unify(chains + [chains[0]])

        assert count_nodes(once) == count_nodes(twice)
        assert once.to_dict() == twice.to_dict()

    def test_first_specifier_wins(self):
        """A later chain cannot replace a recorded specifier"""
        tree = unify([chain("a@1", ("b@2", "^1.0.0")), chain("a@1", ("b@2", "^1.5.0"))])

        assert tree.children["b@2"].original_specifier == "^1.0.0"

    def test_first_specifier_wins_in_reverse_order(self):
        """Iteration order decides the winner"""
        tree = unify([chain("a@1", ("b@2", "^1.5.0")), chain("a@1", ("b@2", "^1.0.0"))])

        assert tree.children["b@2"].original_specifier == "^1.5.0"

    def test_absent_specifier_is_backfilled(self):
        """A node created without a specifier takes the first one seen later"""
        tree = unify([chain("a@1", "b@2", "c@3"), chain("a@1", ("b@2", "^2"), "d@4")])

        assert tree.children["b@2"].original_specifier == "^2"

    def test_node_count_bounds(self):
        """Node count lies between the longest chain and the sum of lengths"""
        chains = [
            chain("a@1", "b@2", "c@3", "e@5"),
            chain("a@1", "b@2", "d@4"),
            chain("a@1", "f@6"),
        ]
        tree = unify(chains)
        total = count_nodes(tree)

        assert max(len(c) for c in chains) <= total <= sum(len(c) for c in chains)
        assert total == 6

    def test_disjoint_chains_reach_the_upper_bound(self):
        """With nothing shared but the root, every other segment is a node"""
        chains = [chain("a@1", "b@2"), chain("a@1", "c@3"), chain("a@1", "d@4", "e@5")]

        assert count_nodes(unify(chains)) == sum(len(c) - 1 for c in chains) + 1


# =============================================================================
# iter_specifier_conflicts Tests
# =============================================================================


class TestSpecifierConflicts:
    """Test reporting of edges recorded with different specifiers"""

    def test_no_conflict_for_agreeing_chains(self):
        """Identical specifiers are not conflicts"""
        chains = [chain("a@1", ("b@2", "^1")), chain("a@1", ("b@2", "^1"), "c@3")]

        assert list(iter_specifier_conflicts(chains)) == []

    def test_conflict_reports_kept_and_ignored(self):
        """The conflict names the specifier unify keeps"""
        chains = [chain("a@1", ("b@2", "^1.0.0")), chain("a@1", ("b@2", "^1.5.0"))]

        conflicts = list(iter_specifier_conflicts(chains))

        assert len(conflicts) == 1
        assert conflicts[0].path == ("a@1", "b@2")
        assert conflicts[0].kept == unify(chains).children["b@2"].original_specifier
        assert conflicts[0].ignored == "^1.5.0"

    def test_same_edge_under_different_parents_is_not_a_conflict(self):
        """Edges are keyed by their full path from the root"""
        chains = [chain("a@1", ("b@2", "^1"), ("x@9", "^9")), chain("a@1", ("c@3", "^3"), ("x@9", "^8"))]

        assert list(iter_specifier_conflicts(chains)) == []


# =============================================================================
# render Tests
# =============================================================================


class TestRender:
    """Test the indented text form"""

    def test_single_dependent(self):
        """A single honkit dependent renders with its specifier"""
        tree = unify([chain("send@0.19.1", ("honkit@6.0.3", "^0.17.2"))])

        assert render(tree) == "send@0.19.1\n - honkit@6.0.3 (^0.17.2)"

    def test_root_only(self):
        """A bare root renders as its identity"""
        assert render(UnifiedTreeNode(identity="send@0.19.1")) == "send@0.19.1"

    def test_nested_indentation_and_insertion_order(self):
        """Children keep first-seen order and indent three spaces per level"""
        tree = unify(
            [
                chain(
                    "cheerio@1.0.0-rc.12",
                    ("@honkit/html@6.0.3", "^1.0.0-rc.12"),
                    ("@honkit/markdown-legacy@6.0.3", "6.0.3"),
                    "honkit@6.0.3",
                ),
                chain(
                    "cheerio@1.0.0-rc.12",
                    ("@honkit/html@6.0.3", "^1.0.0-rc.12"),
                    ("@honkit/asciidoc@6.0.3", "6.0.3"),
                    "honkit@6.0.3",
                ),
            ]
        )

        assert render(tree).splitlines() == [
            "cheerio@1.0.0-rc.12",
            " - @honkit/html@6.0.3 (^1.0.0-rc.12)",
            "    - @honkit/markdown-legacy@6.0.3 (6.0.3)",
            "       - honkit@6.0.3",
            "    - @honkit/asciidoc@6.0.3 (6.0.3)",
            "       - honkit@6.0.3",
        ]
