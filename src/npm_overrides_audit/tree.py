"""Merge dependent chains into one tree per overridden package and render it.

Chains for a package all start at the package itself. Folding them into a
tree collapses shared prefixes, so a dependent reached through several paths
is listed once under each distinct parent. Every node keeps the specifier its
parent originally requested it with; when chains disagree on that specifier
the first non-empty one seen wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable, Iterator

from .models.chain import DependencyChain
from .models.tree_node import UnifiedTreeNode

INDENT = "   "
BULLET = " - "


class EmptyInput(ValueError):
    """Raised when asked to unify an empty set of chains."""


@dataclass(frozen=True)
class SpecifierConflict:
    """An edge that two chains recorded with different specifiers."""

    path: tuple[str, ...]
    kept: str
    ignored: str

    def to_dict(self) -> dict[str, object]:
        return {
            "path": list(self.path),
            "kept": self.kept,
            "ignored": self.ignored,
        }


def unify(chains: Iterable[DependencyChain]) -> UnifiedTreeNode:
    """Fold ``chains`` into a single tree rooted at their shared first segment.

    Raises:
        EmptyInput: if ``chains`` yields nothing.
    """
    chains = list(chains)
    if not chains or not chains[0]:
        raise EmptyInput("No dependency chains provided")

    root = UnifiedTreeNode(identity=chains[0][0].identity)

    for chain in chains:
        node = root
        for segment in chain[1:]:
            child = node.children.get(segment.identity)
            if child is None:
                child = UnifiedTreeNode(
                    identity=segment.identity,
                    original_specifier=segment.original_specifier,
                )
                node.children[segment.identity] = child
            elif child.original_specifier is None and segment.original_specifier:
                child.original_specifier = segment.original_specifier
            node = child

    return root


def iter_nodes(tree: UnifiedTreeNode, depth: int = 0) -> Iterator[tuple[int, UnifiedTreeNode]]:
    """Yield ``(depth, node)`` pairs in pre-order, children in insertion order."""
    yield depth, tree
    for child in tree.children.values():
        yield from iter_nodes(child, depth + 1)


def count_nodes(tree: UnifiedTreeNode) -> int:
    return sum(1 for _ in iter_nodes(tree))


def iter_specifier_conflicts(chains: Iterable[DependencyChain]) -> Iterator[SpecifierConflict]:
    """Yield each edge whose specifier differs from the one ``unify`` keeps."""
    kept: dict[tuple[str, ...], str] = {}
    reported: set[tuple[tuple[str, ...], str]] = set()

    for chain in chains:
        path: tuple[str, ...] = ()
        for position, segment in enumerate(chain):
            path = path + (segment.identity,)
            if position == 0 or not segment.original_specifier:
                continue
            first = kept.setdefault(path, segment.original_specifier)
            if first == segment.original_specifier:
                continue
            if (path, segment.original_specifier) in reported:
                continue
            reported.add((path, segment.original_specifier))
            yield SpecifierConflict(path=path, kept=first, ignored=segment.original_specifier)


def _display_name(node: UnifiedTreeNode) -> str:
    if node.original_specifier:
        return f"{node.identity} ({node.original_specifier})"
    return node.identity


def render(tree: UnifiedTreeNode) -> str:
    """Return the indented text form of ``tree``.

    >>> from npm_overrides_audit.models import PathSegment
    >>> print(render(unify([(PathSegment("send@0.19.1"), PathSegment("honkit@6.0.3", "^0.17.2"))])))
    send@0.19.1
     - honkit@6.0.3 (^0.17.2)
    """
    lines = []
    for depth, node in iter_nodes(tree):
        if depth == 0:
            lines.append(node.identity)
        else:
            lines.append(INDENT * (depth - 1) + BULLET + _display_name(node))
    return "\n".join(lines)
