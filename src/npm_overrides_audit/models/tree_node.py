"""Unified tree node model."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class UnifiedTreeNode:
    """A package in a merged dependent tree.

    ``children`` is keyed by identity and keeps insertion order, so an identity
    occurs at most once below any node.
    """

    identity: str
    original_specifier: str | None = None
    children: dict[str, UnifiedTreeNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "identity": self.identity,
            "originalSpecifier": self.original_specifier,
            "children": [child.to_dict() for child in self.children.values()],
        }
