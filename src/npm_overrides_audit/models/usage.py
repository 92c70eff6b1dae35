"""Override usage model."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable

from .chain import DependencyChain, dedupe_chains, format_chain
from .tree_node import UnifiedTreeNode


@dataclass(frozen=True)
class OverrideUsage:
    """An override that is applied somewhere in the resolved graph.

    ``aliased_from`` is the declared name when the override is an
    ``npm:<actual>@<range>`` alias; ``actual_name`` is then the published
    package it points at.
    """

    name: str
    version: str
    chains: tuple[DependencyChain, ...]
    aliased_from: str | None = None
    actual_name: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Usage name must be non-empty")
        if not self.chains:
            raise ValueError("A usage must carry at least one chain")
        if len(set(self.chains)) != len(self.chains):
            raise ValueError("Chains must be unique")

    @property
    def identity(self) -> str:
        return self.chains[0][0].identity

    @property
    def paths(self) -> list[str]:
        return [format_chain(chain) for chain in self.chains]

    @property
    def tree(self) -> UnifiedTreeNode:
        from ..tree import unify

        return unify(self.chains)

    @property
    def rendered_tree(self) -> str:
        from ..tree import render

        return render(self.tree)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.version,
            "aliasedFrom": self.aliased_from,
            "actualName": self.actual_name,
            "paths": self.paths,
            "tree": self.tree.to_dict(),
        }

    @classmethod
    def from_chains(
        cls,
        *,
        name: str,
        version: str,
        chains: Iterable[DependencyChain],
        aliased_from: str | None = None,
        actual_name: str | None = None,
    ) -> OverrideUsage:
        return cls(
            name=name,
            version=version,
            chains=dedupe_chains(list(chains)),
            aliased_from=aliased_from,
            actual_name=actual_name,
        )
