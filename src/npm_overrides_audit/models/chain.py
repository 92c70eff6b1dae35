"""Dependent chain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

UNKNOWN_VERSION = "unknown"
PATH_SEPARATOR = " > "


@dataclass(frozen=True)
class PathSegment:
    """One package on a dependent chain.

    ``original_specifier`` is the range the previous package on the chain was
    requested with by this one, before the override rewrote it. It is ``None``
    for the first segment of a chain.
    """

    identity: str
    original_specifier: str | None = None

    def __post_init__(self) -> None:
        if not self.identity:
            raise ValueError("Segment identity must be non-empty")


# Root-to-leaf: the overridden package first, then its dependents outward.
DependencyChain: TypeAlias = tuple[PathSegment, ...]


def format_identity(name: str, version: str | None) -> str:
    return f"{name}@{version or UNKNOWN_VERSION}"


def format_chain(chain: DependencyChain) -> str:
    """Return ``a@1 > b@2 > c@3`` for a chain."""
    return PATH_SEPARATOR.join(segment.identity for segment in chain)


def dedupe_chains(chains: list[DependencyChain]) -> tuple[DependencyChain, ...]:
    """Drop repeated chains, keeping the first occurrence's position."""
    return tuple(dict.fromkeys(chains))
