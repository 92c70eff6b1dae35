"""Data models for the override audit."""

from __future__ import annotations

from .chain import DependencyChain, PathSegment, format_chain, format_identity
from .override import AliasBinding, OverrideDeclaration, UnusedOverride
from .tree_node import UnifiedTreeNode
from .usage import OverrideUsage

__all__ = [
    "AliasBinding",
    "DependencyChain",
    "OverrideDeclaration",
    "OverrideUsage",
    "PathSegment",
    "UnifiedTreeNode",
    "UnusedOverride",
    "format_chain",
    "format_identity",
]
