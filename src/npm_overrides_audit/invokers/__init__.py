"""Package manager backends that explain why a package is installed.

The registry maps each package manager to the function that queries it and
turns its response into override usages, so the rest of the audit does not
depend on which manager produced the data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias
from collections.abc import Callable

from ..discovery import PackageManager
from ..models.override import OverrideDeclaration
from ..models.usage import OverrideUsage
from . import npm_explain, pnpm_why
from .process import QueryInvocationFailed

AnalyzeFunction: TypeAlias = Callable[[Path, list[OverrideDeclaration], float], list[OverrideUsage]]


@dataclass(slots=True, frozen=True)
class ManagerHandler:
    """Binds a package manager to its analysis function and override sources."""

    manager: PackageManager
    display_name: str
    analyze: AnalyzeFunction
    reads_pnpm_overrides: bool


MANAGER_HANDLERS: dict[PackageManager, ManagerHandler] = {
    PackageManager.NPM: ManagerHandler(
        manager=PackageManager.NPM,
        display_name="npm explain",
        analyze=npm_explain.analyze,
        reads_pnpm_overrides=False,
    ),
    PackageManager.PNPM: ManagerHandler(
        manager=PackageManager.PNPM,
        display_name="pnpm why",
        analyze=pnpm_why.analyze,
        reads_pnpm_overrides=True,
    ),
}


def get_handler(manager: PackageManager) -> ManagerHandler:
    return MANAGER_HANDLERS[manager]


__all__ = [
    "MANAGER_HANDLERS",
    "ManagerHandler",
    "QueryInvocationFailed",
    "get_handler",
]
