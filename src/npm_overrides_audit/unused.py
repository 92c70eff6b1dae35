"""Find overrides that are declared but never applied."""

from __future__ import annotations

from collections.abc import Iterable

from .aliases import selector_target
from .models.override import OverrideDeclaration, UnusedOverride
from .models.usage import OverrideUsage


def find_unused(
    declared: Iterable[OverrideDeclaration], found: Iterable[OverrideUsage]
) -> list[UnusedOverride]:
    """Return declarations whose name matches no usage, in declaration order.

    A selector key such as ``parent>child@1`` matches a usage of ``child``.
    The declared spec is reported verbatim.
    """
    found_names = {usage.name for usage in found}
    unused: dict[str, UnusedOverride] = {}

    for declaration in declared:
        if declaration.name in found_names or selector_target(declaration.name) in found_names:
            continue
        unused.setdefault(
            declaration.name,
            UnusedOverride(name=declaration.name, declared_version=declaration.spec),
        )

    return list(unused.values())
