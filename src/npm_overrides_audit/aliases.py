"""Resolve override names to the package names the package manager knows.

An override value of the form ``npm:<actual>@<range>`` installs a different
published package under the declared name. The package manager has to be
asked about ``<actual>``, while the report keeps showing the declared name.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models.override import AliasBinding, OverrideDeclaration

ALIAS_MARKER = "npm:"
# ">" separates parent and child, except where it opens a range (@>=1, @<2 || >3)
SELECTOR_SEPARATOR = re.compile(r"(?<=[^@\s|])>")


def parse_alias(spec: str) -> str | None:
    """Return the actual package name of an ``npm:`` alias spec, else None.

    ``npm:@rollup/wasm-node@^4.22.5`` -> ``@rollup/wasm-node``;
    ``npm:@scope/pkg`` -> ``@scope/pkg``.
    """
    if not spec.startswith(ALIAS_MARKER):
        return None
    target = spec[len(ALIAS_MARKER):]
    at_index = target.rfind("@")
    # index 0 is the scope prefix, not a version separator
    if at_index > 0:
        return target[:at_index]
    return target


def selector_target(key: str) -> str:
    """Return the package an override key applies to.

    Plain keys are returned unchanged. pnpm selector keys such as
    ``parent@1>child@<2`` apply to their last package, ``child``. A ``>``
    inside a version range (``foo@>=1.0.0``) does not split the key.
    """
    last = SELECTOR_SEPARATOR.split(key)[-1].strip()
    at_index = last.find("@", 1)
    if at_index > 0:
        return last[:at_index]
    return last


def resolve_aliases(
    declarations: Iterable[OverrideDeclaration],
) -> tuple[list[str], dict[str, str]]:
    """Split declarations into query names and an alias map.

    Returns ``(query_names, alias_map)``: ``query_names`` lists each name to
    ask the package manager about once, in declaration order; ``alias_map``
    maps a declared alias name to its actual package name.
    """
    query_names: dict[str, None] = {}
    bindings: list[AliasBinding] = []

    for declaration in declarations:
        actual = parse_alias(declaration.spec)
        if actual is None:
            query_names.setdefault(selector_target(declaration.name), None)
            continue
        query_names.setdefault(actual, None)
        if actual != declaration.name:
            bindings.append(AliasBinding(declared_name=declaration.name, actual_name=actual))

    alias_map = {binding.declared_name: binding.actual_name for binding in bindings}
    return list(query_names), alias_map
