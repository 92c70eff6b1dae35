"""Extract dependent chains from ``npm explain --json`` records.

A record describes one installed package and the forest of packages that
depend on it::

    {
      "name": "send", "version": "0.19.1", "overridden": true,
      "dependents": [
        {"type": "prod", "name": "send", "spec": "^0.17.2",
         "from": {"name": "honkit", "version": "6.0.3", "dependents": [...]}}
      ]
    }

Every path from the package out to a dependent with no further dependents
becomes one chain. A dependent's ``rawSpec`` (or ``spec``) is the range its
``from`` package requested before the override applied.
"""

from __future__ import annotations

from typing import Any

from .models.chain import DependencyChain, PathSegment, dedupe_chains, format_identity


def record_specifier(dependent: dict[str, Any]) -> str | None:
    """Return the pre-override specifier of a dependent edge, if any."""
    spec = dependent.get("rawSpec") or dependent.get("spec")
    if isinstance(spec, str) and spec:
        return spec
    return None


def _walk(
    dependent: Any,
    path: list[PathSegment],
    results: list[list[PathSegment]],
) -> None:
    if not isinstance(dependent, dict):
        return

    origin = dependent.get("from")
    if not isinstance(origin, dict) or not origin.get("name"):
        # the root project: ends the path, carries no identity of its own
        if path:
            results.append(path)
        return

    segment = PathSegment(
        identity=format_identity(str(origin["name"]), origin.get("version")),
        original_specifier=record_specifier(dependent),
    )
    if any(seen.identity == segment.identity for seen in path):
        results.append(path)
        return

    new_path = path + [segment]
    nested = origin.get("dependents") or []
    if not isinstance(nested, list) or not nested:
        results.append(new_path)
        return

    for nested_dependent in nested:
        _walk(nested_dependent, new_path, results)


def extract_chains(
    record: dict[str, Any], root_identity: str | None = None
) -> tuple[DependencyChain, ...]:
    """Return every distinct chain from the explained package to its roots.

    ``root_identity`` replaces the ``name@version`` of the first segment, which
    is how aliased packages are labelled with both of their names.
    """
    root = PathSegment(
        identity=root_identity or format_identity(str(record.get("name", "")), record.get("version"))
    )

    dependents = record.get("dependents") or []
    if not isinstance(dependents, list):
        dependents = []

    paths: list[list[PathSegment]] = []
    for dependent in dependents:
        _walk(dependent, [], paths)

    if not paths:
        return ((root,),)

    return dedupe_chains([(root, *path) for path in paths])
