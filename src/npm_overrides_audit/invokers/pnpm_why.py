"""pnpm backend: ``pnpm why <names...> --json``.

pnpm prints one tree per workspace project, running from the project down to
each occurrence of the queried packages::

    [{"name": "site", "version": "1.0.0", "path": "/repo",
      "dependencies": {"honkit": {"from": "honkit", "version": "6.0.3",
                                   "dependencies": {"send": {...}}}}}]

Paths are reversed so that, as with npm, every chain starts at the overridden
package and ends at the project. pnpm does not report the requested range; a
segment installed under an alias carries the real package name (pnpm's
``from``) as its specifier instead. pnpm also has no per-node ``overridden``
flag: a declared override whose package is installed counts as applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ..aliases import parse_alias, resolve_aliases, selector_target
from ..models.chain import DependencyChain, PathSegment, UNKNOWN_VERSION, format_identity
from ..models.override import OverrideDeclaration
from ..models.usage import OverrideUsage
from .process import QueryInvocationFailed, error_payload, run_json_command

logger = logging.getLogger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


def query(directory: Path, names: list[str], timeout: float) -> list[dict[str, Any]]:
    """Return the per-project trees printed by ``pnpm why``.

    Raises:
        QueryInvocationFailed: if pnpm cannot run or reports an error.
    """
    if not names:
        return []

    payload = run_json_command(["pnpm", "why", *names, "--json"], directory, timeout)

    error = error_payload(payload)
    if error is not None:
        raise QueryInvocationFailed(f"pnpm why failed: {error.get('message') or error}")
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise QueryInvocationFailed("Unexpected pnpm why output (expected a JSON array)")

    return [project for project in payload if isinstance(project, dict)]


def _iter_children(node: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
    for section in DEPENDENCY_SECTIONS:
        children = node.get(section) or {}
        if not isinstance(children, dict):
            continue
        for name, child in children.items():
            if isinstance(child, dict):
                yield name, child


def _find_paths(
    node: dict[str, Any],
    target: str,
    ancestors: list[PathSegment],
    found: dict[str, list[list[PathSegment]]],
) -> None:
    for name, child in _iter_children(node):
        version = str(child.get("version") or UNKNOWN_VERSION)
        source = child.get("from")
        if not isinstance(source, str) or source == name:
            source = None
        if name == target or source == target:
            found.setdefault(version, []).append(list(reversed(ancestors)))
        segment = PathSegment(
            identity=format_identity(name, version),
            original_specifier=source or None,
        )
        _find_paths(child, target, ancestors + [segment], found)


def extract_pnpm_chains(
    projects: list[dict[str, Any]], target: str, label: str | None = None
) -> dict[str, list[DependencyChain]]:
    """Return the chains leading to ``target``, grouped by installed version.

    ``label`` replaces the target's name in the first segment; aliases use it
    to show the declared name next to the actual one.
    """
    found: dict[str, list[list[PathSegment]]] = {}
    for project in projects:
        root = PathSegment(
            identity=format_identity(str(project.get("name") or "<root>"), project.get("version"))
        )
        _find_paths(project, target, [root], found)

    chains: dict[str, list[DependencyChain]] = {}
    for version, paths in found.items():
        head = PathSegment(identity=f"{label or target}@{version}")
        chains[version] = [(head, *path) for path in paths]
    return chains


def collect_usages(
    projects: list[dict[str, Any]], declarations: list[OverrideDeclaration]
) -> list[OverrideUsage]:
    usages: list[OverrideUsage] = []
    seen: set[str] = set()

    for declaration in declarations:
        actual = parse_alias(declaration.spec)
        is_alias = actual is not None and actual != declaration.name
        target = actual if is_alias else selector_target(declaration.name)
        name = declaration.name if is_alias else target
        if name in seen:
            continue
        seen.add(name)

        label = f"{declaration.name}>{actual}" if is_alias else None
        by_version = extract_pnpm_chains(projects, target, label)
        if not by_version and is_alias:
            # pnpm may list the alias under its declared name only
            by_version = extract_pnpm_chains(projects, declaration.name, label)

        for version, chains in by_version.items():
            logger.debug("Found overridden package %s@%s (%d chains)", name, version, len(chains))
            usages.append(
                OverrideUsage.from_chains(
                    name=name,
                    version=version,
                    chains=chains,
                    aliased_from=declaration.name if is_alias else None,
                    actual_name=actual if is_alias else None,
                )
            )

    return usages


def analyze(
    directory: Path, declarations: list[OverrideDeclaration], timeout: float
) -> list[OverrideUsage]:
    query_names, _ = resolve_aliases(declarations)
    projects = query(directory, query_names, timeout)
    return collect_usages(projects, declarations)
