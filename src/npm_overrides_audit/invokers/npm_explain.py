"""npm backend: ``npm explain <names...> --json``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from collections.abc import Iterable

from ..aliases import resolve_aliases, selector_target
from ..chains import extract_chains
from ..models.chain import DependencyChain, UNKNOWN_VERSION
from ..models.override import OverrideDeclaration
from ..models.usage import OverrideUsage
from .process import QueryInvocationFailed, error_payload, run_json_command

logger = logging.getLogger(__name__)

# npm's error code when a queried name is not installed
NO_MATCH_CODE = "EEXPLAINNOMATCH"


def _is_no_match(error: dict[str, Any]) -> bool:
    code = str(error.get("code") or "")
    summary = str(error.get("summary") or "")
    return code == NO_MATCH_CODE or summary.startswith("No dependencies found matching")


def query(directory: Path, names: list[str], timeout: float) -> list[dict[str, Any]]:
    """Return the explain records for ``names``.

    npm aborts the whole batch with an error payload when any one name is not
    installed; the names are then explained one at a time so the installed
    ones are still attributed. A name that is not installed yields nothing.

    Raises:
        QueryInvocationFailed: if npm cannot run or reports any other error.
    """
    if not names:
        return []

    payload = run_json_command(["npm", "explain", *names, "--json"], directory, timeout)

    error = error_payload(payload)
    if error is not None:
        if len(names) > 1:
            logger.debug("npm explain batch failed (%s), querying names one at a time", error)
            records: list[dict[str, Any]] = []
            for name in names:
                records.extend(query(directory, [name], timeout))
            return records
        if _is_no_match(error):
            logger.debug("npm explain found no installed %s", names[0])
            return []
        raise QueryInvocationFailed(
            f"npm explain {names[0]} failed: {error.get('summary') or error}"
        )

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise QueryInvocationFailed("Unexpected npm explain output (expected a JSON array)")

    return [record for record in payload if isinstance(record, dict)]


def collect_usages(
    records: Iterable[dict[str, Any]],
    alias_map: dict[str, str] | None = None,
    declared_names: Iterable[str] = (),
) -> list[OverrideUsage]:
    """Group overridden records by ``name@version`` and extract their chains.

    npm labels an aliased package with its declared name; the reverse lookup
    also accepts records labelled with the actual package name, unless that
    name is overridden in its own right (in ``declared_names``).
    """
    alias_map = alias_map or {}
    own_names = set(declared_names)
    declared_for_actual = {
        actual: declared for declared, actual in alias_map.items() if actual not in own_names
    }

    grouped: dict[tuple[str, str], list[DependencyChain]] = {}
    aliased: dict[tuple[str, str], str | None] = {}

    for record in records:
        if record.get("overridden") is not True:
            continue
        name = record.get("name")
        if not isinstance(name, str) or not name:
            continue
        version = str(record.get("version") or UNKNOWN_VERSION)

        declared = name if name in alias_map else declared_for_actual.get(name)
        root_identity = None
        if declared is not None:
            root_identity = f"{declared}>{alias_map[declared]}@{version}"

        key = (declared or name, version)
        grouped.setdefault(key, []).extend(extract_chains(record, root_identity))
        aliased.setdefault(key, declared)

    usages = []
    for (name, version), chains in grouped.items():
        declared = aliased[(name, version)]
        logger.debug("Found overridden package %s@%s (%d chains)", name, version, len(chains))
        usages.append(
            OverrideUsage.from_chains(
                name=name,
                version=version,
                chains=chains,
                aliased_from=declared,
                actual_name=alias_map[declared] if declared else None,
            )
        )
    return usages


def analyze(
    directory: Path, declarations: list[OverrideDeclaration], timeout: float
) -> list[OverrideUsage]:
    query_names, alias_map = resolve_aliases(declarations)
    records = query(directory, query_names, timeout)
    own_names = [selector_target(d.name) for d in declarations if d.name not in alias_map]
    return collect_usages(records, alias_map, own_names)
