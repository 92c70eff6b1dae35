"""Core audit entrypoint.

This module MUST NOT print or exit; it returns an ``AuditResult`` that the CLI
and report layers present. Manifest and package manager failures are logged
and recorded as diagnostics, and the run degrades to empty results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import AuditSettings
from .discovery import PackageManager, detect_package_manager
from .invokers import QueryInvocationFailed, get_handler
from .models.override import OverrideDeclaration, UnusedOverride
from .models.usage import OverrideUsage
from .parsers.package_json import Manifest, ManifestError, read_manifest
from .parsers.pnpm_workspace import read_workspace_overrides
from .tree import iter_specifier_conflicts
from .unused import find_unused

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditResult:
    """Outcome of auditing one directory."""

    root: Path
    manager: PackageManager
    project: str | None = None
    declarations: tuple[OverrideDeclaration, ...] = ()
    usages: tuple[OverrideUsage, ...] = ()
    unused: tuple[UnusedOverride, ...] = ()
    diagnostics: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_unused(self) -> bool:
        return bool(self.unused)

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)


def collect_declarations(
    manifest: Manifest, workspace_overrides: dict[str, str] | None = None, include_pnpm: bool = False
) -> list[OverrideDeclaration]:
    """Merge override maps in precedence order.

    A name declared in several maps keeps its first position and takes the
    spec of the last map that declares it, matching how pnpm combines
    ``overrides``, ``pnpm.overrides`` and pnpm-workspace.yaml.
    """
    declarations = manifest.declarations(include_pnpm=include_pnpm)
    if include_pnpm and workspace_overrides:
        declarations.extend(
            OverrideDeclaration(name=name, spec=spec, source="pnpm-workspace.yaml")
            for name, spec in workspace_overrides.items()
        )

    merged: dict[str, OverrideDeclaration] = {}
    for declaration in declarations:
        merged[declaration.name] = declaration
    return list(merged.values())


def audit_overrides(root: Path, settings: AuditSettings | None = None) -> AuditResult:
    """Audit the overrides declared in ``root``/package.json.

    Params:
        root: directory containing package.json
        settings: run settings; defaults detect the package manager from the
            lock files

    Returns: an AuditResult; never raises for manifest or query failures.
    """
    settings = settings or AuditSettings()
    root = Path(root).resolve()
    manager = settings.manager or detect_package_manager(root)
    handler = get_handler(manager)
    logger.info("Analyzing %s overrides in %s", manager.value, root)

    try:
        manifest = read_manifest(root)
        workspace_overrides = (
            read_workspace_overrides(root) if handler.reads_pnpm_overrides else {}
        )
    except ManifestError as exc:
        logger.warning("Cannot read manifest: %s", exc)
        return AuditResult(root=root, manager=manager, diagnostics=(str(exc),))

    declarations = collect_declarations(
        manifest, workspace_overrides, include_pnpm=handler.reads_pnpm_overrides
    )
    if not declarations:
        logger.info("No overrides declared in %s", manifest.path)
        return AuditResult(root=root, manager=manager, project=manifest.project)

    diagnostics: list[str] = []
    try:
        usages = handler.analyze(root, declarations, settings.timeout)
    except QueryInvocationFailed as exc:
        logger.warning("%s failed: %s", handler.display_name, exc)
        diagnostics.append(f"{handler.display_name} failed: {exc}")
        usages = []

    for usage in usages:
        for conflict in iter_specifier_conflicts(usage.chains):
            logger.info(
                "Conflicting specifiers for %s: kept %s, ignored %s",
                " > ".join(conflict.path),
                conflict.kept,
                conflict.ignored,
            )

    unused = find_unused(declarations, usages)
    logger.info("Found %d applied and %d unused override(s)", len(usages), len(unused))

    return AuditResult(
        root=root,
        manager=manager,
        project=manifest.project,
        declarations=tuple(declarations),
        usages=tuple(usages),
        unused=tuple(unused),
        diagnostics=tuple(diagnostics),
    )
