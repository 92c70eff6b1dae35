"""Read package.json and extract the override maps."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..models.chain import format_identity
from ..models.override import OverrideDeclaration

MANIFEST_NAME = "package.json"
# npm nests per-package overrides under a "." key for the package itself.
SELF_KEY = "."


class ManifestError(RuntimeError):
    """Base error for manifests that cannot be used."""


class ManifestNotFound(ManifestError):
    """Raised when no package.json exists in the directory."""


class ManifestUnreadable(ManifestError):
    """Raised when package.json cannot be read or decoded."""


@dataclass(frozen=True)
class Manifest:
    """The subset of package.json the audit reads."""

    path: Path
    name: str | None = None
    version: str | None = None
    overrides: dict[str, str] = field(default_factory=dict)
    pnpm_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def project(self) -> str | None:
        """``name@version`` of the package, or None when it has no name."""
        if not self.name:
            return None
        return format_identity(self.name, self.version)

    def declarations(self, include_pnpm: bool = False) -> list[OverrideDeclaration]:
        declared = [
            OverrideDeclaration(name=name, spec=spec, source="overrides")
            for name, spec in self.overrides.items()
        ]
        if include_pnpm:
            declared.extend(
                OverrideDeclaration(name=name, spec=spec, source="pnpm.overrides")
                for name, spec in self.pnpm_overrides.items()
            )
        return declared


def flatten_overrides(raw: Any) -> dict[str, str]:
    """Flatten npm's nested override objects into ``name -> spec``.

    ``{"foo": {".": "1.0.0", "bar": "2.0.0"}}`` declares both ``foo`` and
    ``bar``. The first declaration of a name keeps its spec.
    """
    flat: dict[str, str] = {}
    if not isinstance(raw, dict):
        return flat

    for name, value in raw.items():
        if not isinstance(name, str) or not name or name == SELF_KEY:
            continue
        if isinstance(value, dict):
            own = value.get(SELF_KEY)
            if isinstance(own, str):
                flat.setdefault(name, own)
            for nested_name, nested_spec in flatten_overrides(value).items():
                flat.setdefault(nested_name, nested_spec)
        elif value is not None:
            flat.setdefault(name, str(value))

    return flat


def read_manifest(directory: Path) -> Manifest:
    """Load ``package.json`` from ``directory``.

    Raises:
        ManifestNotFound: if the file does not exist.
        ManifestUnreadable: if it cannot be read or is not a JSON object.
    """
    path = Path(directory) / MANIFEST_NAME
    if not path.is_file():
        raise ManifestNotFound(f"No {MANIFEST_NAME} found in {directory}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestUnreadable(f"Failed to read {path}: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestUnreadable(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestUnreadable(f"{path} must contain a JSON object")

    pnpm_section = data.get("pnpm") or {}
    if not isinstance(pnpm_section, dict):
        pnpm_section = {}

    name = data.get("name")
    version = data.get("version")
    return Manifest(
        path=path,
        name=name if isinstance(name, str) else None,
        version=version if isinstance(version, str) else None,
        overrides=flatten_overrides(data.get("overrides")),
        pnpm_overrides=flatten_overrides(pnpm_section.get("overrides")),
    )
