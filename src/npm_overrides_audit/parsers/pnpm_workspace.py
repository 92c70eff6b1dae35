"""Parse pnpm-workspace.yaml to capture workspace-level overrides."""

from __future__ import annotations

from pathlib import Path

from .package_json import ManifestUnreadable, flatten_overrides

WORKSPACE_NAME = "pnpm-workspace.yaml"


def read_workspace_overrides(directory: Path) -> dict[str, str]:
    """Return the ``overrides`` map of pnpm-workspace.yaml, or ``{}``.

    Raises:
        ManifestUnreadable: if the file exists but is not valid YAML.
    """
    import yaml

    path = Path(directory) / WORKSPACE_NAME
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ManifestUnreadable(f"Failed to read {path}: {exc}") from exc

    if not isinstance(data, dict):
        return {}
    return flatten_overrides(data.get("overrides"))
