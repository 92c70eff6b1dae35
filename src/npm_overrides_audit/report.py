"""Report aggregation and schema-friendly output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .core import AuditResult
from .tree import iter_specifier_conflicts

REPORT_SCHEMA = Path(__file__).resolve().parent / "schemas" / "report.schema.json"


def build_report(result: AuditResult) -> dict[str, Any]:
    """Turn an audit result into a JSON-serialisable report.

    The shape is described by ``schemas/report.schema.json``.
    """
    overrides = []
    for usage in result.usages:
        entry = usage.to_dict()
        entry["conflicts"] = [c.to_dict() for c in iter_specifier_conflicts(usage.chains)]
        overrides.append(entry)

    report: dict[str, Any] = {
        "version": "1",
        "root": str(result.root),
        "manager": result.manager.value,
        "hasUnused": result.has_unused,
        "declarations": [declaration.to_dict() for declaration in result.declarations],
        "overrides": overrides,
        "unused": [entry.to_dict() for entry in result.unused],
        "diagnostics": list(result.diagnostics),
        "totals": {
            "declared": len(result.declarations),
            "applied": len(result.usages),
            "unused": len(result.unused),
        },
    }

    return report


def validate_report(report: dict[str, Any], schema_path: Path = REPORT_SCHEMA) -> None:
    """Raise ValueError listing every schema violation in ``report``."""
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    violations = [
        f"- {'/'.join(str(part) for part in error.path) or '<root>'}: {error.message}"
        for error in sorted(
            Draft202012Validator(schema).iter_errors(report), key=lambda e: list(e.path)
        )
    ]
    if violations:
        raise ValueError("\n" + "\n".join(violations))
