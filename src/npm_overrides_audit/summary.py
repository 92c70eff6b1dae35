"""Human-readable summary rendering for the terminal."""

from __future__ import annotations

from .core import AuditResult


def render_summary(result: AuditResult) -> str:
    """Return the applied override trees, unused overrides and diagnostics."""
    lines = []
    lines.append(f"=== npm-overrides-audit ({result.manager.value}) ===")
    lines.append(f"Directory: {result.root}")
    if result.project:
        lines.append(f"Project: {result.project}")
    lines.append("")

    if result.usages:
        lines.append(f"Found {len(result.usages)} overridden package(s):")
        for usage in result.usages:
            lines.append("")
            lines.append(usage.rendered_tree)
    else:
        lines.append("No overridden packages found.")

    if result.unused:
        lines.append("")
        lines.append(f"Unused overrides ({len(result.unused)}):")
        for entry in result.unused:
            lines.append(f" - {entry.name}@{entry.declared_version}")

    if result.diagnostics:
        lines.append("")
        lines.append("Diagnostics:")
        for message in result.diagnostics:
            lines.append(f" - {message}")

    return "\n".join(lines) + "\n"
