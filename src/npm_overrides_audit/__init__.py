"""npm-overrides-audit core package.

Reports where the ``overrides`` declared in package.json are applied in the
installed dependency graph, as one tree per overridden package, and which
overrides are declared but unused.
"""

from .core import AuditResult, audit_overrides

__all__ = [
    "AuditResult",
    "audit_overrides",
]
