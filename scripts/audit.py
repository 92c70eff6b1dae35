#!/usr/bin/env python3
"""Local CLI entrypoint to run the audit from a source checkout.

Usage:
  python scripts/audit.py [directory] [--manager npm|pnpm] [--json] [--warn-only]

This calls the same cli.main used by the installed ``npm-overrides-audit``
console script.
"""

from __future__ import annotations

from npm_overrides_audit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
