"""Command line interface: ``npm-overrides-audit [directory]``.

Exit status:
  0  every declared override is applied (or --warn-only)
  1  at least one override is unused
  2  invalid settings, or with --strict, a degraded run
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import AUTO_MANAGER, ConfigError, load_settings
from .core import audit_overrides
from .discovery import PackageManager
from .report import build_report
from .summary import render_summary

EXIT_OK = 0
EXIT_UNUSED = 1
EXIT_ERROR = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="npm-overrides-audit",
        description="List where package.json overrides are applied and which are unused.",
    )
    parser.add_argument("directory", nargs="?", type=Path, default=Path("."))
    parser.add_argument(
        "--manager",
        choices=[AUTO_MANAGER] + [m.value for m in PackageManager],
        default=None,
        help="Package manager to query (default: detect from lock files)",
    )
    parser.add_argument("--json", action="store_true", help="Print the JSON report")
    parser.add_argument(
        "--warn-only", action="store_true", default=None, help="Exit 0 even when overrides are unused"
    )
    parser.add_argument(
        "--strict", action="store_true", help="Exit 2 when the manifest or package manager failed"
    )
    parser.add_argument("--timeout", type=float, default=None, help="Seconds per package manager call")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = load_settings(manager=args.manager, timeout=args.timeout, warn_only=args.warn_only)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    result = audit_overrides(args.directory, settings)

    if args.json:
        print(json.dumps(build_report(result), indent=2))
    else:
        sys.stdout.write(render_summary(result))

    if args.strict and result.degraded:
        return EXIT_ERROR
    if result.has_unused and not settings.warn_only:
        return EXIT_UNUSED
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
