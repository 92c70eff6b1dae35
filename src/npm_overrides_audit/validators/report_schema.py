"""Check a saved audit report against the report schema."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ..report import REPORT_SCHEMA, validate_report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("report", type=Path, help="JSON report written by --json")
    parser.add_argument("--schema", type=Path, default=REPORT_SCHEMA, help="Schema to check against")
    args = parser.parse_args(argv)

    try:
        validate_report(json.loads(args.report.read_text(encoding="utf-8")), args.schema)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: Cannot load {args.report}: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"ERROR: Report failed validation:{exc}", file=sys.stderr)
        return 1

    print(f"Report {args.report} is valid against {args.schema}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
