"""Run package manager commands that print JSON."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)


class QueryInvocationFailed(RuntimeError):
    """Raised when a package manager query could not produce usable output."""


@retry(
    reraise=True,
    stop=stop_after_attempt(2),
    wait=wait_fixed(1),
    retry=retry_if_exception_type(subprocess.TimeoutExpired),
)
def _run(cmd: list[str], cwd: Path, timeout: float) -> subprocess.CompletedProcess[str]:
    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    return subprocess.run(
        cmd,
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def run_json_command(cmd: list[str], cwd: Path, timeout: float) -> Any | None:
    """Run ``cmd`` in ``cwd`` and decode its stdout as JSON.

    Package managers exit non-zero for unrelated reasons (peer dependency
    warnings, missing names) while still printing valid JSON, so the exit
    status alone is not treated as a failure. Returns None when the command
    succeeded without printing anything.

    Raises:
        QueryInvocationFailed: if the command cannot run, times out twice, or
            prints something that is not JSON.
    """
    tool = cmd[0]
    cwd = Path(cwd)
    if not cwd.is_dir():
        raise QueryInvocationFailed(f"Directory does not exist: {cwd}")

    try:
        result = _run(cmd, cwd, timeout)
    except subprocess.TimeoutExpired as exc:
        raise QueryInvocationFailed(f"{tool} timed out (>{timeout:g}s)") from exc
    except FileNotFoundError as exc:
        raise QueryInvocationFailed(f"{tool} command not found") from exc
    except OSError as exc:
        raise QueryInvocationFailed(f"Failed to run {tool}: {exc}") from exc

    stdout = (result.stdout or "").strip()
    if not stdout:
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise QueryInvocationFailed(
                f"{tool} exited with status {result.returncode}: {stderr or 'no output'}"
            )
        return None

    if result.returncode != 0:
        logger.debug("%s exited with status %s, parsing output anyway", tool, result.returncode)

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise QueryInvocationFailed(f"Failed to parse {tool} output: {exc}") from exc


def error_payload(payload: Any) -> dict[str, Any] | None:
    """Return the ``error`` object of a structured error response, else None."""
    if isinstance(payload, dict) and "error" in payload:
        error = payload["error"]
        if isinstance(error, dict):
            return error
        return {"summary": str(error)}
    return None
