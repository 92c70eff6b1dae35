"""Package manager detection from lock files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class PackageManager(str, Enum):
    NPM = "npm"
    PNPM = "pnpm"


# Checked in order; the first lock file present wins.
LOCK_FILES: tuple[tuple[str, PackageManager], ...] = (
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("package-lock.json", PackageManager.NPM),
    ("npm-shrinkwrap.json", PackageManager.NPM),
)


def detect_package_manager(directory: Path) -> PackageManager:
    """Return the package manager whose lock file is present in ``directory``.

    Defaults to npm when no lock file is found.
    """
    directory = Path(directory)
    for filename, manager in LOCK_FILES:
        if (directory / filename).is_file():
            return manager
    return PackageManager.NPM
