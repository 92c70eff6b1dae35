"""Override declaration models."""

from __future__ import annotations

from dataclasses import dataclass

_VALID_SOURCES = {"overrides", "pnpm.overrides", "pnpm-workspace.yaml"}


@dataclass(frozen=True)
class OverrideDeclaration:
    """A single ``name -> spec`` entry read from an override map."""

    name: str
    spec: str
    source: str = "overrides"

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Override name must be non-empty")
        if self.source not in _VALID_SOURCES:
            raise ValueError(f"Invalid override source: {self.source}")

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "spec": self.spec,
            "source": self.source,
        }


@dataclass(frozen=True)
class AliasBinding:
    """Declared override name redirected to a different published package."""

    declared_name: str
    actual_name: str

    def __post_init__(self) -> None:
        if not self.declared_name or not self.actual_name:
            raise ValueError("Alias names must be non-empty")
        if self.declared_name == self.actual_name:
            raise ValueError("An alias must point at a different package name")


@dataclass(frozen=True)
class UnusedOverride:
    """An override that is declared but never applied in the resolved graph."""

    name: str
    declared_version: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.declared_version,
        }
