"""Diagnostic models produced by the conflict simulator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from storymod_manager.models.records import RecordKind
from storymod_manager.schemas.merge import ConflictSets


class ConflictDetail(BaseModel):
    """One name claimed by two or more mods."""

    kind: RecordKind
    name: str
    mod_names: list[str]
    winner_mod_name: str


class ModConflicts(BaseModel):
    """Names a single mod overrides from mods earlier in the load order."""

    mod_name: str
    scripts: list[str] = Field(default_factory=list)
    styles: list[str] = Field(default_factory=list)
    passages: list[str] = Field(default_factory=list)

    def of(self, kind: RecordKind) -> list[str]:
        return getattr(self, kind.value)

    def has_conflicts(self) -> bool:
        return bool(self.scripts or self.styles or self.passages)


class SimulationResult(BaseModel):
    mods_analyzed: list[str]
    conflicts: ConflictSets
    details: list[ConflictDetail]
    per_mod: list[ModConflicts]
    base_overrides: ConflictSets = Field(default_factory=ConflictSets)
    total_conflicts: int = 0
