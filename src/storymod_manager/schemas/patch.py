"""Models describing a patch run: state, structure validation and transform outcomes."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from storymod_manager.schemas.conflicts import SimulationResult
from storymod_manager.schemas.merge import ConflictSets


class PatchState(StrEnum):
    idle = "idle"
    merging_mods = "merging_mods"
    applying_patchers = "applying_patchers"
    swapping_tree = "swapping_tree"
    cache_invalidated = "cache_invalidated"


class IssueLevel(StrEnum):
    error = "error"
    warning = "warning"


class StructureIssue(BaseModel):
    code: str
    level: IssueLevel
    message: str


class StructureReport(BaseModel):
    valid: bool
    style_nodes: int = 0
    script_nodes: int = 0
    passage_nodes: int = 0
    issues: list[StructureIssue] = Field(default_factory=list)


class TransformOutcome(BaseModel):
    mod_name: str
    transform_name: str
    ok: bool
    error: str | None = None


class PatchReport(BaseModel):
    """What a single top-level patch call did.

    ``rejected`` is set when another patch was already in flight; nothing else
    is populated in that case.
    """

    rejected: bool = False
    aborted: bool = False
    mods_applied: list[str] = Field(default_factory=list)
    conflicts: ConflictSets = Field(default_factory=ConflictSets)
    simulation: SimulationResult | None = None
    transform_outcomes: list[TransformOutcome] = Field(default_factory=list)
    structure_before: StructureReport | None = None
    structure_after: StructureReport | None = None
    invariant_violations: list[str] = Field(default_factory=list)
    last_state: PatchState = PatchState.idle

    @property
    def failed_transforms(self) -> list[TransformOutcome]:
        return [o for o in self.transform_outcomes if not o.ok]

    @property
    def tree_valid(self) -> bool:
        return self.structure_after is None or self.structure_after.valid
