"""Result models for the merge engine."""

from __future__ import annotations

from pydantic import BaseModel, Field

from storymod_manager.models.records import RecordKind
from storymod_manager.models.snapshot import Snapshot


class ConflictSets(BaseModel):
    """Names present in more than one merged source, per kind."""

    scripts: set[str] = Field(default_factory=set)
    styles: set[str] = Field(default_factory=set)
    passages: set[str] = Field(default_factory=set)

    def of(self, kind: RecordKind) -> set[str]:
        return getattr(self, kind.value)

    def total(self) -> int:
        return len(self.scripts) + len(self.styles) + len(self.passages)

    def is_empty(self) -> bool:
        return self.total() == 0

    def sorted_view(self) -> dict[str, list[str]]:
        return {kind.value: sorted(self.of(kind)) for kind in RecordKind}


class MergeResult(BaseModel):
    merged: Snapshot
    conflicts: ConflictSets = Field(default_factory=ConflictSets)
