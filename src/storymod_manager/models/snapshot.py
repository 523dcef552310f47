"""Snapshot: an ordered, per-kind collection of content records from one source."""

from __future__ import annotations

from pydantic import BaseModel, Field

from storymod_manager.models.records import ContentRecord, RecordKind


class Snapshot(BaseModel):
    source_label: str
    scripts: list[ContentRecord] = Field(default_factory=list)
    styles: list[ContentRecord] = Field(default_factory=list)
    passages: list[ContentRecord] = Field(default_factory=list)

    @classmethod
    def empty(cls, source_label: str) -> Snapshot:
        return cls(source_label=source_label)

    def records(self, kind: RecordKind) -> list[ContentRecord]:
        """Return the live list for *kind*; edits made to it change the snapshot."""
        return getattr(self, kind.value)

    def names(self, kind: RecordKind) -> list[str]:
        return [r.name for r in self.records(kind)]

    def find(self, kind: RecordKind, name: str) -> ContentRecord | None:
        """Return the last record named *name*, matching self-overwrite semantics."""
        for record in reversed(self.records(kind)):
            if record.name == name:
                return record
        return None

    def upsert(self, kind: RecordKind, record: ContentRecord) -> None:
        """Replace every record named like *record* in place, or append it."""
        items = self.records(kind)
        replaced = False
        for i, existing in enumerate(items):
            if existing.same_slot(record):
                items[i] = record.copy_record()
                replaced = True
        if not replaced:
            items.append(record.copy_record())

    def remove(self, kind: RecordKind, name: str) -> int:
        items = self.records(kind)
        kept = [r for r in items if r.name != name]
        removed = len(items) - len(kept)
        items[:] = kept
        return removed

    def counts(self) -> dict[RecordKind, int]:
        return {kind: len(self.records(kind)) for kind in RecordKind}

    def is_empty(self) -> bool:
        return not any(self.counts().values())

    def clone(self, source_label: str | None = None) -> Snapshot:
        """Deep copy, so in-place edits on the clone never reach this snapshot."""
        copy = self.model_copy(deep=True)
        if source_label is not None:
            copy.source_label = source_label
        return copy

    def content_equals(self, other: Snapshot) -> bool:
        """Structural equality of the records, ignoring the source label."""
        return all(self.records(kind) == other.records(kind) for kind in RecordKind)
