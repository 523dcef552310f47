"""Content records: the script, stylesheet and passage entries a snapshot holds."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, field_validator


class RecordKind(StrEnum):
    """The three kinds of content a story tree carries, in merge order."""

    scripts = "scripts"
    styles = "styles"
    passages = "passages"


class ContentRecord(BaseModel):
    """A single named entry.

    Scripts and styles only use ``id``, ``name`` and ``content``.  Passages also
    carry ``tags``, ``position`` and ``size`` and treat ``id`` as their pid.
    """

    id: int | None = None
    name: str
    content: str = ""
    tags: list[str] | None = None
    position: str | None = None
    size: str | None = None

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return list(dict.fromkeys(t for t in value if t))

    def same_slot(self, other: ContentRecord) -> bool:
        """Whether both records address the same named slot."""
        return self.name == other.name

    def copy_record(self) -> ContentRecord:
        return self.model_copy(deep=True)
