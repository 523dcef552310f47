from storymod_manager.models.mod import ModEntry, NamedTransform
from storymod_manager.models.records import ContentRecord, RecordKind
from storymod_manager.models.snapshot import Snapshot

__all__ = [
    "ContentRecord",
    "ModEntry",
    "NamedTransform",
    "RecordKind",
    "Snapshot",
]
