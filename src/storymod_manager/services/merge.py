"""The three snapshot merge strategies.

All strategies take snapshots in load order (left to right) and treat scripts,
styles and passages independently with the same algorithm.  They never mutate
their inputs: every record in a result is a copy.

* ``concat_merge``  keeps every record, duplicates included.
* ``normal_merge``  folds by name; the first occurrence fixes the position and
  later occurrences from other sources overwrite the content and are reported
  as conflicts.
* ``replace_merge`` lays an overlay onto a base, keeping base records the
  overlay does not mention.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from storymod_manager.config import settings
from storymod_manager.models.records import ContentRecord, RecordKind
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.schemas.merge import ConflictSets, MergeResult

logger = logging.getLogger(__name__)


class NameFold:
    """A name -> record mapping kept in sync with the order names were first seen."""

    def __init__(self) -> None:
        self.order: list[str] = []
        self.by_name: dict[str, ContentRecord] = {}
        self.owners: dict[str, list[str]] = {}
        self.conflicts: set[str] = set()

    def absorb(self, records: Iterable[ContentRecord], source: str) -> list[str]:
        """Fold one source's records in.

        Returns the names this source took over from earlier sources, in the
        order it overrode them.  A name repeated inside the same source is a
        self-overwrite: the later copy wins and nothing is reported.
        """
        overridden: list[str] = []
        seen_here: set[str] = set()
        for record in records:
            name = record.name
            if name not in self.by_name:
                self.order.append(name)
                self.owners[name] = [source]
            elif name not in seen_here:
                self.conflicts.add(name)
                self.owners[name].append(source)
                overridden.append(name)
            self.by_name[name] = record.copy_record()
            seen_here.add(name)
        return overridden

    def records(self) -> list[ContentRecord]:
        return [self.by_name[name].copy_record() for name in self.order]


def _label(label: str | None, default: str) -> str:
    return label if label is not None else default


def concat_merge(*snapshots: Snapshot, label: str | None = None) -> MergeResult:
    merged = Snapshot.empty(_label(label, settings.merged_label))
    for kind in RecordKind:
        out = merged.records(kind)
        for snap in snapshots:
            out.extend(r.copy_record() for r in snap.records(kind))
    return MergeResult(merged=merged)


def normal_merge(*snapshots: Snapshot, label: str | None = None) -> MergeResult:
    merged = Snapshot.empty(_label(label, settings.merged_label))
    conflicts = ConflictSets()
    for kind in RecordKind:
        fold = NameFold()
        for snap in snapshots:
            fold.absorb(snap.records(kind), snap.source_label)
        merged.records(kind).extend(fold.records())
        conflicts.of(kind).update(fold.conflicts)
        for name in sorted(fold.conflicts):
            logger.debug("normal_merge %s conflict %r from %s", kind, name, fold.owners[name])
    return MergeResult(merged=merged, conflicts=conflicts)


def replace_merge(base: Snapshot, overlay: Snapshot, label: str | None = None) -> MergeResult:
    """Replace base records named in *overlay* in place and append the new ones.

    The result's conflict sets hold the base names the overlay replaced.
    """
    merged = Snapshot.empty(_label(label, base.source_label))
    overridden = ConflictSets()
    for kind in RecordKind:
        latest: dict[str, ContentRecord] = {}
        overlay_order: list[str] = []
        for record in overlay.records(kind):
            if record.name not in latest:
                overlay_order.append(record.name)
            latest[record.name] = record

        out = merged.records(kind)
        base_names: set[str] = set()
        for record in base.records(kind):
            base_names.add(record.name)
            replacement = latest.get(record.name)
            if replacement is None:
                out.append(record.copy_record())
            else:
                out.append(replacement.copy_record())
                overridden.of(kind).add(record.name)

        out.extend(latest[name].copy_record() for name in overlay_order if name not in base_names)
    return MergeResult(merged=merged, conflicts=overridden)
