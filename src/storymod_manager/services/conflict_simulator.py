"""Dry-run merge that reports which mods fight over the same names.

Runs the same name fold as ``normal_merge`` over the mods in load order and,
when a base snapshot is given, the base/overlay pass of ``replace_merge``.
Nothing here touches a render tree or a cache, so it can be called as often as
needed before (or instead of) an actual patch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from storymod_manager.config import settings
from storymod_manager.models.mod import ModEntry
from storymod_manager.models.records import RecordKind
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.schemas.conflicts import ConflictDetail, ModConflicts, SimulationResult
from storymod_manager.schemas.merge import ConflictSets
from storymod_manager.services.merge import NameFold, replace_merge

logger = logging.getLogger(__name__)


def simulate_conflicts(
    mods: Sequence[ModEntry],
    base: Snapshot | None = None,
) -> SimulationResult:
    """Compute the conflict report for *mods* merged in the given order.

    Args:
        mods: Mods in load order.  The order is used as given.
        base: Optional baseline the merged mods would be laid onto.  When set,
            ``base_overrides`` lists the baseline names the mods replace.

    Returns:
        A SimulationResult; a name is a conflict for a kind exactly when two or
        more mods carry it.
    """
    conflicts = ConflictSets()
    per_mod = [ModConflicts(mod_name=mod.name) for mod in mods]
    details: list[ConflictDetail] = []
    merged = Snapshot.empty(settings.merged_label)

    for kind in RecordKind:
        fold = NameFold()
        for mod, entry in zip(mods, per_mod, strict=True):
            entry.of(kind).extend(fold.absorb(mod.snapshot.records(kind), mod.name))

        conflicts.of(kind).update(fold.conflicts)
        for name in fold.order:
            if name not in fold.conflicts:
                continue
            owners = fold.owners[name]
            details.append(
                ConflictDetail(
                    kind=kind,
                    name=name,
                    mod_names=list(owners),
                    winner_mod_name=owners[-1],
                )
            )
        merged.records(kind).extend(fold.records())

    base_overrides = replace_merge(base, merged).conflicts if base is not None else ConflictSets()

    return SimulationResult(
        mods_analyzed=[mod.name for mod in mods],
        conflicts=conflicts,
        details=details,
        per_mod=per_mod,
        base_overrides=base_overrides,
        total_conflicts=conflicts.total(),
    )


def log_conflicts(result: SimulationResult) -> None:
    """Report every conflict of *result* to the log."""
    for detail in result.details:
        logger.warning(
            "Conflict on %s %r: %s (winner: %s)",
            detail.kind,
            detail.name,
            ", ".join(detail.mod_names),
            detail.winner_mod_name,
        )
    logger.info(
        "Conflict check over %d mods: %d conflicts, %s",
        len(result.mods_analyzed),
        result.total_conflicts,
        result.conflicts.sorted_view(),
    )
