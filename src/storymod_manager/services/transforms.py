"""Applying the mods' replace-patchers to the merged snapshot."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence

from storymod_manager.errors import TransformExecutionError
from storymod_manager.models.mod import ModEntry, NamedTransform
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.schemas.patch import TransformOutcome
from storymod_manager.services.hooks import HookEmitter, HookEvent

logger = logging.getLogger(__name__)


async def run_transform(
    mod: ModEntry,
    transform: NamedTransform,
    snapshot: Snapshot,
) -> TransformOutcome:
    """Apply one transform in place; a failure is logged and returned, never raised."""
    try:
        result = transform.apply(snapshot)
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        error = TransformExecutionError(mod.name, transform.name, exc)
        logger.exception("Replace patch error: %s", error)
        return TransformOutcome(
            mod_name=mod.name,
            transform_name=transform.name,
            ok=False,
            error=str(error),
        )
    return TransformOutcome(mod_name=mod.name, transform_name=transform.name, ok=True)


async def apply_replace_patchers(
    mods: Sequence[ModEntry],
    snapshot: Snapshot,
    hooks: HookEmitter | None = None,
) -> list[TransformOutcome]:
    """Run every mod's transforms, mods in load order and transforms in declared order.

    Returns one outcome per transform; later transforms run even when earlier
    ones failed.
    """
    outcomes: list[TransformOutcome] = []
    for mod in mods:
        for transform in mod.replace_patchers:
            logger.info("Replace patch %s: %s", mod.name, transform.name)
            if hooks is not None:
                await hooks.trigger(
                    HookEvent.replace_patcher_start,
                    mod_name=mod.name,
                    transform_name=transform.name,
                )
            outcomes.append(await run_transform(mod, transform, snapshot))
            if hooks is not None:
                await hooks.trigger(
                    HookEvent.replace_patcher_end,
                    mod_name=mod.name,
                    transform_name=transform.name,
                )

    failed = sum(1 for o in outcomes if not o.ok)
    if failed:
        logger.warning("%d of %d replace patches failed", failed, len(outcomes))
    return outcomes
