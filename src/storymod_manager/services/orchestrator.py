"""PatchOrchestrator: merges mods and writes the result into the render tree.

One orchestrator owns the session's caches and is the only component allowed
to write the render tree.  A patch runs through a fixed sequence of states::

    idle -> merging_mods -> applying_patchers -> swapping_tree -> cache_invalidated -> idle

Two snapshots are cached:

* the origin snapshot, captured from the tree on first access and never
  changed afterwards (the unmodified story);
* the after-patch snapshot, captured lazily, dropped and recaptured every time
  the tree is rewritten.  Merges use it as their base so earlier patches are
  kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from storymod_manager.config import Settings, settings
from storymod_manager.errors import InvariantViolation, PatchInProgressError
from storymod_manager.models.mod import ModEntry
from storymod_manager.models.records import RecordKind
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.render.tree import RenderNode, RenderTree
from storymod_manager.schemas.conflicts import SimulationResult
from storymod_manager.schemas.patch import PatchReport, PatchState, StructureReport
from storymod_manager.services.capture import capture
from storymod_manager.services.conflict_simulator import log_conflicts, simulate_conflicts
from storymod_manager.services.hooks import HookEmitter, HookEvent, LifecycleHooks
from storymod_manager.services.merge import normal_merge, replace_merge
from storymod_manager.services.serialize import build_nodes, sort_scripts
from storymod_manager.services.structure import validate_structure
from storymod_manager.services.transforms import apply_replace_patchers

logger = logging.getLogger(__name__)


class PatchOrchestrator:
    def __init__(
        self,
        tree: RenderTree,
        hooks: HookEmitter | None = None,
        config: Settings | None = None,
    ) -> None:
        self._tree = tree
        self.hooks: HookEmitter = hooks if hooks is not None else LifecycleHooks()
        self._settings = config or settings
        self._origin: Snapshot | None = None
        self._after_patch: Snapshot | None = None
        self._conflict_result: SimulationResult | None = None
        self._in_progress = False
        self._state = PatchState.idle

    @property
    def state(self) -> PatchState:
        return self._state

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    @property
    def conflict_result(self) -> SimulationResult | None:
        """Conflict report of the last ``run``."""
        return self._conflict_result

    def _transition(self, state: PatchState) -> None:
        logger.info("Patch state %s -> %s", self._state, state)
        self._state = state

    # ------------------------------------------------------------------
    # Caches
    # ------------------------------------------------------------------

    def _ensure_origin(self) -> Snapshot:
        if self._origin is None:
            self._origin = capture(self._tree, self._settings.origin_label)
            logger.info("Origin snapshot captured: %s", _counts(self._origin))
        return self._origin

    def _ensure_after_patch(self) -> Snapshot:
        self._ensure_origin()
        if self._after_patch is None:
            self._after_patch = capture(self._tree, self._settings.after_patch_label)
            logger.debug("After-patch snapshot captured: %s", _counts(self._after_patch))
        return self._after_patch

    def origin_snapshot(self) -> Snapshot:
        """The unmodified story.  Do not merge onto this; use ``after_patch_snapshot``."""
        return self._ensure_origin().clone()

    def after_patch_snapshot(self) -> Snapshot:
        """The current combined data, including every patch applied so far."""
        return self._ensure_after_patch().clone()

    def flush_after_patch_cache(self) -> None:
        """Drop the after-patch snapshot and recapture it from the tree right away."""
        self._after_patch = None
        self._ensure_after_patch()

    def early_reset(self) -> None:
        self._ensure_origin()
        self.flush_after_patch_cache()

    def clean_all_caches(self) -> None:
        """Release both snapshots.  Only for full shutdown."""
        self._origin = None
        self._after_patch = None
        self._conflict_result = None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def validate(self) -> StructureReport:
        return validate_structure(self._tree, warn_unknown=self._settings.unknown_node_warning)

    def check_conflicts(self, mods: Sequence[ModEntry]) -> SimulationResult:
        """Simulate merging *mods* onto the current data without changing anything."""
        base = self._after_patch if self._after_patch is not None else capture(
            self._tree, self._settings.after_patch_label
        )
        result = simulate_conflicts(mods, base=base)
        log_conflicts(result)
        return result

    # ------------------------------------------------------------------
    # Patching
    # ------------------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._in_progress:
            raise PatchInProgressError("a patch is already in progress")
        self._in_progress = True
        try:
            yield
        finally:
            self._in_progress = False
            if self._state != PatchState.idle:
                self._transition(PatchState.idle)

    def _rejected(self) -> PatchReport:
        logger.warning("Patch requested while another is in progress; request ignored")
        return PatchReport(rejected=True, last_state=self._state)

    async def run(self, mods: Sequence[ModEntry]) -> PatchReport:
        """Validate, check conflicts, then patch *mods* between the before/after hooks.

        Never raises.  A call made while another run or patch is in flight is
        rejected and returns a report with ``rejected`` set.
        """
        try:
            with self._exclusive():
                report = PatchReport()
                try:
                    report.structure_before = self.validate()
                    if not report.structure_before.valid and self._settings.abort_on_invalid_structure:
                        logger.error("Render tree failed validation; patch aborted")
                        report.aborted = True
                        return report

                    self._ensure_origin()
                    report.simulation = self.check_conflicts(mods)
                    self._conflict_result = report.simulation.model_copy(deep=True)

                    await self.hooks.trigger(HookEvent.before_patch, mods=list(mods))
                    await self._patch(mods, report, log_each_conflict=False)
                    await self.hooks.trigger(HookEvent.after_patch, report=report)
                except Exception:
                    logger.exception("Patch run failed in state %s", self._state)
                    report.aborted = True
                report.last_state = self._state
                return report
        except PatchInProgressError:
            return self._rejected()

    async def patch(self, mods: Sequence[ModEntry]) -> PatchReport:
        """Merge *mods* in the given order and write the result into the tree.

        Never raises; see ``run`` for the rejection rule.
        """
        try:
            with self._exclusive():
                report = PatchReport()
                try:
                    await self._patch(mods, report, log_each_conflict=True)
                except Exception:
                    logger.exception("Patch failed in state %s", self._state)
                    report.aborted = True
                report.last_state = self._state
                return report
        except PatchInProgressError:
            return self._rejected()

    async def _patch(
        self,
        mods: Sequence[ModEntry],
        report: PatchReport,
        *,
        log_each_conflict: bool,
    ) -> None:
        await self.hooks.trigger(HookEvent.patch_start)

        self._transition(PatchState.merging_mods)
        self.flush_after_patch_cache()
        base = self._ensure_after_patch().clone()
        mod_merged = normal_merge(
            Snapshot.empty(self._settings.empty_label),
            *(mod.snapshot for mod in mods),
            label=self._settings.merged_label,
        )
        report.conflicts = mod_merged.conflicts
        if log_each_conflict:
            for kind in RecordKind:
                for name in sorted(mod_merged.conflicts.of(kind)):
                    logger.warning("Mod conflict on %s %r", kind, name)
        patched = replace_merge(base, mod_merged.merged).merged

        self._transition(PatchState.applying_patchers)
        report.transform_outcomes = await apply_replace_patchers(mods, patched, self.hooks)

        patched.scripts = sort_scripts(patched.scripts)
        nodes = build_nodes(patched)

        # No await from here until the cache is refreshed.
        self._transition(PatchState.swapping_tree)
        report.invariant_violations = self._swap(nodes)

        self._transition(PatchState.cache_invalidated)
        self.flush_after_patch_cache()
        report.mods_applied = [mod.name for mod in mods]
        report.structure_after = self.validate()

        await self.hooks.trigger(HookEvent.patch_end)
        logger.info(
            "Patched %d mods into render tree: %s",
            len(report.mods_applied),
            _counts(self._ensure_after_patch()),
        )

    def _swap(self, nodes: list[RenderNode]) -> list[str]:
        old_styles = self._tree.style_nodes()
        old_scripts = self._tree.script_nodes()
        old_passages = self._tree.passage_nodes()

        violations: list[str] = []
        for label, found in (("style", old_styles), ("script", old_scripts)):
            if len(found) != 1:
                error = InvariantViolation(f"expected 1 {label} node before swap, found {len(found)}")
                logger.error("Render tree swap: %s", error)
                violations.append(str(error))

        missing = self._tree.replace_nodes([*old_styles, *old_scripts, *old_passages], nodes)
        for node in missing:
            logger.warning("Render tree swap: could not remove <%s> %r", node.tag, node.get("name"))
        return violations

    def replace_passages(
        self,
        remove: Sequence[RenderNode],
        add: Sequence[RenderNode],
    ) -> list[RenderNode]:
        """Swap individual passage nodes, then refresh the after-patch snapshot.

        Returns the nodes of *remove* that were not in the tree.

        Raises:
            PatchInProgressError: If a patch is currently writing the tree.
        """
        if self._in_progress:
            raise PatchInProgressError("cannot replace passages while a patch is in progress")
        missing = self._tree.replace_nodes(remove, add)
        for node in missing:
            logger.warning("replace_passages: passage %r not found in render tree", node.get("name"))
        self.flush_after_patch_cache()
        return missing


def _counts(snapshot: Snapshot) -> dict[str, int]:
    return {kind.value: n for kind, n in snapshot.counts().items()}
