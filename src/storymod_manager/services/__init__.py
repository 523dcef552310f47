"""Merge and patch services."""

from storymod_manager.services.conflict_simulator import simulate_conflicts
from storymod_manager.services.merge import concat_merge, normal_merge, replace_merge
from storymod_manager.services.orchestrator import PatchOrchestrator

__all__ = [
    "PatchOrchestrator",
    "concat_merge",
    "normal_merge",
    "replace_merge",
    "simulate_conflicts",
]
