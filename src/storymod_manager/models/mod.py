"""Mods as handed over by the external loader: content plus post-merge transforms."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field

from storymod_manager.models.snapshot import Snapshot

TransformFn = Callable[[Snapshot], Awaitable[None] | None]


class NamedTransform(BaseModel):
    """A replace-patcher: mutates the merged snapshot in place after merging.

    ``apply`` may be a plain function or a coroutine function.
    """

    name: str
    apply: TransformFn


class ModEntry(BaseModel):
    name: str
    load_order_index: int = 0
    snapshot: Snapshot
    replace_patchers: list[NamedTransform] = Field(default_factory=list)
