"""Lifecycle extension points around a patch run.

Callbacks are registered per event and triggered in registration order.  A
failing callback is logged and skipped; it never stops the pipeline.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class HookEvent(StrEnum):
    before_patch = "before_patch"
    after_patch = "after_patch"
    patch_start = "patch_start"
    patch_end = "patch_end"
    replace_patcher_start = "replace_patcher_start"
    replace_patcher_end = "replace_patcher_end"


HookCallback = Callable[..., Awaitable[None] | None]


class HookEmitter(Protocol):
    async def trigger(self, event: HookEvent, **payload: Any) -> None: ...


class LifecycleHooks:
    def __init__(self) -> None:
        self._callbacks: dict[HookEvent, list[HookCallback]] = defaultdict(list)

    def add(self, event: HookEvent, callback: HookCallback) -> None:
        callbacks = self._callbacks[event]
        if callback in callbacks:
            logger.warning("Hook %r already registered for %s", _name(callback), event)
            return
        callbacks.append(callback)

    def remove(self, event: HookEvent, callback: HookCallback) -> bool:
        callbacks = self._callbacks.get(event, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def registered(self, event: HookEvent) -> list[HookCallback]:
        return list(self._callbacks.get(event, []))

    async def trigger(self, event: HookEvent, **payload: Any) -> None:
        for callback in self.registered(event):
            try:
                result = callback(**payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Hook %r failed during %s", _name(callback), event)


def _name(callback: HookCallback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
