"""In-memory render tree, used headless and in tests."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from storymod_manager.render.tree import RenderNode


class InMemoryRenderTree:
    """A single story root holding an ordered list of child nodes."""

    def __init__(self, children: Iterable[RenderNode] = (), *, roots: int = 1) -> None:
        self._children: list[RenderNode] = list(children)
        self._roots = roots
        self.swap_count = 0

    def root_count(self) -> int:
        return self._roots

    def children(self) -> list[RenderNode]:
        return list(self._children)

    def style_nodes(self) -> list[RenderNode]:
        return [n for n in self._children if n.is_style]

    def script_nodes(self) -> list[RenderNode]:
        return [n for n in self._children if n.is_script]

    def passage_nodes(self) -> list[RenderNode]:
        return [n for n in self._children if n.is_passage]

    def replace_nodes(
        self,
        remove: Sequence[RenderNode],
        append: Sequence[RenderNode],
    ) -> list[RenderNode]:
        present = {id(n) for n in self._children}
        missing = [n for n in remove if id(n) not in present]
        doomed = {id(n) for n in remove}
        # Single assignment: the root never holds a partially swapped child list.
        self._children = [n for n in self._children if id(n) not in doomed] + list(append)
        self.swap_count += 1
        return missing
