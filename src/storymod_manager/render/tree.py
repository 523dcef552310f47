"""The render-tree capability the patch pipeline reads from and writes to.

The host owns the live tree a story engine renders from.  The pipeline only
needs to read the style, script and passage nodes under the story root and to
swap a batch of them in one step, so that is all this protocol exposes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from storymod_manager.constants import PASSAGE_TAG, SCRIPT_TAG, STYLE_TAG


@dataclass(eq=False)
class RenderNode:
    """A node of the render tree.  Nodes compare by identity, like DOM elements."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def set(self, name: str, value: str) -> None:
        self.attributes[name] = value

    @property
    def is_passage(self) -> bool:
        return self.tag.lower() == PASSAGE_TAG

    @property
    def is_style(self) -> bool:
        return self.tag.lower() == STYLE_TAG

    @property
    def is_script(self) -> bool:
        return self.tag.lower() == SCRIPT_TAG


class RenderTree(Protocol):
    """Interface that host adapters must satisfy."""

    def root_count(self) -> int: ...

    def children(self) -> list[RenderNode]: ...

    def style_nodes(self) -> list[RenderNode]: ...

    def script_nodes(self) -> list[RenderNode]: ...

    def passage_nodes(self) -> list[RenderNode]: ...

    def replace_nodes(
        self,
        remove: Sequence[RenderNode],
        append: Sequence[RenderNode],
    ) -> list[RenderNode]:
        """Remove *remove* and append *append* as one uninterrupted step.

        Returns the nodes from *remove* that were not found under the root.
        """
        ...
