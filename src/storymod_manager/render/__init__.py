from storymod_manager.render.memory import InMemoryRenderTree
from storymod_manager.render.tree import RenderNode, RenderTree

__all__ = ["InMemoryRenderTree", "RenderNode", "RenderTree"]
