import logging

import pytest

from storymod_manager.config import Settings
from storymod_manager.log_config import CollectingHandler
from storymod_manager.models import ContentRecord, ModEntry, NamedTransform, Snapshot
from storymod_manager.render import InMemoryRenderTree, RenderNode
from storymod_manager.services.hooks import LifecycleHooks
from storymod_manager.services.orchestrator import PatchOrchestrator


def _to_records(items) -> list[ContentRecord]:
    records = []
    for item in items or []:
        if isinstance(item, ContentRecord):
            records.append(item)
        else:
            name, content = item
            records.append(ContentRecord(name=name, content=content))
    return records


@pytest.fixture
def make_snapshot():
    def _make(label: str = "mod", scripts=None, styles=None, passages=None) -> Snapshot:
        return Snapshot(
            source_label=label,
            scripts=_to_records(scripts),
            styles=_to_records(styles),
            passages=_to_records(passages),
        )

    return _make


@pytest.fixture
def make_mod(make_snapshot):
    def _make(
        name: str,
        *,
        scripts=None,
        styles=None,
        passages=None,
        transforms: list[NamedTransform] | None = None,
        index: int = 0,
    ) -> ModEntry:
        return ModEntry(
            name=name,
            load_order_index=index,
            snapshot=make_snapshot(name, scripts, styles, passages),
            replace_patchers=transforms or [],
        )

    return _make


def _vanilla_nodes() -> list[RenderNode]:
    script = RenderNode(
        tag="script",
        attributes={"type": "text/twine-javascript", "role": "script", "id": "twine-user-script"},
        text=(
            '/* twine-user-script #1: "init.js" */setup.version = 1;\n'
            '/* twine-user-script #2: "macros.js" */Macro.add("x", {});\n'
        ),
    )
    style = RenderNode(
        tag="style",
        attributes={"type": "text/twine-css", "role": "stylesheet", "id": "twine-user-stylesheet"},
        text='/* twine-user-stylesheet #1: "base.css" */body { color: black; }\n',
    )
    passages = [
        RenderNode(
            tag="tw-passagedata",
            attributes={"pid": "1", "name": "Start", "tags": "", "position": "100,100"},
            text="You wake up.",
        ),
        RenderNode(
            tag="tw-passagedata",
            attributes={"pid": "2", "name": "Home", "tags": "location indoor"},
            text="Your room.",
        ),
        RenderNode(
            tag="tw-passagedata",
            attributes={"pid": "3", "name": "StoryInit", "tags": ""},
            text="<<set $day to 1>>",
        ),
    ]
    return [script, style, *passages]


@pytest.fixture
def story_nodes() -> list[RenderNode]:
    return _vanilla_nodes()


@pytest.fixture
def vanilla_tree() -> InMemoryRenderTree:
    return InMemoryRenderTree(_vanilla_nodes())


@pytest.fixture
def app_settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def hooks() -> LifecycleHooks:
    return LifecycleHooks()


@pytest.fixture
def orchestrator(vanilla_tree, hooks, app_settings) -> PatchOrchestrator:
    return PatchOrchestrator(vanilla_tree, hooks=hooks, config=app_settings)


@pytest.fixture
def log_sink():
    handler = CollectingHandler()
    root = logging.getLogger("storymod_manager")
    previous = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    yield handler
    root.removeHandler(handler)
    root.setLevel(previous)
