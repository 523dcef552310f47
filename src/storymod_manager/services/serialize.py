"""Turning a snapshot into render-tree nodes."""

from __future__ import annotations

import re

from storymod_manager.constants import (
    MAX_SAFE_INTEGER,
    PASSAGE_TAG,
    SCRIPT_NODE,
    STYLE_NODE,
    CombinedNodeSpec,
)
from storymod_manager.models.records import ContentRecord
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.render.tree import RenderNode


def is_safe_index(value: object) -> bool:
    """True for a non-negative integer id the story engine can hold exactly."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_SAFE_INTEGER


def sort_scripts(records: list[ContentRecord]) -> list[ContentRecord]:
    """Stable partition: id-bearing scripts first by ascending id, the rest in given order."""
    return sorted(records, key=lambda r: (0, r.id) if is_safe_index(r.id) else (1, 0))


_NAME_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "*": "\\*"}
_NAME_UNESCAPES = {v[1]: k for k, v in _NAME_ESCAPES.items()}
_ESCAPED_CHAR_RE = re.compile(r"\\(.)", re.DOTALL)


def escape_header_name(name: str) -> str:
    """Make *name* safe to embed between the quotes of an entry header.

    Backslash, double quote, line breaks and ``*`` are backslash-escaped, so an
    escaped name never contains a quote, ``*/`` or a newline.
    """
    return "".join(_NAME_ESCAPES.get(ch, ch) for ch in name)


def unescape_header_name(raw: str) -> str:
    """Inverse of ``escape_header_name``.  Unknown escapes are left as written."""
    return _ESCAPED_CHAR_RE.sub(lambda m: _NAME_UNESCAPES.get(m.group(1), m.group(0)), raw)


def entry_header(header_kind: str, record: ContentRecord) -> str:
    rid = "" if record.id is None else str(record.id)
    return f'/* {header_kind} #{rid}: "{escape_header_name(record.name)}" */'


def _combined_node(layout: CombinedNodeSpec, records: list[ContentRecord]) -> RenderNode:
    text = "".join(f"{entry_header(layout['header_kind'], r)}{r.content}\n" for r in records)
    return RenderNode(tag=layout["tag"], attributes=dict(layout["attributes"]), text=text)


def make_style_node(snapshot: Snapshot) -> RenderNode:
    return _combined_node(STYLE_NODE, snapshot.styles)


def make_script_node(snapshot: Snapshot) -> RenderNode:
    """Build the combined script node.  Scripts are expected to be sorted already."""
    return _combined_node(SCRIPT_NODE, snapshot.scripts)


def make_passage_node(record: ContentRecord) -> RenderNode:
    node = RenderNode(tag=PASSAGE_TAG, text=record.content)
    if record.id is not None and record.id > 0:
        node.set("pid", str(record.id))
    node.set("name", record.name)
    node.set("tags", " ".join(record.tags or []))
    if record.position:
        node.set("position", record.position)
    if record.size:
        node.set("size", record.size)
    return node


def build_nodes(snapshot: Snapshot) -> list[RenderNode]:
    """Nodes in append order: script, style, then one node per passage."""
    nodes = [make_script_node(snapshot), make_style_node(snapshot)]
    nodes.extend(make_passage_node(p) for p in snapshot.passages)
    return nodes
