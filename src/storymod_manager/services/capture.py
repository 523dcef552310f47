"""Reading the render tree back into a Snapshot.

The combined script and style nodes hold one entry per record, each introduced
by a header comment such as ``/* twine-user-script #3: "init" */`` (names are
backslash-escaped, see ``serialize.escape_header_name``).  A node
written without headers (a freshly compiled story) is read as a single record
named after the node's ``id`` attribute.
"""

from __future__ import annotations

import logging
import re

from storymod_manager.models.records import ContentRecord, RecordKind
from storymod_manager.models.snapshot import Snapshot
from storymod_manager.render.tree import RenderNode, RenderTree
from storymod_manager.services.merge import NameFold
from storymod_manager.services.serialize import unescape_header_name

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(
    r'/\* (?:twine-user-script|twine-user-stylesheet) #([^:]*): "((?:[^"\\\r\n]|\\.)*)" \*/'
)
_INT_RE = re.compile(r"-?\d+")


def _parse_id(raw: str | None) -> int | None:
    if raw is None:
        return None
    raw = raw.strip()
    return int(raw) if _INT_RE.fullmatch(raw) else None


def split_combined_node(node: RenderNode) -> list[ContentRecord]:
    """Split a combined script/style node into its per-entry records."""
    text = node.text
    matches = list(_HEADER_RE.finditer(text))
    records: list[ContentRecord] = []

    lead = text[: matches[0].start()] if matches else text
    if lead.strip():
        records.append(ContentRecord(name=node.get("id") or node.tag, content=lead))

    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        content = text[m.end() : end]
        if content.endswith("\n"):
            content = content[:-1]
        records.append(
            ContentRecord(
                id=_parse_id(m.group(1)),
                name=unescape_header_name(m.group(2)),
                content=content,
            )
        )
    return records


def read_passage_node(node: RenderNode) -> ContentRecord:
    return ContentRecord(
        id=_parse_id(node.get("pid")),
        name=node.get("name") or "",
        content=node.text,
        tags=(node.get("tags") or "").split(),
        position=node.get("position") or None,
        size=node.get("size") or None,
    )


def _fold_duplicates(kind: RecordKind, records: list[ContentRecord], label: str) -> list[ContentRecord]:
    fold = NameFold()
    fold.absorb(records, label)
    if len(fold.order) != len(records):
        logger.warning(
            "Captured %d %s but only %d distinct names in %s; later duplicates overwrite earlier",
            len(records),
            kind,
            len(fold.order),
            label,
        )
    return fold.records()


def capture(tree: RenderTree, source_label: str) -> Snapshot:
    """Read the tree's current scripts, styles and passages into a new Snapshot."""
    scripts = [r for node in tree.script_nodes() for r in split_combined_node(node)]
    styles = [r for node in tree.style_nodes() for r in split_combined_node(node)]
    passages = [read_passage_node(node) for node in tree.passage_nodes()]
    return Snapshot(
        source_label=source_label,
        scripts=_fold_duplicates(RecordKind.scripts, scripts, source_label),
        styles=_fold_duplicates(RecordKind.styles, styles, source_label),
        passages=_fold_duplicates(RecordKind.passages, passages, source_label),
    )
