"""Tests for script ordering and render-node construction."""

import pytest

from storymod_manager.models import ContentRecord
from storymod_manager.services.serialize import (
    build_nodes,
    is_safe_index,
    make_passage_node,
    make_script_node,
    make_style_node,
    sort_scripts,
)


class TestIsSafeIndex:
    @pytest.mark.parametrize("value", [0, 1, 42, 2**53 - 1])
    def test_accepts(self, value):
        assert is_safe_index(value)

    @pytest.mark.parametrize("value", [None, -1, 2**53, True, 1.0, "3"])
    def test_rejects(self, value):
        assert not is_safe_index(value)


class TestSortScripts:
    def test_documented_example(self):
        records = [
            ContentRecord(id=None, name="1"),
            ContentRecord(id=5, name="2"),
            ContentRecord(id=None, name="3"),
            ContentRecord(id=2, name="4"),
        ]
        assert [(r.id, r.name) for r in sort_scripts(records)] == [
            (2, "4"),
            (5, "2"),
            (None, "1"),
            (None, "3"),
        ]

    def test_negative_ids_go_with_the_unnumbered_group(self):
        records = [
            ContentRecord(id=-3, name="neg"),
            ContentRecord(id=None, name="none"),
            ContentRecord(id=7, name="seven"),
        ]
        assert [r.name for r in sort_scripts(records)] == ["seven", "neg", "none"]

    def test_equal_ids_keep_order(self):
        records = [ContentRecord(id=1, name="b"), ContentRecord(id=1, name="a")]
        assert [r.name for r in sort_scripts(records)] == ["b", "a"]


class TestCombinedNodes:
    def test_script_node(self, make_snapshot):
        snap = make_snapshot(
            scripts=[ContentRecord(id=1, name="a.js", content="A"), ContentRecord(name="b.js", content="B")]
        )
        node = make_script_node(snap)
        assert node.tag == "script"
        assert node.get("type") == "text/twine-javascript"
        assert node.get("role") == "script"
        assert node.get("id") == "twine-user-script"
        assert node.text == '/* twine-user-script #1: "a.js" */A\n/* twine-user-script #: "b.js" */B\n'

    def test_style_node(self, make_snapshot):
        snap = make_snapshot(styles=[ContentRecord(id=3, name="x.css", content="p{}")])
        node = make_style_node(snap)
        assert node.tag == "style"
        assert node.get("type") == "text/twine-css"
        assert node.get("role") == "stylesheet"
        assert node.get("id") == "twine-user-stylesheet"
        assert node.text == '/* twine-user-stylesheet #3: "x.css" */p{}\n'

    def test_empty_snapshot_gives_empty_text(self, make_snapshot):
        assert make_style_node(make_snapshot()).text == ""

    def test_header_escapes_name(self, make_snapshot):
        snap = make_snapshot(styles=[ContentRecord(id=1, name='a"b */\nc', content="")])
        assert make_style_node(snap).text == '/* twine-user-stylesheet #1: "a\\"b \\*/\\nc" */\n'


class TestPassageNode:
    def test_full_passage(self):
        node = make_passage_node(
            ContentRecord(
                id=4,
                name="Start",
                content="Hello <<link>>",
                tags=["a", "b"],
                position="10,20",
                size="100,100",
            )
        )
        assert node.tag == "tw-passagedata"
        assert node.attributes == {
            "pid": "4",
            "name": "Start",
            "tags": "a b",
            "position": "10,20",
            "size": "100,100",
        }
        assert node.text == "Hello <<link>>"

    @pytest.mark.parametrize("pid", [None, 0])
    def test_pid_omitted_unless_positive(self, pid):
        node = make_passage_node(ContentRecord(id=pid, name="P"))
        assert "pid" not in node.attributes
        assert node.get("tags") == ""
        assert "position" not in node.attributes
        assert "size" not in node.attributes


class TestBuildNodes:
    def test_order_is_script_style_passages(self, make_snapshot):
        snap = make_snapshot(passages=[("p1", ""), ("p2", "")])
        nodes = build_nodes(snap)
        assert [n.tag for n in nodes] == ["script", "style", "tw-passagedata", "tw-passagedata"]
        assert [n.get("name") for n in nodes[2:]] == ["p1", "p2"]
