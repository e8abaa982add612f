"""Unit tests for the Mutation Engine."""

import logging
import re

import pytest

from irtree.ir import IRDocument, IRNode, TreeContractError
from irtree.mutation import (
    MoveMode,
    NodeOptions,
    PathSegment,
    SlotPosition,
    add_child,
    add_to_slot,
    clone_node,
    create_document,
    create_node,
    find_by_id,
    find_parent,
    generate_id,
    get_all_ids,
    get_depth,
    get_path,
    move,
    remove,
    update_properties,
    validate_unique_ids,
    walk,
)
from irtree.schema import TypeDefinition, create_default_registry


def _node(node_id: str, type_name: str = "Button", **kwargs) -> IRNode:
    return IRNode(id=node_id, type=type_name, **kwargs)


@pytest.fixture
def tree() -> IRNode:
    """root(Stack) -> [row(Row) -> [b1, b2 {icon: [icon1]}], col(Stack)]."""
    return _node(
        "root",
        "Stack",
        children=[
            _node(
                "row",
                "Row",
                children=[
                    _node("b1", children=[]),
                    _node("b2", children=[], slots={"icon": [_node("icon1")]}),
                ],
            ),
            _node("col", "Stack", children=[]),
        ],
    )


def _ids(nodes) -> list[str]:
    return [node.id for node in nodes or []]


class TestGenerateId:
    """Tests for id generation."""

    @pytest.mark.unit
    def test_format(self):
        assert re.fullmatch(r"component-button-[0-9a-z]+-[0-9a-f]{8}", generate_id("Button"))

    @pytest.mark.unit
    def test_explicit_prefix(self):
        assert generate_id("Row", prefix="page").startswith("page-row-")

    @pytest.mark.unit
    def test_prefix_from_environment(self, monkeypatch):
        monkeypatch.setenv("IRTREE_ID_PREFIX", "app")
        assert generate_id("Stack").startswith("app-stack-")

    @pytest.mark.unit
    def test_ids_are_unique(self):
        ids = {generate_id("Button") for _ in range(500)}
        assert len(ids) == 500


class TestCreateNode:
    """Tests for the node factory."""

    @pytest.mark.unit
    def test_button_defaults(self):
        node = create_node("Button")
        assert node.type == "Button"
        assert node.properties == {"variant": "primary", "size": "md", "disabled": False}
        assert node.children == []
        assert node.slots == {}

    @pytest.mark.unit
    def test_caller_properties_override_defaults(self):
        node = create_node("Row", {"gap": "lg", "wrap": True})
        assert node.properties["gap"] == "lg"
        assert node.properties["alignItems"] == "center"
        assert node.properties["wrap"] is True

    @pytest.mark.unit
    def test_main_only_container_has_no_slots(self):
        node = create_node("Stack")
        assert node.children == []
        assert node.slots is None

    @pytest.mark.unit
    def test_unknown_type_is_bare(self):
        node = create_node("Text", {"text": "hi"})
        assert node.properties == {"text": "hi"}
        assert node.children is None
        assert node.slots is None

    @pytest.mark.unit
    def test_explicit_id(self):
        assert create_node("Row", options=NodeOptions(node_id="header")).id == "header"

    @pytest.mark.unit
    def test_plain_id_without_random_part(self):
        node = create_node("Row", options=NodeOptions(auto_generate_ids=False))
        assert re.fullmatch(r"row-\d+", node.id)

    @pytest.mark.unit
    def test_option_prefix(self):
        node = create_node("Button", options=NodeOptions(id_prefix="toolbar"))
        assert node.id.startswith("toolbar-button-")

    @pytest.mark.unit
    def test_custom_registry(self):
        registry = create_default_registry().with_types(
            TypeDefinition(type="Text", default_properties={"text": ""})
        )
        node = create_node("Text", registry=registry)
        assert node.properties == {"text": ""}
        assert node.children is None

    @pytest.mark.unit
    def test_defaults_not_shared(self):
        first = create_node("Row")
        first.properties["gap"] = "sm"
        assert create_node("Row").properties["gap"] == "md"

    @pytest.mark.unit
    def test_create_document_defaults_to_stack(self):
        document = create_document()
        assert isinstance(document, IRDocument)
        assert document.root.type == "Stack"
        assert document.root.children == []

    @pytest.mark.unit
    def test_create_document_with_root(self, tree):
        assert create_document(tree).root is tree


class TestClone:
    """Tests for deep duplication."""

    @pytest.mark.unit
    def test_clone_is_independent(self, tree):
        duplicate = clone_node(tree)
        duplicate.children[0].properties["gap"] = "lg"
        duplicate.children[0].children.append(_node("b3"))
        duplicate.children[0].children[1].slots["icon"].clear()

        row = find_by_id(tree, "row")
        assert row.properties == {}
        assert _ids(row.children) == ["b1", "b2"]
        assert _ids(find_by_id(tree, "b2").slots["icon"]) == ["icon1"]

    @pytest.mark.unit
    def test_clone_keeps_ids(self, tree):
        assert get_all_ids(clone_node(tree)) == get_all_ids(tree)


class TestSearches:
    """Tests for walk order and lookups."""

    @pytest.mark.unit
    def test_walk_order(self, tree):
        assert [entry.node.id for entry in walk(tree)] == [
            "root", "row", "b1", "b2", "icon1", "col",
        ]

    @pytest.mark.unit
    def test_walk_entries_carry_location(self, tree):
        entries = {entry.node.id: entry for entry in walk(tree)}
        assert entries["root"].parent is None
        assert entries["icon1"].parent.id == "b2"
        assert entries["icon1"].slot_name == "icon"
        assert entries["b2"].index == 1
        assert entries["icon1"].depth == 3

    @pytest.mark.unit
    def test_find_by_id(self, tree):
        assert find_by_id(tree, "icon1").type == "Button"
        assert find_by_id(tree, "root") is tree
        assert find_by_id(tree, "missing") is None

    @pytest.mark.unit
    def test_find_by_id_first_match_wins(self, tree):
        add_child(find_by_id(tree, "col"), _node("b1", properties={"late": True}))
        assert "late" not in find_by_id(tree, "b1").properties

    @pytest.mark.unit
    def test_find_parent(self, tree):
        assert find_parent(tree, "b1").id == "row"
        assert find_parent(tree, "icon1").id == "b2"
        assert find_parent(tree, "root") is None
        assert find_parent(tree, "missing") is None

    @pytest.mark.unit
    def test_get_path(self, tree):
        assert get_path(tree, "icon1") == [
            PathSegment("children", None, 0),
            PathSegment("children", None, 1),
            PathSegment("slots", "icon", 0),
        ]
        assert get_path(tree, "col") == [PathSegment("children", None, 1)]
        assert get_path(tree, "root") == []
        assert get_path(tree, "missing") == []

    @pytest.mark.unit
    def test_get_depth(self, tree):
        assert get_depth(tree, "root") == 0
        assert get_depth(tree, "row") == 1
        assert get_depth(tree, "b2") == 2
        assert get_depth(tree, "icon1") == 3
        assert get_depth(tree, "missing") == -1

    @pytest.mark.unit
    def test_deep_tree_does_not_recurse(self):
        root = _node("n0", "Stack", children=[])
        current = root
        for i in range(1, 5000):
            child = _node(f"n{i}", "Stack", children=[])
            add_child(current, child)
            current = child
        assert get_depth(root, "n4999") == 4999
        assert len(get_all_ids(root)) == 5000

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(MoveMode))
    def test_move_deep_subtree(self, mode):
        root = _node("n0", "Stack", children=[])
        current = root
        for i in range(1, 3000):
            child = _node(f"n{i}", "Stack", children=[])
            add_child(current, child)
            current = child
        add_child(root, _node("dest", "Stack", children=[]))

        assert move(root, "n1", "dest", mode=mode)
        assert find_parent(root, "n1").id == "dest"
        assert get_depth(root, "n2999") == 3000
        assert get_all_ids(root).count("n2999") == 1

    @pytest.mark.unit
    def test_clone_deep_subtree(self):
        root = _node("n0", "Stack", children=[])
        current = root
        for i in range(1, 3000):
            child = _node(f"n{i}", "Stack", children=[])
            add_child(current, child)
            current = child
        assert get_all_ids(clone_node(root)) == get_all_ids(root)

    @pytest.mark.unit
    def test_get_all_ids(self, tree):
        assert get_all_ids(tree) == ["root", "row", "b1", "b2", "icon1", "col"]

    @pytest.mark.unit
    def test_unique_ids(self, tree):
        report = validate_unique_ids(tree)
        assert report.is_valid
        assert report.duplicates == set()

    @pytest.mark.unit
    def test_duplicate_ids_reported(self, tree):
        add_child(find_by_id(tree, "col"), _node("b1"))
        add_to_slot(find_by_id(tree, "b1"), "icon", _node("row"))
        report = validate_unique_ids(tree)
        assert not report.is_valid
        assert report.duplicates == {"b1", "row"}

    @pytest.mark.unit
    def test_non_node_root_rejected(self):
        with pytest.raises(TreeContractError):
            find_by_id({"id": "root", "type": "Stack"}, "root")
        with pytest.raises(TypeError):
            get_all_ids(None)


class TestInsert:
    """Tests for add_child and add_to_slot."""

    @pytest.mark.unit
    def test_append_by_default(self, tree):
        row = find_by_id(tree, "row")
        assert add_child(row, _node("b3"))
        assert _ids(row.children) == ["b1", "b2", "b3"]

    @pytest.mark.unit
    def test_insert_at_index(self, tree):
        row = find_by_id(tree, "row")
        add_child(row, _node("first"), 0)
        add_child(row, _node("end"), 3)
        assert _ids(row.children) == ["first", "b1", "b2", "end"]

    @pytest.mark.unit
    @pytest.mark.parametrize("index", [-1, 99])
    def test_out_of_range_index_appends(self, tree, index):
        row = find_by_id(tree, "row")
        add_child(row, _node("b3"), index)
        assert _ids(row.children) == ["b1", "b2", "b3"]

    @pytest.mark.unit
    def test_missing_parent(self):
        assert add_child(None, _node("x")) is False
        assert add_to_slot(None, "icon", _node("x")) is False

    @pytest.mark.unit
    def test_creates_children_list(self):
        leaf = _node("leaf", "Text")
        assert add_child(leaf, _node("x"))
        assert _ids(leaf.children) == ["x"]

    @pytest.mark.unit
    def test_add_to_slot_creates_slot(self, tree):
        b1 = find_by_id(tree, "b1")
        assert b1.slots is None
        assert add_to_slot(b1, "content", _node("label"))
        assert _ids(b1.slots["content"]) == ["label"]

    @pytest.mark.unit
    def test_add_to_slot_index(self, tree):
        b2 = find_by_id(tree, "b2")
        add_to_slot(b2, "icon", _node("icon0"), 0)
        assert _ids(b2.slots["icon"]) == ["icon0", "icon1"]

    @pytest.mark.unit
    def test_no_schema_check(self, tree):
        """Illegal placements are accepted; validation reports them."""
        assert add_child(find_by_id(tree, "b1"), _node("nested", "Row"))
        assert find_parent(tree, "nested").id == "b1"


class TestRemove:
    """Tests for node removal."""

    @pytest.mark.unit
    def test_remove_then_absent(self, tree):
        assert find_by_id(tree, "b1") is not None
        assert remove(tree, "b1")
        assert find_by_id(tree, "b1") is None
        assert _ids(find_by_id(tree, "row").children) == ["b2"]

    @pytest.mark.unit
    def test_remove_subtree(self, tree):
        assert remove(tree, "row")
        assert get_all_ids(tree) == ["root", "col"]

    @pytest.mark.unit
    def test_emptied_slot_is_deleted(self, tree):
        assert remove(tree, "icon1")
        assert find_by_id(tree, "b2").slots == {}

    @pytest.mark.unit
    def test_slot_with_members_left_is_kept(self, tree):
        b2 = find_by_id(tree, "b2")
        add_to_slot(b2, "icon", _node("icon2"))
        remove(tree, "icon1")
        assert _ids(b2.slots["icon"]) == ["icon2"]

    @pytest.mark.unit
    def test_root_is_not_removed(self, tree):
        assert remove(tree, "root") is False
        assert find_by_id(tree, "root") is tree

    @pytest.mark.unit
    def test_missing_id(self, tree):
        assert remove(tree, "missing") is False

    @pytest.mark.unit
    def test_first_match_removed(self, tree):
        add_child(find_by_id(tree, "col"), _node("b1"))
        remove(tree, "b1")
        assert find_parent(tree, "b1").id == "col"

    @pytest.mark.unit
    def test_removal_is_logged(self, tree, caplog):
        with caplog.at_level(logging.DEBUG, logger="irtree.mutation.lib"):
            remove(tree, "b1")
        assert "Removed node 'b1'" in caplog.messages


class TestMove:
    """Tests for relocation in both modes."""

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(MoveMode))
    def test_move_to_default_slot(self, tree, mode):
        original = find_by_id(tree, "b1")
        assert move(tree, "b1", "col", mode=mode)
        moved = find_by_id(tree, "b1")
        assert find_parent(tree, "b1").id == "col"
        assert moved is not original
        assert _ids(find_by_id(tree, "row").children) == ["b2"]
        assert get_all_ids(tree).count("b1") == 1

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(MoveMode))
    def test_move_to_named_slot(self, tree, mode):
        position = SlotPosition(kind="slot", slot_name="content", index=0)
        assert move(tree, "b1", "b2", position, mode=mode)
        assert get_path(tree, "b1") == [
            PathSegment("children", None, 0),
            PathSegment("children", None, 0),
            PathSegment("slots", "content", 0),
        ]

    @pytest.mark.unit
    def test_move_with_index(self, tree):
        position = SlotPosition(index=0)
        assert move(tree, "col", "row", position, mode=MoveMode.FAITHFUL)
        assert _ids(find_by_id(tree, "row").children) == ["col", "b1", "b2"]

    @pytest.mark.unit
    def test_move_keeps_subtree(self, tree):
        assert move(tree, "b2", "col", mode=MoveMode.TRANSACTIONAL)
        assert find_parent(tree, "icon1").id == "b2"
        assert get_depth(tree, "icon1") == 3

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(MoveMode))
    def test_missing_node(self, tree, mode):
        before = get_all_ids(tree)
        assert move(tree, "missing", "col", mode=mode) is False
        assert get_all_ids(tree) == before

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(MoveMode))
    def test_root_cannot_move(self, tree, mode):
        assert move(tree, "root", "col", mode=mode) is False
        assert find_by_id(tree, "root") is tree

    @pytest.mark.unit
    def test_faithful_missing_destination_loses_node(self, tree, caplog):
        with caplog.at_level(logging.WARNING, logger="irtree.mutation.lib"):
            assert move(tree, "b1", "nowhere", mode=MoveMode.FAITHFUL) is False
        assert find_by_id(tree, "b1") is None
        assert any("'b1'" in message for message in caplog.messages)

    @pytest.mark.unit
    def test_faithful_destination_inside_subtree_loses_node(self, tree):
        assert move(tree, "row", "icon1", mode=MoveMode.FAITHFUL) is False
        assert get_all_ids(tree) == ["root", "col"]

    @pytest.mark.unit
    def test_transactional_missing_destination_keeps_tree(self, tree):
        before = get_all_ids(tree)
        assert move(tree, "b1", "nowhere", mode=MoveMode.TRANSACTIONAL) is False
        assert get_all_ids(tree) == before

    @pytest.mark.unit
    def test_transactional_destination_inside_subtree_keeps_tree(self, tree):
        before = get_all_ids(tree)
        assert move(tree, "row", "icon1", mode=MoveMode.TRANSACTIONAL) is False
        assert move(tree, "row", "row", mode=MoveMode.TRANSACTIONAL) is False
        assert get_all_ids(tree) == before

    @pytest.mark.unit
    def test_mode_from_environment(self, tree, monkeypatch):
        monkeypatch.setenv("IRTREE_MOVE_MODE", "transactional")
        assert move(tree, "b1", "nowhere") is False
        assert find_by_id(tree, "b1") is not None

    @pytest.mark.unit
    def test_mode_accepts_string(self, tree):
        assert move(tree, "b1", "nowhere", mode="transactional") is False
        assert find_by_id(tree, "b1") is not None

    @pytest.mark.unit
    def test_faithful_is_default(self, tree, monkeypatch):
        monkeypatch.delenv("IRTREE_MOVE_MODE", raising=False)
        assert move(tree, "b1", "nowhere") is False
        assert find_by_id(tree, "b1") is None


class TestUpdateProperties:
    """Tests for the property patch."""

    @pytest.mark.unit
    def test_shallow_merge(self, tree):
        update_properties(tree, "b1", {"variant": "primary", "label": "Save"})
        assert update_properties(tree, "b1", {"label": "Cancel"})
        assert find_by_id(tree, "b1").properties == {"variant": "primary", "label": "Cancel"}

    @pytest.mark.unit
    def test_nested_values_replaced(self, tree):
        update_properties(tree, "row", {"style": {"color": "red", "margin": 1}})
        update_properties(tree, "row", {"style": {"color": "blue"}})
        assert find_by_id(tree, "row").properties["style"] == {"color": "blue"}

    @pytest.mark.unit
    def test_missing_node(self, tree):
        assert update_properties(tree, "missing", {"a": 1}) is False
