"""Unit tests for IR models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from irtree.ir import (
    IR_VERSION,
    IRDocument,
    IRNode,
    TreeContractError,
    export_json_schema,
)


class TestIRNode:
    """Tests for IRNode model."""

    @pytest.mark.unit
    def test_minimal_node(self):
        """Create node with only required fields."""
        node = IRNode(id="label", type="Text")
        assert node.id == "label"
        assert node.type == "Text"
        assert node.properties == {}
        assert node.children is None
        assert node.slots is None

    @pytest.mark.unit
    def test_nested_node(self):
        """Children and slot members are parsed recursively."""
        node = IRNode(
            id="row",
            type="Row",
            children=[IRNode(id="btn", type="Button", children=[], slots={})],
            slots={"main": [IRNode(id="extra", type="Stack", children=[])]},
        )
        assert node.children[0].id == "btn"
        assert node.slots["main"][0].type == "Stack"

    @pytest.mark.unit
    def test_missing_id_rejected(self):
        """Pydantic rejects wire data without an id."""
        with pytest.raises(ValidationError):
            IRNode.from_wire({"type": "Row"})

    @pytest.mark.unit
    def test_props_alias_accepted(self):
        """The legacy 'props' key populates properties."""
        node = IRNode.from_wire({"id": "a", "type": "Row", "props": {"gap": "sm"}})
        assert node.properties == {"gap": "sm"}

    @pytest.mark.unit
    def test_mutable_properties(self):
        """Properties can be patched in place."""
        node = IRNode(id="a", type="Row")
        node.properties = {**node.properties, "gap": "lg"}
        assert node.properties["gap"] == "lg"


class TestWireConversion:
    """Tests for to_wire / from_wire."""

    @pytest.mark.unit
    def test_absent_containers_omitted(self):
        node = IRNode(id="leaf", type="Text", properties={"text": "hi"})
        assert node.to_wire() == {
            "id": "leaf",
            "type": "Text",
            "properties": {"text": "hi"},
        }

    @pytest.mark.unit
    def test_empty_containers_kept(self):
        node = IRNode(id="b", type="Button", children=[], slots={})
        wire = node.to_wire()
        assert wire["children"] == []
        assert wire["slots"] == {}

    @pytest.mark.unit
    def test_round_trip_preserves_structure(self):
        data = {
            "id": "root",
            "type": "Stack",
            "properties": {"gap": "md"},
            "children": [
                {
                    "id": "btn",
                    "type": "Button",
                    "properties": {},
                    "children": [],
                    "slots": {"icon": [{"id": "ico", "type": "Text", "properties": {}}]},
                }
            ],
        }
        assert IRNode.from_wire(data).to_wire() == data

    @pytest.mark.unit
    def test_wire_properties_are_copies(self):
        node = IRNode(id="a", type="Row", properties={"gap": "sm"})
        wire = node.to_wire()
        wire["properties"]["gap"] = "lg"
        assert node.properties["gap"] == "sm"


def _chain(depth: int) -> IRNode:
    root = IRNode(id="n0", type="Stack", children=[])
    current = root
    for i in range(1, depth):
        child = IRNode(id=f"n{i}", type="Stack", properties={"level": i}, children=[])
        current.children.append(child)
        current = child
    return root


class TestClone:
    """Tests for IRNode.clone."""

    @pytest.mark.unit
    def test_clone_matches_original(self):
        node = IRNode.from_wire(
            {
                "id": "b",
                "type": "Button",
                "properties": {"style": {"color": "red"}},
                "children": [{"id": "c0", "type": "Text"}, {"id": "c1", "type": "Text"}],
                "slots": {"icon": [{"id": "i0", "type": "Text"}]},
            }
        )
        assert node.clone().to_wire() == node.to_wire()

    @pytest.mark.unit
    def test_clone_shares_nothing(self):
        node = IRNode(
            id="r",
            type="Row",
            properties={"style": {"color": "red"}},
            children=[IRNode(id="c", type="Text")],
            slots={"main": []},
        )
        duplicate = node.clone()
        duplicate.properties["style"]["color"] = "blue"
        duplicate.children.append(IRNode(id="d", type="Text"))
        duplicate.slots["main"].append(IRNode(id="e", type="Text"))

        assert node.properties["style"]["color"] == "red"
        assert [c.id for c in node.children] == ["c"]
        assert node.slots["main"] == []
        assert duplicate.children[0] is not node.children[0]

    @pytest.mark.unit
    def test_absent_containers_stay_absent(self):
        duplicate = IRNode(id="t", type="Text").clone()
        assert duplicate.children is None
        assert duplicate.slots is None


class TestDeepTrees:
    """Conversion and cloning work below the recursion limit."""

    DEPTH = 3000

    @pytest.mark.unit
    def test_deep_to_wire(self):
        data = _chain(self.DEPTH).to_wire()
        depth = 1
        while data["children"]:
            data = data["children"][0]
            depth += 1
        assert depth == self.DEPTH
        assert data["properties"] == {"level": self.DEPTH - 1}

    @pytest.mark.unit
    def test_deep_clone(self):
        duplicate = _chain(self.DEPTH).clone()
        current, depth = duplicate, 1
        while current.children:
            current = current.children[0]
            depth += 1
        assert depth == self.DEPTH
        assert current.id == f"n{self.DEPTH - 1}"


class TestIterDirectChildren:
    """Tests for direct child iteration order."""

    @pytest.mark.unit
    def test_children_before_slots(self):
        node = IRNode(
            id="b",
            type="Button",
            children=[IRNode(id="c0", type="Text"), IRNode(id="c1", type="Text")],
            slots={
                "icon": [IRNode(id="i0", type="Text")],
                "content": [IRNode(id="k0", type="Text")],
            },
        )
        order = [(slot, idx, child.id) for slot, idx, child in node.iter_direct_children()]
        assert order == [
            (None, 0, "c0"),
            (None, 1, "c1"),
            ("icon", 0, "i0"),
            ("content", 0, "k0"),
        ]

    @pytest.mark.unit
    def test_leaf_has_no_children(self):
        assert list(IRNode(id="t", type="Text").iter_direct_children()) == []


class TestIRDocument:
    """Tests for the document envelope."""

    @pytest.mark.unit
    def test_default_meta(self):
        doc = IRDocument(root=IRNode(id="root", type="Stack", children=[]))
        assert doc.meta.version == IR_VERSION
        assert isinstance(doc.meta.created_at, datetime)
        assert doc.meta.created_at.tzinfo is not None

    @pytest.mark.unit
    def test_touch_advances_updated_at(self):
        doc = IRDocument(root=IRNode(id="root", type="Stack"))
        before = doc.meta.updated_at
        doc.touch()
        assert doc.meta.updated_at >= before
        assert doc.meta.created_at <= doc.meta.updated_at

    @pytest.mark.unit
    def test_wire_round_trip(self):
        doc = IRDocument(root=IRNode(id="root", type="Stack", children=[]))
        wire = doc.to_wire()
        assert wire["meta"]["version"] == IR_VERSION
        assert isinstance(wire["meta"]["created_at"], str)
        restored = IRDocument.from_wire(wire)
        assert restored.root.id == "root"
        assert restored.meta.created_at == doc.meta.created_at


class TestExportJsonSchema:
    """Tests for JSON Schema export."""

    @pytest.mark.unit
    def test_schema_export(self):
        """Pydantic v2 uses $defs with a $ref at root for recursive models."""
        schema = export_json_schema()
        assert "$defs" in schema
        assert schema["$defs"]["IRNode"]["title"] == "IRNode"

    @pytest.mark.unit
    def test_schema_required_fields(self):
        node_schema = export_json_schema()["$defs"]["IRNode"]
        assert set(node_schema["required"]) == {"id", "type"}
        assert "children" in node_schema["properties"]
        assert "slots" in node_schema["properties"]


class TestTreeContractError:
    """TreeContractError is a TypeError."""

    @pytest.mark.unit
    def test_is_type_error(self):
        assert issubclass(TreeContractError, TypeError)
