"""Integration tests for the editor workflow.

Exercises the modules together the way a visual editor drives them:
1. Build a document from the node factory
2. Edit it with inserts, moves, patches and removals
3. Validate after each step and check what the validator reports
4. Round-trip the document through its wire form
"""

import json

import pytest

from irtree import (
    IRDocument,
    IRNode,
    IRValidator,
    MoveMode,
    NodeOptions,
    SlotPosition,
    add_child,
    add_to_slot,
    create_default_registry,
    create_document,
    create_node,
    find_by_id,
    move,
    remove,
    update_properties,
    validate_tree,
)
from irtree.mutation import get_all_ids, validate_unique_ids
from irtree.schema import define_type
from irtree.validation import ErrorKind, WarningKind


def _opts(node_id: str) -> NodeOptions:
    return NodeOptions(node_id=node_id)


@pytest.fixture
def document() -> IRDocument:
    """page(Stack) -> [toolbar(Row) -> [save, cancel], body(Stack)]."""
    doc = create_document(create_node("Stack", options=_opts("page")))
    toolbar = create_node("Row", options=_opts("toolbar"))
    add_child(doc.root, toolbar)
    add_child(doc.root, create_node("Stack", options=_opts("body")))
    add_child(toolbar, create_node("Button", {"label": "Save"}, _opts("save")))
    add_child(toolbar, create_node("Button", {"label": "Cancel"}, _opts("cancel")))
    return doc


class TestEditorWorkflow:
    """End-to-end editing sessions."""

    def test_factory_built_tree_is_valid(self, document):
        result = validate_tree(document.root)
        assert result.is_valid
        assert result.warnings == []
        assert validate_unique_ids(document.root).is_valid

    def test_generated_ids_stay_unique(self):
        root = create_node("Stack")
        for _ in range(50):
            row = create_node("Row")
            add_child(root, row)
            add_child(row, create_node("Button", {"label": "Go"}))
        assert validate_unique_ids(root).is_valid
        assert len(set(get_all_ids(root))) == 101

    def test_drag_into_slot_then_validate(self, document):
        icon = create_node("Button", {"ariaLabel": "close"}, _opts("close-icon"))
        add_child(find_by_id(document.root, "body"), icon)

        position = SlotPosition(kind="slot", slot_name="icon")
        assert move(document.root, "close-icon", "cancel", position)
        assert find_by_id(document.root, "cancel").slots == {"icon": [icon]}
        assert validate_tree(document.root).is_valid

    def test_illegal_drop_is_reported_not_refused(self, document):
        save = find_by_id(document.root, "save")
        assert add_child(save, create_node("Row", options=_opts("nested-row")))

        result = validate_tree(document.root)
        assert not result.is_valid
        assert [(e.node_id, e.error_type) for e in result.errors] == [
            ("nested-row", ErrorKind.INVALID_NESTING)
        ]
        assert result.errors[0].path == "root.children[0].children[0].children[0]"

        assert remove(document.root, "nested-row")
        assert validate_tree(document.root).is_valid

    def test_over_capacity_reported_once(self):
        registry = create_default_registry().with_types(
            define_type("Toolbar", can_have_children=True, max_children=2)
        )
        root = create_node("Toolbar", options=_opts("bar"), registry=registry)
        for i in range(3):
            assert add_child(root, create_node("Button", {"label": str(i)}))

        result = IRValidator(registry).validate(root)
        capacity = [e for e in result.errors if e.error_type == ErrorKind.INVALID_NESTING]
        assert len(capacity) == 1
        assert capacity[0].node_id == "bar"

    def test_unregistered_type_is_reported(self, document):
        add_child(document.root, IRNode(id="chart", type="Chart"))
        result = validate_tree(document.root)
        kinds = {(e.node_id, e.error_type) for e in result.errors}
        assert ("chart", ErrorKind.INVALID_TYPE) in kinds

    def test_registering_the_type_makes_it_valid(self, document):
        add_child(document.root, IRNode(id="chart", type="Chart"))
        registry = create_default_registry().with_types(define_type("Chart"))
        assert IRValidator(registry).validate(document.root).is_valid

    def test_property_patch_triggers_warning(self, document):
        update_properties(document.root, "toolbar", {"alignItems": "middle"})
        result = validate_tree(document.root)
        assert result.is_valid
        assert [w.warning_type for w in result.warnings] == [WarningKind.DEPRECATED_VALUE]

    def test_failed_transactional_move_keeps_document_valid(self, document):
        before = document.to_wire()["root"]
        assert not move(document.root, "toolbar", "save", mode=MoveMode.TRANSACTIONAL)
        assert document.root.to_wire() == before

    def test_failed_faithful_move_drops_subtree(self, document):
        assert not move(document.root, "toolbar", "missing", mode=MoveMode.FAITHFUL)
        assert get_all_ids(document.root) == ["page", "body"]
        assert validate_tree(document.root).is_valid


class TestDocumentRoundTrip:
    """Documents survive serialization to JSON and back."""

    def test_json_round_trip(self, document):
        add_to_slot(
            find_by_id(document.root, "cancel"),
            "icon",
            create_node("Button", {"ariaLabel": "x"}, _opts("x-icon")),
        )
        document.touch()

        text = json.dumps(document.to_wire())
        restored = IRDocument.from_wire(json.loads(text))

        assert restored.root.to_wire() == document.root.to_wire()
        assert restored.meta.updated_at == document.meta.updated_at
        assert get_all_ids(restored.root) == get_all_ids(document.root)

    def test_wire_and_model_validate_alike(self, sample_tree, sample_tree_wire):
        from_model = validate_tree(sample_tree)
        from_wire = validate_tree(sample_tree_wire)
        assert from_model.to_dict() == from_wire.to_dict()
        assert from_model.is_valid
