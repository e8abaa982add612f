"""Unit tests for validation module."""

import pytest

from irtree.ir import IRNode, TreeContractError
from irtree.schema import TypeDefinition, create_default_registry, define_type
from irtree.validation import (
    ErrorKind,
    IRValidator,
    ValidationError,
    ValidationResult,
    ValidationWarning,
    WarningKind,
    check_button_properties,
    check_layout_properties,
    is_valid,
    validate_tree,
)


def _button(node_id: str, **props) -> IRNode:
    props.setdefault("label", node_id)
    return IRNode(id=node_id, type="Button", properties=props, children=[], slots={})


@pytest.fixture
def validator() -> IRValidator:
    return IRValidator(create_default_registry())


class TestValidTrees:
    """Well-formed trees."""

    @pytest.mark.unit
    def test_valid_tree(self, validator):
        """Well-formed tree passes validation."""
        root = IRNode(
            id="root",
            type="Stack",
            children=[
                IRNode(id="row", type="Row", children=[_button("ok"), _button("cancel")]),
            ],
        )
        result = validator.validate(root)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_wire_form_accepted(self, validator):
        """Plain nested dicts validate the same as models."""
        data = {
            "id": "root",
            "type": "Row",
            "children": [{"id": "b", "type": "Button", "props": {"label": "Go"}}],
        }
        assert validator.validate(data).is_valid

    @pytest.mark.unit
    def test_single_node_valid(self, validator):
        assert validator.is_valid(IRNode(id="solo", type="Stack", children=[]))

    @pytest.mark.unit
    def test_non_tree_raises(self, validator):
        with pytest.raises(TreeContractError):
            validator.validate(["not", "a", "tree"])


class TestUnregisteredType:
    """Unknown types are reported once and the walk continues."""

    @pytest.mark.unit
    def test_bogus_root(self, validator):
        root = IRNode(
            id="root",
            type="Bogus",
            children=[_button("inner")],
            slots={"whatever": [_button("slotted")]},
        )
        result = validator.validate(root)
        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ErrorKind.INVALID_TYPE
        assert result.errors[0].node_id == "root"
        assert "Bogus" in result.errors[0].message

    @pytest.mark.unit
    def test_children_of_bogus_still_walked(self, validator):
        root = IRNode(
            id="root",
            type="Bogus",
            children=[IRNode(id="inner", type="AlsoBogus")],
        )
        result = validator.validate(root)
        assert [e.node_id for e in result.errors] == ["root", "inner"]
        assert all(e.error_type == ErrorKind.INVALID_TYPE for e in result.errors)
        assert result.errors[1].path == "root.children[0]"

    @pytest.mark.unit
    def test_bogus_child_of_known_parent(self, validator):
        """A known parent reports the containment failure as well."""
        root = IRNode(id="root", type="Row", children=[IRNode(id="x", type="Bogus")])
        result = validator.validate(root)
        kinds = sorted(e.error_type.value for e in result.errors)
        assert kinds == ["invalid-nesting", "invalid-type"]
        assert {e.node_id for e in result.errors} == {"x"}


class TestRequiredFields:
    """Missing or non-string id/type."""

    @pytest.mark.unit
    def test_missing_id(self, validator):
        result = validator.validate({"type": "Stack", "children": []})
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.error_type == ErrorKind.MISSING_REQUIRED_FIELD
        assert error.node_id == "unknown"

    @pytest.mark.unit
    def test_empty_id_on_model(self, validator):
        result = validator.validate(IRNode(id="", type="Stack"))
        assert result.errors_of(ErrorKind.MISSING_REQUIRED_FIELD)

    @pytest.mark.unit
    def test_non_string_type(self, validator):
        result = validator.validate({"id": "n", "type": 42})
        assert [e.error_type for e in result.errors] == [
            ErrorKind.MISSING_REQUIRED_FIELD
        ]
        assert result.errors[0].node_id == "n"

    @pytest.mark.unit
    def test_typeless_child_fails_containment(self, validator):
        """A child with an id but no type cannot be contained by anything."""
        result = validator.validate({"id": "r", "type": "Row", "children": [{"id": "c"}]})
        assert [e.error_type for e in result.errors] == [
            ErrorKind.INVALID_NESTING,
            ErrorKind.MISSING_REQUIRED_FIELD,
        ]
        assert {e.node_id for e in result.errors} == {"c"}
        assert all(e.path == "root.children[0]" for e in result.errors)

    @pytest.mark.unit
    def test_typeless_slot_member_fails_containment(self, validator):
        root = {
            "id": "b",
            "type": "Button",
            "properties": {"label": "Go"},
            "slots": {"icon": [{"id": "i", "type": 7}]},
        }
        kinds = [e.error_type for e in validator.validate(root).errors]
        assert kinds == [ErrorKind.INVALID_NESTING, ErrorKind.MISSING_REQUIRED_FIELD]

    @pytest.mark.unit
    def test_unhashable_child_type(self, validator):
        result = validator.validate(
            {"id": "r", "type": "Row", "children": [{"id": "c", "type": ["Button"]}]}
        )
        assert [e.error_type for e in result.errors] == [
            ErrorKind.INVALID_NESTING,
            ErrorKind.MISSING_REQUIRED_FIELD,
        ]

    @pytest.mark.unit
    def test_child_without_id_skips_containment(self, validator):
        result = validator.validate({"id": "r", "type": "Row", "children": [{}]})
        assert [e.error_type for e in result.errors] == [
            ErrorKind.MISSING_REQUIRED_FIELD,
            ErrorKind.MISSING_REQUIRED_FIELD,
        ]

    @pytest.mark.unit
    def test_non_object_child(self, validator):
        result = validator.validate({"id": "r", "type": "Stack", "children": ["oops"]})
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ErrorKind.MISSING_REQUIRED_FIELD
        assert result.errors[0].path == "root.children[0]"


class TestNesting:
    """Child capability, ceilings and containment."""

    @pytest.mark.unit
    def test_over_capacity_reported_once(self):
        registry = create_default_registry()
        registry.register_type(define_type("Single", can_have_children=True, max_children=1))
        root = IRNode(id="s", type="Single", children=[_button("a"), _button("b")])
        result = IRValidator(registry).validate(root)
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ErrorKind.INVALID_NESTING
        assert result.errors[0].node_id == "s"
        assert "maximum 1" in result.errors[0].message

    @pytest.mark.unit
    def test_at_capacity_is_valid(self):
        registry = create_default_registry()
        registry.register_type(define_type("Single", can_have_children=True, max_children=1))
        root = IRNode(id="s", type="Single", children=[_button("a")])
        assert IRValidator(registry).validate(root).is_valid

    @pytest.mark.unit
    def test_leaf_with_children(self):
        registry = create_default_registry()
        registry.register_type(TypeDefinition(type="Text"))
        root = IRNode(id="t", type="Text", children=[])
        result = IRValidator(registry).validate(root)
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ErrorKind.INVALID_NESTING
        assert "cannot have children" in result.errors[0].message

    @pytest.mark.unit
    def test_leaf_children_are_still_validated(self):
        registry = create_default_registry()
        registry.register_type(TypeDefinition(type="Text"))
        root = IRNode(id="t", type="Text", children=[IRNode(id="x", type="Bogus")])
        result = IRValidator(registry).validate(root)
        assert ("x", ErrorKind.INVALID_TYPE) in {
            (e.node_id, e.error_type) for e in result.errors
        }

    @pytest.mark.unit
    def test_button_cannot_contain_layout(self, validator):
        root = IRNode(
            id="btn",
            type="Button",
            children=[IRNode(id="inner", type="Row", children=[])],
        )
        result = validator.validate(root)
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.error_type == ErrorKind.INVALID_NESTING
        assert error.node_id == "inner"
        assert error.path == "root.children[0]"

    @pytest.mark.unit
    def test_children_must_be_list(self, validator):
        result = validator.validate({"id": "r", "type": "Row", "children": {"a": 1}})
        assert [e.error_type for e in result.errors] == [ErrorKind.INVALID_NESTING]

    @pytest.mark.unit
    def test_errors_collected_across_tree(self, validator):
        """Every violation in the tree surfaces in one pass."""
        root = IRNode(
            id="root",
            type="Stack",
            children=[
                IRNode(id="b1", type="Button", children=[IRNode(id="r1", type="Row")]),
                IRNode(id="x", type="Nope"),
                IRNode(id="b2", type="Button", children=[IRNode(id="s1", type="Stack")]),
            ],
        )
        result = validator.validate(root)
        assert {e.node_id for e in result.errors_of(ErrorKind.INVALID_NESTING)} == {
            "r1",
            "x",
            "s1",
        }
        assert len(result.errors_of(ErrorKind.INVALID_TYPE)) == 1


class TestSlots:
    """Slot legality and slot member checks."""

    @pytest.mark.unit
    def test_listed_slot_valid(self, validator):
        root = IRNode(
            id="b",
            type="Button",
            children=[],
            slots={"icon": [_button("inner")]},
        )
        assert validator.validate(root).is_valid

    @pytest.mark.unit
    def test_main_looseness(self, validator):
        """Row lists "main", so any slot name is accepted."""
        root = IRNode(id="r", type="Row", slots={"sidebar": [_button("b")]})
        assert validator.validate(root).is_valid

    @pytest.mark.unit
    def test_disallowed_slot_reported_and_contents_validated(self):
        registry = create_default_registry()
        registry.register_type(
            TypeDefinition(type="Card", allowed_slots=("header",), can_have_children=True)
        )
        root = IRNode(
            id="card",
            type="Card",
            slots={"footer": [IRNode(id="z", type="Bogus")]},
        )
        result = IRValidator(registry).validate(root)
        slot_errors = result.errors_of(ErrorKind.INVALID_SLOT)
        assert len(slot_errors) == 1
        assert slot_errors[0].node_id == "card"
        assert slot_errors[0].path == "root.slots.footer"
        assert "Allowed slots: header" in slot_errors[0].message
        type_errors = result.errors_of(ErrorKind.INVALID_TYPE)
        assert [e.node_id for e in type_errors] == ["z"]
        assert type_errors[0].path == "root.slots.footer[0]"

    @pytest.mark.unit
    def test_slot_member_containment(self, validator):
        root = IRNode(
            id="b",
            type="Button",
            slots={"content": [IRNode(id="s", type="Stack", children=[])]},
        )
        result = validator.validate(root)
        assert len(result.errors) == 1
        assert result.errors[0].node_id == "s"
        assert "slot 'content'" in result.errors[0].message

    @pytest.mark.unit
    def test_slot_must_be_list(self, validator):
        result = validator.validate(
            {"id": "b", "type": "Button", "slots": {"icon": "nope"}}
        )
        assert [e.error_type for e in result.errors] == [ErrorKind.INVALID_SLOT]


class TestWarnings:
    """Advisory checks never affect validity."""

    @pytest.mark.unit
    def test_bad_align_items(self, validator):
        root = IRNode(id="r", type="Row", properties={"alignItems": "middle"}, children=[])
        result = validator.validate(root)
        assert result.is_valid
        assert len(result.warnings) == 1
        assert result.warnings[0].warning_type == WarningKind.DEPRECATED_VALUE
        assert "alignItems" in result.warnings[0].message

    @pytest.mark.unit
    def test_bad_justify_and_gap(self, validator):
        root = IRNode(
            id="s",
            type="Stack",
            properties={"justifyContent": "between", "gap": "xl"},
            children=[],
        )
        result = validator.validate(root)
        assert result.is_valid
        assert len(result.warnings_of(WarningKind.DEPRECATED_VALUE)) == 2

    @pytest.mark.unit
    def test_numeric_gap_not_flagged(self, validator):
        root = IRNode(id="s", type="Stack", properties={"gap": 12}, children=[])
        assert validator.validate(root).warnings == []

    @pytest.mark.unit
    def test_button_non_string_variant(self, validator):
        root = _button("b", variant=3, size=["lg"])
        result = validator.validate(root)
        assert result.is_valid
        assert len(result.warnings_of(WarningKind.DEPRECATED_VALUE)) == 2

    @pytest.mark.unit
    def test_button_without_label(self, validator):
        root = IRNode(id="b", type="Button", children=[], slots={})
        result = validator.validate(root)
        assert result.is_valid
        assert [w.warning_type for w in result.warnings] == [
            WarningKind.ACCESSIBILITY_ISSUE
        ]

    @pytest.mark.unit
    def test_button_with_slot_content_is_accessible(self, validator):
        root = IRNode(
            id="b", type="Button", children=[], slots={"content": [_button("inner")]}
        )
        assert validator.validate(root).warnings == []

    @pytest.mark.unit
    def test_wide_node(self):
        validator = IRValidator(create_default_registry(), wide_node_threshold=2)
        root = IRNode(id="r", type="Row", children=[_button(f"b{i}") for i in range(3)])
        result = validator.validate(root)
        assert result.is_valid
        assert [w.warning_type for w in result.warnings] == [
            WarningKind.PERFORMANCE_CONCERN
        ]

    @pytest.mark.unit
    def test_threshold_from_environment(self, monkeypatch):
        monkeypatch.setenv("IRTREE_WIDE_NODE_THRESHOLD", "1")
        validator = IRValidator(create_default_registry())
        assert validator.wide_node_threshold == 1

    @pytest.mark.unit
    def test_property_checks_disabled(self, monkeypatch):
        """Property checks can be switched off; structural warnings remain."""
        monkeypatch.setenv("IRTREE_PROPERTY_CHECKS", "false")
        validator = IRValidator(create_default_registry(), wide_node_threshold=1)
        root = IRNode(
            id="r",
            type="Row",
            properties={"alignItems": "middle"},
            children=[_button("a"), _button("b")],
        )
        result = validator.validate(root)
        assert [w.warning_type for w in result.warnings] == [
            WarningKind.PERFORMANCE_CONCERN
        ]

    @pytest.mark.unit
    def test_property_checks_override(self):
        validator = IRValidator(property_checks=False)
        root = IRNode(id="b", type="Button", children=[], slots={})
        assert validator.validate(root).warnings == []

    @pytest.mark.unit
    def test_custom_property_check(self, validator):
        def require_title(node):
            if not node["properties"].get("title"):
                yield WarningKind.ACCESSIBILITY_ISSUE, "Stack should have a title"

        validator.register_property_check("Stack", require_title)
        result = validator.validate(IRNode(id="s", type="Stack", children=[]))
        assert [w.message for w in result.warnings] == ["Stack should have a title"]

    @pytest.mark.unit
    def test_checks_skipped_for_unknown_type(self, validator):
        validator.register_property_check(
            "Bogus", lambda node: [(WarningKind.DEPRECATED_VALUE, "never")]
        )
        result = validator.validate(IRNode(id="x", type="Bogus"))
        assert result.warnings == []


class TestPropertyCheckFunctions:
    """The default checks work on plain wire data."""

    @pytest.mark.unit
    def test_layout_check_clean(self):
        node = {"properties": {"gap": "md", "alignItems": "center"}}
        assert list(check_layout_properties(node)) == []

    @pytest.mark.unit
    def test_button_check_reads_legacy_props(self):
        node = {"props": {"ariaLabel": "Close"}, "children": []}
        assert list(check_button_properties(node)) == []


class TestModuleHelpers:
    """validate_tree / is_valid convenience functions."""

    @pytest.mark.unit
    def test_validate_tree_default_registry(self):
        result = validate_tree(IRNode(id="r", type="Row", children=[]))
        assert isinstance(result, ValidationResult)
        assert result.is_valid

    @pytest.mark.unit
    def test_is_valid_false(self):
        assert is_valid(IRNode(id="r", type="Bogus")) is False

    @pytest.mark.unit
    def test_custom_registry(self):
        registry = create_default_registry()
        registry.register_type(TypeDefinition(type="Text"))
        assert is_valid(IRNode(id="t", type="Text"), registry) is True


class TestDeepTrees:
    """Depth is not limited by the interpreter's recursion limit."""

    DEPTH = 3000

    def _wire_chain(self, leaf: dict) -> dict:
        root = {"id": "n0", "type": "Stack", "children": []}
        current = root
        for i in range(1, self.DEPTH):
            child = {"id": f"n{i}", "type": "Stack", "children": []}
            current["children"].append(child)
            current = child
        current["children"].append(leaf)
        return root

    @pytest.mark.unit
    def test_deep_wire_tree(self, validator):
        root = self._wire_chain({"id": "deep-row", "type": "Row"})
        assert validator.validate(root).is_valid

    @pytest.mark.unit
    def test_error_at_the_bottom_is_reported(self, validator):
        root = self._wire_chain({"id": "chart", "type": "Chart"})
        result = validator.validate(root)
        assert [e.node_id for e in result.errors] == ["chart", "chart"]
        assert result.errors[0].path.count(".children[0]") == self.DEPTH

    @pytest.mark.unit
    def test_deep_model_tree(self, validator):
        root = IRNode(id="n0", type="Stack", children=[])
        current = root
        for i in range(1, self.DEPTH):
            child = IRNode(id=f"n{i}", type="Stack", children=[])
            current.children.append(child)
            current = child
        assert validator.validate(root).is_valid


class TestResultObjects:
    """Tests for result dataclasses."""

    @pytest.mark.unit
    def test_error_attributes(self):
        error = ValidationError("n", "msg", ErrorKind.INVALID_SLOT)
        assert error.path == "root"
        assert error.error_type.value == "invalid-slot"

    @pytest.mark.unit
    def test_to_dict(self):
        result = ValidationResult(
            errors=[ValidationError("n", "bad", ErrorKind.INVALID_TYPE, "root")],
            warnings=[
                ValidationWarning("n", "meh", WarningKind.PERFORMANCE_CONCERN, "root")
            ],
        )
        data = result.to_dict()
        assert data["is_valid"] is False
        assert data["errors"][0]["type"] == "invalid-type"
        assert data["warnings"][0]["type"] == "performance-concern"

    @pytest.mark.unit
    def test_kind_values(self):
        assert {k.value for k in ErrorKind} == {
            "invalid-type",
            "missing-required-field",
            "invalid-nesting",
            "invalid-slot",
        }
        assert {k.value for k in WarningKind} == {
            "deprecated-value",
            "performance-concern",
            "accessibility-issue",
        }
