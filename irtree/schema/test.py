"""Unit tests for the Schema module."""

import logging

import pytest

from irtree.schema import (
    DEFAULT_TYPE_DEFINITIONS,
    MAIN_SLOT,
    DefaultType,
    Layout,
    SchemaRegistry,
    TypeDefinition,
    create_default_registry,
    define_type,
)


@pytest.fixture
def registry() -> SchemaRegistry:
    return create_default_registry()


class TestDefaultRegistry:
    """Tests for the default component set."""

    @pytest.mark.unit
    def test_all_default_types_registered(self, registry):
        """Every DefaultType has a definition."""
        for dt in DefaultType:
            assert registry.has_type(dt.value), f"Missing definition for {dt}"
        assert len(registry) == len(DEFAULT_TYPE_DEFINITIONS) == 3

    @pytest.mark.unit
    def test_instances_are_independent(self):
        """Registering on one registry does not affect another."""
        first = create_default_registry()
        second = create_default_registry()
        first.register_type(TypeDefinition(type="Text"))
        assert first.has_type("Text")
        assert not second.has_type("Text")

    @pytest.mark.unit
    def test_layout_hints(self, registry):
        assert registry.layout("Row") == Layout.HORIZONTAL
        assert registry.layout("Stack") == Layout.VERTICAL
        assert registry.layout("Button") == Layout.NONE
        assert registry.layout("Bogus") is None

    @pytest.mark.unit
    def test_button_slots(self, registry):
        assert registry.allowed_slots("Button") == (MAIN_SLOT, "icon", "content")

    @pytest.mark.unit
    def test_all_entries_have_descriptions(self, registry):
        for name in registry.list_types():
            assert registry.get_type(name).description, f"{name} missing description"


class TestTypeDefinition:
    """Tests for TypeDefinition dataclass."""

    @pytest.mark.unit
    def test_defaults_describe_a_leaf(self):
        definition = TypeDefinition(type="Text")
        assert definition.can_have_children is False
        assert definition.allowed_slots == ()
        assert definition.max_children is None
        assert definition.layout == Layout.NONE

    @pytest.mark.unit
    def test_inputs_are_frozen(self):
        props = {"text": ""}
        definition = TypeDefinition(
            type="Text", allowed_slots=["a", "b"], default_properties=props
        )
        props["text"] = "changed"
        assert definition.allowed_slots == ("a", "b")
        assert definition.default_properties["text"] == ""
        with pytest.raises(TypeError):
            definition.default_properties["text"] = "x"

    @pytest.mark.unit
    def test_layout_string_coerced(self):
        assert TypeDefinition(type="Grid", layout="vertical").layout is Layout.VERTICAL

    @pytest.mark.unit
    def test_has_named_slots(self, registry):
        assert registry.get_type("Button").has_named_slots
        assert not registry.get_type("Row").has_named_slots

    @pytest.mark.unit
    def test_to_dict(self, registry):
        d = registry.get_type("Button").to_dict()
        assert d["type"] == "Button"
        assert d["layout"] == "none"
        assert d["allowed_slots"] == ["main", "icon", "content"]
        assert d["forbidden_child_types"] == ["Row", "Stack"]
        assert d["default_properties"]["variant"] == "primary"

    @pytest.mark.unit
    def test_define_type_from_default(self):
        definition = define_type("Row", max_children=1)
        assert definition.max_children == 1
        assert definition.layout == Layout.HORIZONTAL
        assert definition.can_have_children is True

    @pytest.mark.unit
    def test_define_type_new(self):
        definition = define_type("Text", default_properties={"text": ""})
        assert definition.type == "Text"
        assert definition.can_have_children is False


class TestLookups:
    """Tests for per-type queries."""

    @pytest.mark.unit
    def test_get_type_unknown(self, registry):
        assert registry.get_type("Bogus") is None
        assert not registry.has_type("Bogus")
        assert "Bogus" not in registry
        assert "Row" in registry

    @pytest.mark.unit
    def test_can_have_children(self, registry):
        assert registry.can_have_children("Row")
        assert registry.can_have_children("Button")
        assert not registry.can_have_children("Bogus")

    @pytest.mark.unit
    def test_allowed_slots_unknown_is_empty(self, registry):
        assert registry.allowed_slots("Bogus") == ()

    @pytest.mark.unit
    def test_max_children(self, registry):
        assert registry.max_children("Row") is None
        assert registry.max_children("Bogus") is None
        registry.register_type(define_type("Pair", can_have_children=True, max_children=2))
        assert registry.max_children("Pair") == 2

    @pytest.mark.unit
    def test_default_properties_are_copies(self, registry):
        props = registry.default_properties("Row")
        props["gap"] = "lg"
        assert registry.default_properties("Row")["gap"] == "md"
        assert registry.default_properties("Bogus") == {}


class TestSlotLegality:
    """Tests for is_slot_allowed, including the "main" looseness."""

    @pytest.mark.unit
    def test_listed_slot_allowed(self, registry):
        assert registry.is_slot_allowed("Button", "icon")

    @pytest.mark.unit
    def test_main_admits_any_name(self, registry):
        """A type that lists "main" accepts arbitrary slot names."""
        assert registry.is_slot_allowed("Row", "anyUnlistedName")
        assert registry.is_slot_allowed("Button", "anyUnlistedName")

    @pytest.mark.unit
    def test_unlisted_slot_rejected_without_main(self, registry):
        registry.register_type(
            TypeDefinition(type="Card", allowed_slots=("header", "body"), can_have_children=True)
        )
        assert registry.is_slot_allowed("Card", "header")
        assert not registry.is_slot_allowed("Card", "footer")

    @pytest.mark.unit
    def test_unknown_type_rejects_slots(self, registry):
        assert not registry.is_slot_allowed("Bogus", "main")


class TestContainment:
    """Tests for can_contain."""

    @pytest.mark.unit
    def test_default_matrix(self, registry):
        assert registry.can_contain("Row", "Button")
        assert registry.can_contain("Stack", "Button")
        assert registry.can_contain("Row", "Stack")
        assert registry.can_contain("Stack", "Row")
        assert registry.can_contain("Button", "Button")
        assert not registry.can_contain("Button", "Row")
        assert not registry.can_contain("Button", "Stack")

    @pytest.mark.unit
    def test_unregistered_types(self, registry):
        assert not registry.can_contain("Bogus", "Button")
        assert not registry.can_contain("Row", "Bogus")

    @pytest.mark.unit
    def test_leaf_parent(self, registry):
        registry.register_type(TypeDefinition(type="Text"))
        assert not registry.can_contain("Text", "Button")
        assert registry.can_contain("Row", "Text")

    @pytest.mark.unit
    def test_zero_ceiling(self, registry):
        registry.register_type(define_type("Sealed", can_have_children=True, max_children=0))
        assert not registry.can_contain("Sealed", "Button")

    @pytest.mark.unit
    def test_ignores_current_count(self, registry):
        """A positive ceiling never blocks containment at the type level."""
        registry.register_type(define_type("Single", can_have_children=True, max_children=1))
        assert registry.can_contain("Single", "Button")


class TestListings:
    """Tests for registry listings."""

    @pytest.mark.unit
    def test_list_types_in_registration_order(self, registry):
        assert registry.list_types() == ["Row", "Stack", "Button"]

    @pytest.mark.unit
    def test_containers_and_leaves(self, registry):
        registry.register_type(TypeDefinition(type="Text"))
        assert registry.container_types() == ["Row", "Stack", "Button"]
        assert registry.leaf_types() == ["Text"]

    @pytest.mark.unit
    def test_to_dict(self, registry):
        exported = registry.to_dict()
        assert set(exported) == {"Row", "Stack", "Button"}
        assert exported["Row"]["layout"] == "horizontal"


class TestRegistration:
    """Tests for adding, replacing and removing definitions."""

    @pytest.mark.unit
    def test_replace_definition(self, registry):
        registry.register_type(define_type("Row", max_children=3))
        assert registry.max_children("Row") == 3
        assert registry.list_types() == ["Row", "Stack", "Button"]

    @pytest.mark.unit
    def test_unregister(self, registry):
        assert registry.unregister_type("Stack") is True
        assert registry.unregister_type("Stack") is False
        assert registry.list_types() == ["Row", "Button"]

    @pytest.mark.unit
    def test_with_types_leaves_original(self, registry):
        derived = registry.with_types(TypeDefinition(type="Text"))
        assert derived.has_type("Text")
        assert derived.has_type("Row")
        assert not registry.has_type("Text")

    @pytest.mark.unit
    def test_registration_is_logged(self, registry, caplog):
        with caplog.at_level(logging.DEBUG, logger="irtree.schema.lib"):
            registry.register_type(TypeDefinition(type="Text"))
            registry.register_type(TypeDefinition(type="Text"))
        messages = [record.getMessage() for record in caplog.records]
        assert "Registering type definition 'Text'" in messages
        assert "Replacing type definition 'Text'" in messages
