# tests/test_field_activation.py
"""
Tests de activación de slots y borrado de valores.
"""
import pytest

from custom_fields.domain.errors import GuardRejected
from custom_fields.domain.slot import EntityKind, ValueType
from custom_fields.services.field_activation import (
    activate_available_field,
    activate_field,
    delete_field_value,
)
from custom_fields.services.field_models import FieldSetting
from custom_fields.services.schema_registry import FieldSchemaRegistry


class TestActivateField:
    @pytest.mark.parametrize(
        "value_type,expected",
        [(ValueType.BOOL, True), (ValueType.STR, ""), (ValueType.NUM, None)],
    )
    def test_initial_values(self, value_type, expected):
        """Test: bool se inicializa en True, str en '' y num en None."""
        patch = activate_field(EntityKind.CARD, value_type, 2)

        field_name = f"custom_2_{value_type.value}"
        assert patch.entity_patch == {field_name: expected}
        assert patch.setting_patch.changes() == {"is_enabled": True}

    def test_enables_setting_without_touching_name(self):
        registry = FieldSchemaRegistry()
        registry.update_setting(EntityKind.DECK, ValueType.STR, 5, {"displayName": "Archetype", "description": "Main plan"})

        activate_field(EntityKind.DECK, ValueType.STR, 5, registry=registry)

        setting = registry.get_setting(EntityKind.DECK, ValueType.STR, 5)
        assert setting.is_enabled is True
        assert setting.display_name == "Archetype"
        assert setting.description == "Main plan"

    def test_already_active_slot_is_not_reinitialized(self):
        """Test: Activar un slot ya activo no pisa su valor y el ajuste sigue habilitado."""
        registry = FieldSchemaRegistry()
        activate_field(EntityKind.PACK, ValueType.NUM, 1, registry=registry)

        patch = activate_field(EntityKind.PACK, ValueType.NUM, 1, registry=registry, entity={"custom_1_num": 12})

        assert patch.entity_patch == {}
        assert registry.get_setting(EntityKind.PACK, ValueType.NUM, 1).is_enabled is True

    def test_activate_available_field_by_name(self):
        registry = FieldSchemaRegistry()

        patch = activate_available_field(registry, EntityKind.CARD, {}, "custom_4_bool")

        assert patch.entity_patch == {"custom_4_bool": True}
        assert registry.get_setting(EntityKind.CARD, ValueType.BOOL, 4).is_enabled is True

    def test_activate_unavailable_field_is_noop(self):
        """Test: Un slot deshabilitado con valor heredado no está en el pool."""
        registry = FieldSchemaRegistry()

        patch = activate_available_field(registry, EntityKind.CARD, {"custom_1_str": "legacy"}, "custom_1_str")

        assert patch.entity_patch == {}
        assert patch.setting_patch is None
        assert registry.get_setting(EntityKind.CARD, ValueType.STR, 1).is_enabled is False


class TestDeleteFieldValue:
    @pytest.mark.parametrize(
        "value_type,expected",
        [(ValueType.BOOL, False), (ValueType.STR, ""), (ValueType.NUM, None)],
    )
    def test_clears_disabled_slot(self, value_type, expected):
        registry = FieldSchemaRegistry()

        patch = delete_field_value(EntityKind.DECK, value_type, 8, registry)

        assert patch == {f"custom_8_{value_type.value}": expected}
        assert registry.get_setting(EntityKind.DECK, value_type, 8).is_enabled is False

    def test_enabled_slot_is_guarded(self):
        """Test: Borrar un slot habilitado se rechaza y no produce parche."""
        registry = FieldSchemaRegistry()
        registry.update_setting(EntityKind.CARD, ValueType.STR, 1, {"isEnabled": True})
        entity = {"custom_1_str": "keep me"}

        with pytest.raises(GuardRejected) as exc_info:
            delete_field_value(EntityKind.CARD, ValueType.STR, 1, registry)

        assert exc_info.value.field_name == "custom_1_str"
        assert entity == {"custom_1_str": "keep me"}
        assert registry.get_setting(EntityKind.CARD, ValueType.STR, 1).is_enabled is True

    def test_accepts_plain_setting(self):
        setting = FieldSetting(display_name="Notes", is_enabled=True)
        with pytest.raises(GuardRejected):
            delete_field_value(EntityKind.PACK, ValueType.STR, 2, setting)

        assert delete_field_value(EntityKind.PACK, ValueType.STR, 2, {"displayName": "Notes"}) == {"custom_2_str": ""}
