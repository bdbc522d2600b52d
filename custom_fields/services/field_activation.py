# custom_fields/services/field_activation.py
"""
Activación de slots sin usar y borrado de valores de slots deshabilitados.
"""
from typing import Any, Dict, Optional

from custom_fields.domain.errors import GuardRejected
from custom_fields.domain.field_values import activation_value, empty_value, slot_has_value
from custom_fields.domain.slot import EntityKind, SlotKey, ValueType
from custom_fields.logger import get_logger
from custom_fields.services.field_models import FieldPatch, FieldSetting, SettingPatch
from custom_fields.services.field_resolver import ActiveFieldResolver
from custom_fields.services.schema_registry import FieldSchemaRegistry

logger = get_logger(__name__)


def activate_field(
    kind: EntityKind,
    value_type: ValueType,
    index: int,
    registry: Optional[FieldSchemaRegistry] = None,
    entity: Optional[Any] = None,
) -> FieldPatch:
    """
    Pasa un slot del pool disponible a uso activo.

    Efectos (ambos necesarios):
    a. Inicializa el valor de la entidad: bool -> True, str -> '', num -> None.
    b. Habilita el slot en el esquema ({isEnabled: True}), sin tocar displayName/description.

    Args:
        registry: Si se pasa, el parche de ajuste se aplica sobre él.
        entity: Si se pasa y el slot ya está activo (habilitado o con valor),
            el valor no se reinicializa.

    Returns:
        FieldPatch con el parche de la entidad y el parche del ajuste.
    """
    key = SlotKey(EntityKind(kind), ValueType(value_type), index)
    setting_patch = SettingPatch(is_enabled=True)

    already_active = False
    if entity is not None:
        already_enabled = registry is not None and registry.get_setting(key.kind, key.value_type, key.index).is_enabled
        already_active = already_enabled or slot_has_value(key, entity)

    entity_patch: Dict[str, Any] = {}
    if already_active:
        logger.info("Slot %s on %s already active; value left untouched", key.field_name, key.kind.value)
    else:
        entity_patch[key.field_name] = activation_value(key.value_type)

    if registry is not None:
        registry.update_setting(key.kind, key.value_type, key.index, setting_patch)

    logger.info("Activated %s slot %s", key.kind.value, key.field_name)
    return FieldPatch(entity_patch=entity_patch, setting_patch=setting_patch)


def activate_available_field(
    registry: FieldSchemaRegistry,
    kind: EntityKind,
    entity: Any,
    field_name: str,
) -> FieldPatch:
    """
    Activa un slot elegido por nombre desde el selector "habilitar campo sin usar".
    Si el slot no está en el pool disponible, es un no-op.
    """
    resolution = ActiveFieldResolver().resolve(kind, registry, entity, is_read_only=False)
    if field_name not in resolution.available_names:
        logger.info("Slot %s is not available for activation on %s; ignoring", field_name, kind)
        return FieldPatch()
    key = SlotKey.parse(EntityKind(kind), field_name)
    return activate_field(key.kind, key.value_type, key.index, registry=registry, entity=entity)


def delete_field_value(
    kind: EntityKind,
    value_type: ValueType,
    index: int,
    settings: Any,
) -> Dict[str, Any]:
    """
    Limpia el valor de un slot en una entidad: bool -> False, str -> '', num -> None.

    El borrado es para descartar datos heredados de slots deshabilitados; un slot
    habilitado sólo se vacía editándolo directamente. No modifica isEnabled.

    Args:
        settings: FieldSchemaRegistry o el FieldSetting del slot.

    Raises:
        GuardRejected: si el slot está habilitado en el esquema.
    """
    key = SlotKey(EntityKind(kind), ValueType(value_type), index)
    if isinstance(settings, FieldSchemaRegistry):
        setting = settings.get_setting(key.kind, key.value_type, key.index)
    else:
        setting = settings if isinstance(settings, FieldSetting) else FieldSetting.model_validate(settings)

    if setting.is_enabled:
        logger.warning("Refused to delete value of enabled slot %s on %s", key.field_name, key.kind.value)
        raise GuardRejected(
            "This field is enabled in the settings and cannot be deleted. Disable it in the settings first.",
            key.field_name,
        )

    logger.info("Cleared value of %s slot %s", key.kind.value, key.field_name)
    return {key.field_name: empty_value(key.value_type)}
