# custom_fields/services/schema_registry.py
"""
Registro del esquema de campos personalizados.
Mapea (tipo de entidad, slot) -> FieldSetting y expone un único punto de mutación.
"""
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from custom_fields.domain.errors import ValidationRejected
from custom_fields.domain.slot import EntityKind, SlotKey, ValueType, all_slot_keys
from custom_fields.logger import get_logger
from custom_fields.services.field_models import (
    CustomFieldCategory,
    CustomFieldConfig,
    FieldSetting,
    SettingPatch,
)

logger = get_logger(__name__)

SettingUpdate = Union[SettingPatch, Mapping[str, Any]]


class FieldSchemaRegistry:
    """
    Dueño del CustomFieldConfig compartido por todos los editores.

    El registro nunca habilita ni deshabilita un slot como efecto secundario de un
    cambio de valor: la habilitación siempre es una acción explícita vía update_setting.
    El llamador es responsable de persistir y propagar la configuración resultante.
    """

    def __init__(self, config: Optional[CustomFieldConfig] = None) -> None:
        """
        Args:
            config: Configuración existente. Si es None, se crean los valores por defecto
                (todos los slots deshabilitados, displayName '<tipo>_<n>').
        """
        self.config = config or CustomFieldConfig()

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> "FieldSchemaRegistry":
        """Construye el registro desde un dict serializado (aliases camelCase)."""
        return cls(CustomFieldConfig.model_validate(data))

    def to_config(self) -> Dict[str, Any]:
        """Serializa la configuración para que el llamador la persista."""
        return self.config.model_dump(by_alias=True)

    # ------------------------
    # Lectura
    # ------------------------
    def category(self, kind: EntityKind) -> CustomFieldCategory:
        return self.config.category(kind)

    def get_setting(self, kind: EntityKind, value_type: ValueType, index: int) -> FieldSetting:
        key = SlotKey(EntityKind(kind), ValueType(value_type), index)
        return self.category(key.kind).get(key.value_type, key.index)

    def settings_for(self, kind: EntityKind) -> Dict[SlotKey, FieldSetting]:
        """Retorna el ajuste de cada uno de los 30 slots, en orden del universo."""
        category = self.category(kind)
        return {key: category.get(key.value_type, key.index) for key in all_slot_keys(kind)}

    def enabled_keys(self, kind: EntityKind) -> Tuple[SlotKey, ...]:
        return tuple(key for key, setting in self.settings_for(kind).items() if setting.is_enabled)

    # ------------------------
    # Mutación
    # ------------------------
    def update_setting(
        self,
        kind: EntityKind,
        value_type: ValueType,
        index: int,
        partial: SettingUpdate,
    ) -> FieldSetting:
        """
        Fusiona (shallow merge) la actualización parcial en el ajuste existente.

        Sólo cambian las claves presentes en `partial`; displayName, isEnabled y
        description se actualizan de forma independiente.

        Raises:
            ValidationRejected: si la actualización trae claves desconocidas o valores inválidos.
        """
        key = SlotKey(EntityKind(kind), ValueType(value_type), index)
        changes = self._coerce_changes(partial, key)
        current = self.category(key.kind).get(key.value_type, key.index)

        if not changes:
            logger.debug("Empty setting update for %s %s ignored", key.kind.value, key.field_name)
            return current

        try:
            merged = FieldSetting.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            raise ValidationRejected(f"Invalid setting for {key.field_name}: {e}", key.field_name) from e

        self.category(key.kind).for_type(key.value_type)[key.index] = merged
        logger.info(
            "Updated %s setting %s: %s",
            key.kind.value,
            key.field_name,
            sorted(changes),
        )
        return merged

    def _coerce_changes(self, partial: SettingUpdate, key: SlotKey) -> Dict[str, Any]:
        if isinstance(partial, SettingPatch):
            return partial.changes()
        try:
            return SettingPatch.model_validate(dict(partial)).changes()
        except ValidationError as e:
            logger.warning("Rejected setting update for %s: %s", key.field_name, e)
            raise ValidationRejected(f"Invalid setting update for {key.field_name}", key.field_name) from e


def update_field_setting(
    registry: FieldSchemaRegistry,
    kind: EntityKind,
    value_type: ValueType,
    index: int,
    partial: SettingUpdate,
) -> None:
    """Forma funcional de update_setting; el llamador persiste el registro."""
    registry.update_setting(kind, value_type, index, partial)
