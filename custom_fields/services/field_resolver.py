# custom_fields/services/field_resolver.py
"""
Resuelve qué slots se muestran para una entidad y en qué orden.
"""
import unicodedata
from typing import Any, List, Mapping, Optional, Tuple

from custom_fields.domain.field_values import has_value, read_value
from custom_fields.domain.slot import EntityKind, SlotKey, all_slot_keys
from custom_fields.logger import get_logger
from custom_fields.services.field_models import (
    ActiveField,
    CustomFieldCategory,
    FieldResolution,
    FieldSetting,
)
from custom_fields.services.schema_registry import FieldSchemaRegistry

logger = get_logger(__name__)


def is_slot_visible(is_enabled: bool, has_value: bool, is_read_only: bool) -> bool:
    """
    Regla de inclusión de un slot.

    - Edición: se muestra si está habilitado o si tiene valor (para poder ver y
      limpiar valores heredados de un slot ya deshabilitado).
    - Lectura: sólo si tiene valor; la habilitación no importa.
    """
    if not is_read_only:
        return bool(is_enabled) or bool(has_value)
    return bool(has_value)


def display_name_sort_key(name: str) -> Tuple[str, str]:
    """Clave de orden por nombre visible, independiente del locale del proceso."""
    normalized = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return stripped.casefold(), name or ""


class ActiveFieldResolver:
    """
    Calcula la lista de slots a renderizar y el pool de slots activables.

    Estrategia:
    1. Para cada slot del universo, leer su ajuste y el valor en la entidad.
    2. Calcular has_value según el tipo del slot.
    3. Aplicar is_slot_visible según el modo (edición / lectura).
    4. Ordenar los incluidos por displayName ascendente.
    5. Pool disponible: slots deshabilitados que no quedaron en la lista activa.
    """

    def resolve(
        self,
        kind: EntityKind,
        settings: Any,
        entity: Any,
        is_read_only: bool,
    ) -> FieldResolution:
        """
        Args:
            kind: Tipo de entidad.
            settings: FieldSchemaRegistry, CustomFieldCategory o dict {SlotKey|field_name: FieldSetting}.
            entity: Entidad (mapping u objeto); los valores ausentes cuentan como vacíos.
            is_read_only: True para modo lectura, False para edición.

        Returns:
            FieldResolution con la lista activa ordenada y la lista disponible.
        """
        kind = EntityKind(kind)
        active: List[ActiveField] = []
        hidden: List[ActiveField] = []

        for key in all_slot_keys(kind):
            setting = self._lookup_setting(kind, settings, key)
            value = read_value(entity, key.field_name)
            value_present = has_value(key.value_type, value)

            field = ActiveField(
                kind=kind,
                value_type=key.value_type,
                index=key.index,
                field_name=key.field_name,
                label=setting.display_name,
                setting=setting,
                value=value,
                has_value=value_present,
                can_delete=not is_read_only and not setting.is_enabled,
            )

            if is_slot_visible(setting.is_enabled, value_present, is_read_only):
                active.append(field)
            else:
                hidden.append(field)

        active.sort(key=lambda f: display_name_sort_key(f.setting.display_name))

        active_names = {f.field_name for f in active}
        available = [
            f.model_copy(update={"label": f.key.label, "can_delete": False})
            for f in hidden
            if not f.setting.is_enabled and f.field_name not in active_names
        ]

        logger.debug(
            "Resolved %s fields (read_only=%s): %d active, %d available",
            kind.value,
            is_read_only,
            len(active),
            len(available),
        )
        return FieldResolution(active=active, available=available)

    def _lookup_setting(self, kind: EntityKind, settings: Any, key: SlotKey) -> FieldSetting:
        if isinstance(settings, FieldSchemaRegistry):
            return settings.get_setting(kind, key.value_type, key.index)
        if isinstance(settings, CustomFieldCategory):
            return settings.get(key.value_type, key.index)
        if isinstance(settings, Mapping):
            setting: Optional[Any] = settings.get(key)
            if setting is None:
                setting = settings.get(key.field_name)
            if setting is not None:
                return setting if isinstance(setting, FieldSetting) else FieldSetting.model_validate(setting)
            # Slot sin ajuste explícito: se usa el valor por defecto
            return FieldSetting(display_name=f"{key.value_type.value}_{key.index}")
        raise TypeError(f"Unsupported settings container: {type(settings).__name__}")


def resolve_active_fields(
    kind: EntityKind,
    settings: Any,
    entity: Any,
    is_read_only: bool,
) -> Tuple[List[ActiveField], List[ActiveField]]:
    """Forma funcional: retorna (lista activa ordenada, lista disponible)."""
    resolution = ActiveFieldResolver().resolve(kind, settings, entity, is_read_only)
    return resolution.active, resolution.available
