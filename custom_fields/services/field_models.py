# custom_fields/services/field_models.py
"""
Modelos de datos del motor de campos personalizados.
Define el esquema de ajustes (FieldSetting por slot) y los resultados de
resolución, activación y edición masiva.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from custom_fields.domain.slot import SLOT_INDICES, EntityKind, SlotKey, ValueType


class FieldSetting(BaseModel):
    """
    Ajuste de visualización de un slot. Es esquema, no dato de instancia:
    se comparte entre todas las entidades del mismo tipo.
    """
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(..., alias="displayName", description="Nombre visible del campo")
    is_enabled: bool = Field(False, alias="isEnabled", description="Si el slot está en uso")
    description: Optional[str] = Field(None, description="Descripción o pista del campo")


class SettingPatch(BaseModel):
    """
    Actualización parcial de un FieldSetting.
    Sólo los campos asignados explícitamente forman parte del merge.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    display_name: Optional[str] = Field(None, alias="displayName")
    is_enabled: Optional[bool] = Field(None, alias="isEnabled")
    description: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Retorna sólo las claves presentes en la actualización."""
        return self.model_dump(exclude_unset=True)


def _default_settings(value_type: ValueType) -> Dict[int, FieldSetting]:
    return {
        index: FieldSetting(display_name=f"{value_type.value}_{index}", is_enabled=False)
        for index in SLOT_INDICES
    }


class CustomFieldCategory(BaseModel):
    """Ajustes de los 30 slots de un tipo de entidad (10 por tipo de valor)."""
    model_config = ConfigDict(populate_by_name=True)

    bool_settings: Dict[int, FieldSetting] = Field(
        default_factory=lambda: _default_settings(ValueType.BOOL), alias="bool"
    )
    num_settings: Dict[int, FieldSetting] = Field(
        default_factory=lambda: _default_settings(ValueType.NUM), alias="num"
    )
    str_settings: Dict[int, FieldSetting] = Field(
        default_factory=lambda: _default_settings(ValueType.STR), alias="str"
    )

    def model_post_init(self, __context: Any) -> None:
        # Completa índices faltantes para que el universo siempre esté entero
        for value_type in ValueType:
            settings = self.for_type(value_type)
            for index in SLOT_INDICES:
                if index not in settings:
                    settings[index] = FieldSetting(display_name=f"{value_type.value}_{index}")

    def for_type(self, value_type: ValueType) -> Dict[int, FieldSetting]:
        return getattr(self, f"{ValueType(value_type).value}_settings")

    def get(self, value_type: ValueType, index: int) -> FieldSetting:
        return self.for_type(value_type)[index]


class CustomFieldConfig(BaseModel):
    """Configuración global: un CustomFieldCategory por tipo de entidad."""
    model_config = ConfigDict(populate_by_name=True)

    card: CustomFieldCategory = Field(default_factory=CustomFieldCategory, alias="Card")
    pack: CustomFieldCategory = Field(default_factory=CustomFieldCategory, alias="Pack")
    deck: CustomFieldCategory = Field(default_factory=CustomFieldCategory, alias="Deck")

    def category(self, kind: EntityKind) -> CustomFieldCategory:
        return getattr(self, EntityKind(kind).value.lower())


class ActiveField(BaseModel):
    """Un slot en la lista a renderizar (o en el pool de activación)."""
    kind: EntityKind
    value_type: ValueType
    index: int
    field_name: str
    label: str
    setting: FieldSetting
    value: Any = None
    has_value: bool = False
    can_delete: bool = False

    @property
    def key(self) -> SlotKey:
        return SlotKey(self.kind, self.value_type, self.index)


class FieldResolution(BaseModel):
    active: List[ActiveField] = Field(default_factory=list, description="Slots a mostrar, ordenados")
    available: List[ActiveField] = Field(default_factory=list, description="Slots deshabilitados y vacíos")

    @property
    def active_names(self) -> List[str]:
        return [f.field_name for f in self.active]

    @property
    def available_names(self) -> List[str]:
        return [f.field_name for f in self.available]


class FieldPatch(BaseModel):
    """Efectos de activar un slot: parche de la entidad y parche del ajuste."""
    entity_patch: Dict[str, Any] = Field(default_factory=dict)
    setting_patch: Optional[SettingPatch] = None


class ChangedField(BaseModel):
    key: str
    label: str
    value: Any


class BulkApplyResult(BaseModel):
    """
    Resultado de aplicar una edición masiva.
    status 'noop' indica que no había cambios y no se llamó a la persistencia.
    """
    status: Literal["applied", "noop"]
    updated_ids: List[str] = Field(default_factory=list)
    fields: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return self.status == "noop"
