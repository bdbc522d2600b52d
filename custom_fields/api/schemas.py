# custom_fields/api/schemas.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from custom_fields.domain.slot import EntityKind, ValueType
from custom_fields.services.field_models import ActiveField, ChangedField


class SlotRequest(BaseModel):
    kind: EntityKind = Field(..., description="Tipo de entidad: Card, Deck o Pack.")
    value_type: ValueType = Field(..., description="Tipo de valor del slot: bool, num o str.")
    index: int = Field(..., description="Índice del slot (1-10).")


class ResolveRequest(BaseModel):
    kind: EntityKind = Field(..., description="Tipo de entidad a resolver.")
    entity: Dict[str, Any] = Field(default_factory=dict, description="Entidad con sus valores custom_<n>_<tipo>.")
    is_read_only: bool = Field(False, description="True para modo lectura, False para edición.")


class ResolveResponse(BaseModel):
    active: List[ActiveField] = Field(default_factory=list, description="Slots a mostrar, ordenados por nombre.")
    available: List[ActiveField] = Field(default_factory=list, description="Slots que se pueden activar.")


class ActivateRequest(SlotRequest):
    entity: Optional[Dict[str, Any]] = Field(
        None,
        description="Entidad actual; si el slot ya está activo, su valor no se reinicializa.",
    )


class DeleteValueResponse(BaseModel):
    entity_patch: Dict[str, Any] = Field(default_factory=dict, description="Parche a aplicar sobre la entidad.")


class BulkEditRequest(BaseModel):
    kind: EntityKind = Field(..., description="Tipo de las entidades seleccionadas.")
    edit_record: Dict[str, Any] = Field(default_factory=dict, description="Campos tocados y su nuevo valor.")
    tri_state: Dict[str, Optional[bool]] = Field(
        default_factory=dict,
        description="Campos de tres estados; null significa sin cambio.",
    )


class BulkChangesResponse(BaseModel):
    changed_fields: List[ChangedField] = Field(default_factory=list)
    fields_to_update: Dict[str, Any] = Field(default_factory=dict)


class BulkApplyRequest(BulkEditRequest):
    target_ids: List[str] = Field(..., description="Ids de las entidades seleccionadas.")


class FreeFieldItem(BaseModel):
    key: str = Field(..., description="Clave del dato personalizado.")
    value: str = Field("", description="Valor libre.")


class FreeFieldAddRequest(BaseModel):
    items: List[FreeFieldItem] = Field(default_factory=list, description="Datos personalizados actuales de la carta.")
    key: str = Field(..., description="Clave nueva; se recorta y no puede repetirse.")
    value: str = Field("", description="Valor del dato nuevo.")


class FreeFieldsResponse(BaseModel):
    items: List[FreeFieldItem] = Field(default_factory=list)
    custom_data: Dict[str, str] = Field(default_factory=dict, description="Datos como dict clave -> valor.")
