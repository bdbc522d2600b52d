# custom_fields/services/bulk_edit.py
"""
Seguimiento de cambios para la edición masiva de entidades.

El registro de edición es un dict disperso: la presencia de una clave significa
"el usuario tocó este campo". Una clave ausente nunca se aplica a las entidades
seleccionadas, lo que distingue "sin cambio" de "cambiar a vacío/falso".
"""
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from custom_fields.domain.entity_fields import FIELD_SETTINGS_FIELD, field_label
from custom_fields.domain.errors import ValidationRejected
from custom_fields.domain.field_values import is_empty_change
from custom_fields.domain.slot import EntityKind, SlotKey, ValueType
from custom_fields.logger import get_logger
from custom_fields.services.field_models import BulkApplyResult, ChangedField, SettingPatch

logger = get_logger(__name__)

PersistHook = Callable[[List[str], Dict[str, Any]], Any]


class TriStateField:
    """
    Campo booleano con tres estados en edición masiva:
    None = sin cambio, True = poner en true, False = poner en false.
    """

    def __init__(self, key: str, label: Optional[str] = None) -> None:
        self.key = key
        self.label = label or key
        self.state: Optional[bool] = None

    def cycle(self) -> Optional[bool]:
        """Ciclo del botón: None -> True -> False -> True -> ..."""
        self.state = True if self.state is None else not self.state
        return self.state

    def set(self, value: Optional[bool]) -> None:
        """
        Raises:
            ValidationRejected: si el valor no es None, True ni False.
        """
        if value is not None and not isinstance(value, bool):
            raise ValidationRejected(f"Invalid value for {self.key}: {value!r} (expected true, false or null)", self.key)
        self.state = value

    def reset(self) -> None:
        self.state = None

    @property
    def is_changed(self) -> bool:
        return self.state is not None


class BulkChangeTracker:
    """
    Acumula un registro de edición parcial para N entidades de un mismo tipo
    y deriva el parche mínimo que se aplica, idéntico, a todas ellas.
    """

    def __init__(self, kind: EntityKind, tri_state_keys: Iterable[str] = ("is_favorite",)) -> None:
        self.kind = EntityKind(kind)
        self.edit_record: Dict[str, Any] = {}
        self.tri_states: Dict[str, TriStateField] = {
            key: TriStateField(key, field_label(self.kind, key)) for key in tri_state_keys
        }

    # ------------------------
    # Edición
    # ------------------------
    def track(self, field_key: str, value: Any) -> Dict[str, Any]:
        """
        Registra el valor de un campo tocado (incluidos valores falsy).

        Returns:
            Copia del registro de edición actualizado.
        """
        if field_key in self.tri_states:
            self.tri_states[field_key].set(value)
        else:
            self.edit_record[field_key] = value
        logger.debug("Tracked bulk edit %s=%r", field_key, value)
        return dict(self.edit_record)

    def toggle(self, field_key: str) -> Optional[bool]:
        """Avanza el ciclo de un campo de tres estados."""
        return self.tri_states[field_key].cycle()

    def update_setting(self, value_type: ValueType, index: int, partial: Any) -> Dict[str, Any]:
        """
        Registra un cambio de ajuste de campo personalizado dentro del registro
        (clave 'field_settings'), fusionándolo con cambios previos del mismo slot.
        """
        key = SlotKey(self.kind, ValueType(value_type), index)
        changes = partial.changes() if isinstance(partial, SettingPatch) else SettingPatch.model_validate(dict(partial)).changes()

        pending = dict(self.edit_record.get(FIELD_SETTINGS_FIELD) or {})
        slot_id = f"{key.value_type.value}_{key.index}"
        pending[slot_id] = {**pending.get(slot_id, {}), **changes}
        self.edit_record[FIELD_SETTINGS_FIELD] = pending
        return dict(self.edit_record)

    def remove(self, field_key: str) -> None:
        """Quita un chip: borra la clave del registro (tres estados: vuelve a None)."""
        if field_key in self.tri_states:
            self.tri_states[field_key].reset()
            return
        self.edit_record.pop(field_key, None)

    def reset(self) -> None:
        self.edit_record = {}
        for tri_state in self.tri_states.values():
            tri_state.reset()

    # ------------------------
    # Derivación
    # ------------------------
    def changed_fields(self) -> List[ChangedField]:
        return compute_changed_fields(self.edit_record, self.tri_states.values(), kind=self.kind)

    def fields_to_update(self) -> Dict[str, Any]:
        return {field.key: field.value for field in self.changed_fields()}

    def apply(self, target_ids: Sequence[str], persist: PersistHook) -> BulkApplyResult:
        """
        Aplica el mismo parche a todas las entidades seleccionadas vía `persist`.

        Si no hay campos cambiados es un no-op: no se llama a la persistencia.
        Tras un no-op o un guardado exitoso el editor se cierra (el registro se
        reinicia); si `persist` falla, el registro se conserva para reintentar.
        """
        result = apply_bulk_patch(self.fields_to_update(), target_ids, persist)
        self.reset()
        return result


def track_bulk_edit(edit_record: Mapping[str, Any], field_key: str, value: Any) -> Dict[str, Any]:
    """Forma funcional: retorna un nuevo registro con el campo tocado."""
    updated = dict(edit_record)
    updated[field_key] = value
    return updated


def compute_changed_fields(
    edit_record: Mapping[str, Any],
    tri_state_extras: Iterable[TriStateField] = (),
    kind: Optional[EntityKind] = None,
) -> List[ChangedField]:
    """
    Lista de cambios visibles como chips.

    Incluye las entradas del registro cuyo valor no es un "vacío"
    (None, '', colección vacía) y los campos de tres estados distintos de None.
    Las claves de tres estados sólo cuentan a través de su TriStateField.
    """
    tri_states = list(tri_state_extras)
    tri_state_keys = {tri_state.key for tri_state in tri_states}

    fields: List[ChangedField] = []
    for key, value in edit_record.items():
        if key in tri_state_keys or is_empty_change(value):
            continue
        label = field_label(kind, key) if kind is not None else key
        fields.append(ChangedField(key=key, label=label, value=value))

    for tri_state in tri_states:
        if tri_state.is_changed:
            fields.append(ChangedField(key=tri_state.key, label=tri_state.label, value=tri_state.state))
    return fields


def apply_bulk_patch(
    fields_to_update: Mapping[str, Any],
    target_ids: Sequence[str],
    persist: PersistHook,
) -> BulkApplyResult:
    """
    Delega en el colaborador de persistencia un único parche para todos los ids.
    El motor no garantiza atomicidad entre entidades ni reintenta fallos:
    las excepciones de `persist` se propagan al llamador.
    """
    fields = dict(fields_to_update)
    ids = list(target_ids)

    if not fields:
        logger.warning("No fields to update; bulk edit of %d item(s) closed without saving", len(ids))
        return BulkApplyResult(status="noop")

    logger.info("Applying bulk patch %s to %d item(s)", sorted(fields), len(ids))
    persist(ids, fields)
    return BulkApplyResult(status="applied", updated_ids=ids, fields=fields)
