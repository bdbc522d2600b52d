# custom_fields/domain/field_values.py
"""
Reglas de "vacío" para los valores de los slots y para los cambios de edición masiva.
"""
from typing import Any, Mapping

from custom_fields.domain.slot import SlotKey, ValueType

_EMPTY_VALUES = {
    ValueType.BOOL: False,
    ValueType.STR: "",
    ValueType.NUM: None,
}

# bool se activa en True: False no se distingue de "vacío"
_ACTIVATION_VALUES = {
    ValueType.BOOL: True,
    ValueType.STR: "",
    ValueType.NUM: None,
}


def has_value(value_type: ValueType, value: Any) -> bool:
    """
    Indica si el valor se aparta del "vacío" de su tipo.

    - bool: sólo True cuenta como valor.
    - str: cualquier texto con contenido distinto de espacios.
    - num: cualquier número distinto de 0 (None/ausente = vacío).
    """
    value_type = ValueType(value_type)
    if value_type is ValueType.BOOL:
        return value is True
    if value_type is ValueType.STR:
        return isinstance(value, str) and value.strip() != ""
    if value is None or isinstance(value, bool):
        return False
    return value != 0


def empty_value(value_type: ValueType) -> Any:
    """Valor con el que se limpia un slot (acción de borrado)."""
    return _EMPTY_VALUES[ValueType(value_type)]


def activation_value(value_type: ValueType) -> Any:
    """Valor "presente pero vacío" con el que se inicializa un slot recién activado."""
    return _ACTIVATION_VALUES[ValueType(value_type)]


def read_value(entity: Any, field_name: str) -> Any:
    """Lee un atributo de una entidad (mapping u objeto). Ausente = None."""
    if entity is None:
        return None
    if isinstance(entity, Mapping):
        return entity.get(field_name)
    return getattr(entity, field_name, None)


def slot_has_value(key: SlotKey, entity: Any) -> bool:
    return has_value(key.value_type, read_value(entity, key.field_name))


def is_empty_change(value: Any) -> bool:
    """
    Regla de edición masiva: None, '' y colecciones vacías significan "sin cambio".
    False y 0 sí son cambios intencionales.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False
