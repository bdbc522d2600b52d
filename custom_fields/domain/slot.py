# custom_fields/domain/slot.py
"""
Universo fijo de slots de campos personalizados.

Cada tipo de entidad (Card, Deck, Pack) tiene exactamente 30 slots:
3 tipos de valor (bool, num, str) x 10 índices. Un slot "sin usar" es un estado,
no una ausencia: el universo nunca crece ni se reduce.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class EntityKind(str, Enum):
    """Tipos de entidad que llevan campos personalizados."""
    CARD = "Card"
    DECK = "Deck"
    PACK = "Pack"


class ValueType(str, Enum):
    """Tipos de valor de un slot. El orden de declaración es el orden canónico."""
    BOOL = "bool"
    NUM = "num"
    STR = "str"


SLOT_INDICES = range(1, 11)

_FIELD_NAME_RE = re.compile(r"^custom_(\d+)_(bool|num|str)$")


@dataclass(frozen=True)
class SlotKey:
    kind: EntityKind
    value_type: ValueType
    index: int

    def __post_init__(self) -> None:
        if self.index not in SLOT_INDICES:
            raise ValueError(f"Slot index out of range (1-10): {self.index}")

    @property
    def field_name(self) -> str:
        """Nombre estable del atributo en la entidad (ej: 'custom_3_num')."""
        return f"custom_{self.index}_{self.value_type.value}"

    @property
    def label(self) -> str:
        """Etiqueta corta usada en el selector de activación (ej: 'NUM3')."""
        return f"{self.value_type.value.upper()}{self.index}"

    @classmethod
    def parse(cls, kind: EntityKind, field_name: str) -> "SlotKey":
        """
        Construye un SlotKey a partir de su identificador serializado.

        Raises:
            ValueError: si el identificador no corresponde a ningún slot.
        """
        match = _FIELD_NAME_RE.match(field_name or "")
        if not match:
            raise ValueError(f"Not a custom field name: {field_name!r}")
        return cls(EntityKind(kind), ValueType(match.group(2)), int(match.group(1)))


def is_custom_field_name(name: str) -> bool:
    match = _FIELD_NAME_RE.match(name or "")
    return bool(match) and int(match.group(1)) in SLOT_INDICES


def all_slot_keys(kind: EntityKind) -> Tuple[SlotKey, ...]:
    """
    Retorna los 30 slots del tipo de entidad en orden determinista:
    primero por tipo de valor (bool, num, str) y luego por índice ascendente.
    """
    kind = EntityKind(kind)
    return tuple(
        SlotKey(kind, value_type, index)
        for value_type in ValueType
        for index in SLOT_INDICES
    )
