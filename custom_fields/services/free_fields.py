# custom_fields/services/free_fields.py
"""
Datos personalizados libres (clave/valor) de una carta, fuera del esquema de slots.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from custom_fields.domain.errors import ValidationRejected
from custom_fields.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FreeCustomField:
    key: str
    value: str = ""


class FreeCustomFieldList:
    """Lista ordenada de pares clave/valor con claves únicas."""

    def __init__(self, items: Optional[Iterable[Tuple[str, str]]] = None) -> None:
        self.items: List[FreeCustomField] = [FreeCustomField(k, v) for k, v in (items or [])]

    def add(self, key: str, value: str = "") -> Optional[FreeCustomField]:
        """
        Agrega un campo nuevo.

        La clave se recorta; una clave vacía se ignora (retorna None).

        Raises:
            ValidationRejected: si la clave ya existe. No se modifica la lista.
        """
        trimmed = (key or "").strip()
        if not trimmed:
            return None
        if any(item.key == trimmed for item in self.items):
            logger.warning("Rejected duplicate custom key %r", trimmed)
            raise ValidationRejected("That key is already in use.", trimmed)

        field = FreeCustomField(trimmed, value)
        self.items.append(field)
        return field

    def change(self, index: int, part: str, text: str) -> None:
        if part not in ("key", "value"):
            raise ValueError(f"Unknown part: {part!r}")
        setattr(self.items[index], part, text)

    def remove(self, key: str) -> None:
        self.items = [item for item in self.items if item.key != key]

    def as_dict(self) -> Dict[str, str]:
        return {item.key: item.value for item in self.items}
