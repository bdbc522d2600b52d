# custom_fields/domain/entity_fields.py
"""
Campos ordinarios editables en lote por tipo de entidad, con sus etiquetas.

Las etiquetas se muestran como "chips" en la lista de cambios de la edición masiva.
"""
from typing import Dict

from custom_fields.domain.slot import EntityKind, SlotKey, is_custom_field_name

FAVORITE_FIELD = "is_favorite"
FIELD_SETTINGS_FIELD = "field_settings"

_COMMON_LABELS: Dict[str, str] = {
    FAVORITE_FIELD: "Favorite",
    FIELD_SETTINGS_FIELD: "Custom field settings",
}

ENTITY_FIELD_LABELS: Dict[EntityKind, Dict[str, str]] = {
    EntityKind.DECK: {
        "name": "Deck name",
        "number": "Number",
        "deck_type": "Deck type",
        "series": "Series",
        "description": "Description",
        "image_url": "Image URL",
        "image_color": "Image color",
        "tag": "Tags",
    },
    EntityKind.PACK: {
        "name": "Pack name",
        "number": "Number",
        "price": "Price",
        "cards_per_pack": "Cards per pack",
        "pack_type": "Pack type",
        "series": "Series",
        "description": "Description",
        "image_url": "Image URL",
        "image_color": "Image color",
        "card_back_image_url": "Card back URL",
        "card_back_image_color": "Card back color",
        "tag": "Tags",
    },
    EntityKind.CARD: {
        "name": "Card name",
        "number": "Number",
        "rarity": "Rarity",
        "text": "Text",
        "subtext": "Subtext",
        "image_url": "Image URL",
        "image_color": "Image color",
        "tag": "Tags",
    },
}

_TYPE_WORDS = {"bool": "flag", "num": "number", "str": "text"}


def field_label(kind: EntityKind, field_key: str) -> str:
    """
    Etiqueta legible de un campo. Los slots se nombran "Custom <tipo> <n>";
    las claves desconocidas se devuelven tal cual.
    """
    kind = EntityKind(kind)
    if field_key in _COMMON_LABELS:
        return _COMMON_LABELS[field_key]
    if is_custom_field_name(field_key):
        key = SlotKey.parse(kind, field_key)
        return f"Custom {_TYPE_WORDS[key.value_type.value]} {key.index}"
    return ENTITY_FIELD_LABELS[kind].get(field_key, field_key)
