# custom_fields/integrations/entity_store.py
"""
Colaborador de persistencia de entidades (Card, Deck, Pack).

El motor sólo entrega parches; cómo se guardan las entidades es responsabilidad
de la implementación concreta. InMemoryEntityStore sirve a la API y a los tests.
"""
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from custom_fields.domain.slot import EntityKind
from custom_fields.logger import get_logger

logger = get_logger(__name__)


class EntityStore(Protocol):
    def get(self, kind: EntityKind, entity_id: str) -> Optional[Dict[str, Any]]:
        ...

    def bulk_update(self, kind: EntityKind, entity_ids: Sequence[str], fields: Mapping[str, Any]) -> int:
        ...


class InMemoryEntityStore:
    """Almacén en memoria: {kind: {id: entidad}}."""

    def __init__(self, entities: Optional[Mapping[EntityKind, Mapping[str, Mapping[str, Any]]]] = None) -> None:
        self._entities: Dict[EntityKind, Dict[str, Dict[str, Any]]] = {kind: {} for kind in EntityKind}
        for kind, items in (entities or {}).items():
            for entity_id, entity in items.items():
                self.save(EntityKind(kind), entity_id, entity)

    def save(self, kind: EntityKind, entity_id: str, entity: Mapping[str, Any]) -> None:
        self._entities[EntityKind(kind)][entity_id] = dict(entity)

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Dict[str, Any]]:
        entity = self._entities[EntityKind(kind)].get(entity_id)
        return deepcopy(entity) if entity is not None else None

    def ids(self, kind: EntityKind) -> List[str]:
        return list(self._entities[EntityKind(kind)])

    def bulk_update(self, kind: EntityKind, entity_ids: Sequence[str], fields: Mapping[str, Any]) -> int:
        """
        Hace un merge superficial del mismo parche en cada entidad.

        Raises:
            KeyError: si algún id no existe (antes de modificar nada).
        """
        bucket = self._entities[EntityKind(kind)]
        missing = [entity_id for entity_id in entity_ids if entity_id not in bucket]
        if missing:
            raise KeyError(f"Unknown {EntityKind(kind).value} id(s): {missing}")

        for entity_id in entity_ids:
            bucket[entity_id].update(deepcopy(dict(fields)))
        logger.info("Updated %d %s record(s)", len(entity_ids), EntityKind(kind).value)
        return len(entity_ids)
