# custom_fields/api/routes.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from custom_fields.api.schemas import (
    ActivateRequest,
    BulkApplyRequest,
    BulkChangesResponse,
    BulkEditRequest,
    DeleteValueResponse,
    FreeFieldAddRequest,
    FreeFieldItem,
    FreeFieldsResponse,
    ResolveRequest,
    ResolveResponse,
    SlotRequest,
)
from custom_fields.config.settings import Settings
from custom_fields.domain.errors import GuardRejected, ValidationRejected
from custom_fields.domain.slot import EntityKind, ValueType
from custom_fields.integrations.entity_store import EntityStore, InMemoryEntityStore
from custom_fields.logger import get_logger
from custom_fields.services.bulk_edit import BulkChangeTracker
from custom_fields.services.field_activation import activate_field, delete_field_value
from custom_fields.services.field_models import BulkApplyResult, FieldPatch, FieldSetting, SettingPatch
from custom_fields.services.field_resolver import ActiveFieldResolver
from custom_fields.services.free_fields import FreeCustomFieldList
from custom_fields.services.schema_registry import FieldSchemaRegistry

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/custom-fields", tags=["custom-fields"])

# Esquema compartido por proceso: un único registro para todos los editores
_registry = FieldSchemaRegistry()
_entity_store = InMemoryEntityStore()


def get_registry() -> FieldSchemaRegistry:
    """Dependency injection del registro de esquema compartido."""
    return _registry


def get_entity_store() -> EntityStore:
    """Dependency injection del colaborador de persistencia."""
    return _entity_store


def build_tracker(request: BulkEditRequest) -> BulkChangeTracker:
    """Reconstruye un BulkChangeTracker a partir del registro recibido."""
    settings = Settings()
    tracker = BulkChangeTracker(request.kind, tri_state_keys=settings.default_tri_state_fields)
    for key, value in request.edit_record.items():
        tracker.track(key, value)
    for key, state in request.tri_state.items():
        if key not in tracker.tri_states:
            raise ValueError(f"Unknown tri-state field: {key}")
        tracker.tri_states[key].set(state)
    return tracker


@router.get("/schema/{kind}")
async def get_schema(
    kind: EntityKind,
    registry: FieldSchemaRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    """Retorna los ajustes de los 30 slots del tipo de entidad."""
    return registry.category(kind).model_dump(by_alias=True)


@router.patch("/schema/{kind}/{value_type}/{index}", response_model=FieldSetting)
async def update_setting(
    kind: EntityKind,
    value_type: ValueType,
    index: int,
    patch: SettingPatch,
    registry: FieldSchemaRegistry = Depends(get_registry),
) -> FieldSetting:
    """
    Fusiona una actualización parcial (displayName, isEnabled, description) en el ajuste del slot.
    """
    try:
        return registry.update_setting(kind, value_type, index, patch)
    except ValidationRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ValueError as e:
        logger.error("Validation error in setting update: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(e)}")


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_fields(
    request: ResolveRequest,
    registry: FieldSchemaRegistry = Depends(get_registry),
) -> ResolveResponse:
    """Calcula los slots visibles (ordenados) y el pool de slots activables."""
    resolution = ActiveFieldResolver().resolve(request.kind, registry, request.entity, request.is_read_only)
    return ResolveResponse(active=resolution.active, available=resolution.available)


@router.post("/activate", response_model=FieldPatch)
async def activate(
    request: ActivateRequest,
    registry: FieldSchemaRegistry = Depends(get_registry),
) -> FieldPatch:
    """
    Habilita el slot en el esquema y retorna el valor inicial para la entidad.
    """
    try:
        return activate_field(
            request.kind,
            request.value_type,
            request.index,
            registry=registry,
            entity=request.entity,
        )
    except ValueError as e:
        logger.error("Validation error in activate request: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(e)}")


@router.post("/delete-value", response_model=DeleteValueResponse)
async def delete_value(
    request: SlotRequest,
    registry: FieldSchemaRegistry = Depends(get_registry),
) -> DeleteValueResponse:
    """
    Limpia el valor de un slot deshabilitado. Un slot habilitado se rechaza con 409.
    """
    try:
        patch = delete_field_value(request.kind, request.value_type, request.index, registry)
    except GuardRejected as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except ValueError as e:
        logger.error("Validation error in delete request: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(e)}")
    return DeleteValueResponse(entity_patch=patch)


@router.post("/bulk/changes", response_model=BulkChangesResponse)
async def bulk_changes(request: BulkEditRequest) -> BulkChangesResponse:
    """Lista los campos que cambiarían (chips) y el parche resultante."""
    try:
        tracker = build_tracker(request)
    except ValidationRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(e)}")
    return BulkChangesResponse(
        changed_fields=tracker.changed_fields(),
        fields_to_update=tracker.fields_to_update(),
    )


@router.post("/bulk/apply", response_model=BulkApplyResult)
async def bulk_apply(
    request: BulkApplyRequest,
    store: EntityStore = Depends(get_entity_store),
) -> BulkApplyResult:
    """
    Aplica el mismo parche a todas las entidades seleccionadas.

    Sin campos cambiados retorna status 'noop' sin llamar a la persistencia.
    """
    try:
        tracker = build_tracker(request)
        logger.info("Received bulk apply kind=%s targets=%d", request.kind.value, len(request.target_ids))
        return tracker.apply(
            request.target_ids,
            lambda ids, fields: store.bulk_update(request.kind, ids, fields),
        )
    except KeyError as e:
        logger.warning("Unknown target id in bulk apply: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e.args[0]) if e.args else str(e))
    except ValidationRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid request: {str(e)}")
    except Exception as e:
        logger.error("Unexpected error applying bulk patch: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while applying bulk patch",
        )


@router.post("/free-fields/add", response_model=FreeFieldsResponse)
async def add_free_field(request: FreeFieldAddRequest) -> FreeFieldsResponse:
    """
    Agrega un dato personalizado libre (clave/valor) a la lista de una carta.

    Una clave vacía se ignora; una clave repetida se rechaza con 400.
    """
    fields = FreeCustomFieldList((item.key, item.value) for item in request.items)
    try:
        fields.add(request.key, request.value)
    except ValidationRejected as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return FreeFieldsResponse(
        items=[FreeFieldItem(key=item.key, value=item.value) for item in fields.items],
        custom_data=fields.as_dict(),
    )
