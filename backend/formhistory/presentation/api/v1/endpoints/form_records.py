"""Form record endpoints — create, read, update, soft delete."""

from fastapi import APIRouter, Body, Depends, Query, status

from formhistory.application.schemas import (
    FormRecordCreate,
    FormRecordResponse,
    FormRecordSoftDelete,
    FormRecordUpdate,
)
from formhistory.application.services import FormRecordService
from formhistory.infrastructure.dependencies import ActorContext, get_actor_context, get_form_record_service
from formhistory.presentation.api.v1.errors import DOMAIN_ERRORS, http_error

router = APIRouter(prefix="/forms", tags=["Forms"])


@router.get("", response_model=list[FormRecordResponse])
async def list_records(
    include_deleted: bool = Query(False, description="Include soft-deleted forms"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: FormRecordService = Depends(get_form_record_service),
) -> list[FormRecordResponse]:
    """Retrieve a paginated list of forms."""
    records = await service.list_records(
        include_deleted=include_deleted, skip=skip, limit=limit
    )
    return [FormRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/deleted", response_model=list[FormRecordResponse])
async def list_deleted_records(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: FormRecordService = Depends(get_form_record_service),
) -> list[FormRecordResponse]:
    """Retrieve soft-deleted forms only."""
    records = await service.list_deleted_records(skip=skip, limit=limit)
    return [FormRecordResponse.model_validate(r, from_attributes=True) for r in records]


@router.get("/{form_id}", response_model=FormRecordResponse)
async def get_record(
    form_id: str,
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Retrieve a single form by ID."""
    try:
        record = await service.get_record(form_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormRecordResponse.model_validate(record, from_attributes=True)


@router.post("", response_model=FormRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: FormRecordCreate,
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Create a new form at version 1."""
    record = await service.create_record(data)
    return FormRecordResponse.model_validate(record, from_attributes=True)


@router.put("/{form_id}", response_model=FormRecordResponse)
async def update_record(
    form_id: str,
    data: FormRecordUpdate,
    actor: ActorContext = Depends(get_actor_context),
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Update a form; a changed payload is versioned."""
    try:
        record = await service.update_record(form_id, data, actor.user_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormRecordResponse.model_validate(record, from_attributes=True)


@router.post("/{form_id}/soft-delete", response_model=FormRecordResponse)
async def soft_delete_record(
    form_id: str,
    data: FormRecordSoftDelete | None = Body(None),
    actor: ActorContext = Depends(get_actor_context),
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Mark a form as deleted. Its version history is kept."""
    try:
        record = await service.soft_delete_record(
            form_id, actor.user_id, data.deletion_reason if data else None
        )
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormRecordResponse.model_validate(record, from_attributes=True)


@router.post("/{form_id}/undelete", response_model=FormRecordResponse)
async def undelete_record(
    form_id: str,
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Clear the soft-delete flag of a form."""
    try:
        record = await service.undelete_record(form_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormRecordResponse.model_validate(record, from_attributes=True)
