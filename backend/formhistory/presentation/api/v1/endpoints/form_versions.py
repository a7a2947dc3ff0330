"""Form version history endpoints — history, single version, diff, change list, restore."""

from fastapi import APIRouter, Body, Depends, Query

from formhistory.application.schemas import (
    FormRecordResponse,
    FormVersionDetailResponse,
    FormVersionSummaryResponse,
    RestoreVersionRequest,
    VersionComparisonResponse,
)
from formhistory.application.services import FormRecordService, FormVersionService
from formhistory.infrastructure.dependencies import (
    ActorContext,
    get_form_record_service,
    get_form_version_service,
    require_version_access,
)
from formhistory.presentation.api.v1.errors import DOMAIN_ERRORS, http_error

router = APIRouter(prefix="/forms", tags=["Form Versions"])


@router.get("/{form_id}/versions", response_model=list[FormVersionSummaryResponse])
async def get_version_history(
    form_id: str,
    _actor: ActorContext = Depends(require_version_access),
    service: FormVersionService = Depends(get_form_version_service),
) -> list[FormVersionSummaryResponse]:
    """List a form's versions, newest first, without payloads."""
    versions = await service.get_version_history(form_id)
    return [
        FormVersionSummaryResponse.model_validate(v, from_attributes=True) for v in versions
    ]


@router.get("/{form_id}/version/{version_number}", response_model=FormVersionDetailResponse)
async def get_version(
    form_id: str,
    version_number: str,
    _actor: ActorContext = Depends(require_version_access),
    service: FormVersionService = Depends(get_form_version_service),
) -> FormVersionDetailResponse:
    """Retrieve one version with its full payload."""
    try:
        version = await service.get_version(form_id, version_number)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormVersionDetailResponse.model_validate(version, from_attributes=True)


@router.get("/{form_id}/diff", response_model=VersionComparisonResponse)
async def compare_versions(
    form_id: str,
    v1: str | None = Query(None, description="First version number"),
    v2: str | None = Query(None, description="Second version number"),
    _actor: ActorContext = Depends(require_version_access),
    service: FormVersionService = Depends(get_form_version_service),
) -> VersionComparisonResponse:
    """Return both resolved versions; the client renders the structural diff."""
    try:
        comparison = await service.compare_versions(form_id, v1, v2)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return VersionComparisonResponse.model_validate(comparison, from_attributes=True)


@router.get("/{form_id}/changes", response_model=list[FormVersionSummaryResponse])
async def get_change_list(
    form_id: str,
    v1: str | None = Query(None, description="Start version number"),
    v2: str | None = Query(None, description="End version number"),
    _actor: ActorContext = Depends(require_version_access),
    service: FormVersionService = Depends(get_form_version_service),
) -> list[FormVersionSummaryResponse]:
    """List stored versions between v1 and v2 (inclusive), oldest first."""
    try:
        versions = await service.get_change_list(form_id, v1, v2)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return [
        FormVersionSummaryResponse.model_validate(v, from_attributes=True) for v in versions
    ]


@router.post("/{form_id}/restore-version/{version_number}", response_model=FormRecordResponse)
async def restore_version(
    form_id: str,
    version_number: str,
    data: RestoreVersionRequest | None = Body(None),
    actor: ActorContext = Depends(require_version_access),
    service: FormRecordService = Depends(get_form_record_service),
) -> FormRecordResponse:
    """Make a stored version the form's new head; the replaced state is snapshotted."""
    try:
        record = await service.restore_version(
            form_id,
            version_number,
            actor.user_id,
            change_notes=data.change_notes if data else None,
        )
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return FormRecordResponse.model_validate(record, from_attributes=True)


audit_router = APIRouter(prefix="/form-versions", tags=["Form Versions"])


@audit_router.get("/by-actor/{user_id}", response_model=list[FormVersionSummaryResponse])
async def get_versions_by_actor(
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    _actor: ActorContext = Depends(require_version_access),
    service: FormVersionService = Depends(get_form_version_service),
) -> list[FormVersionSummaryResponse]:
    """Audit view: versions written by one user, most recent first."""
    versions = await service.get_versions_by_actor(user_id, skip=skip, limit=limit)
    return [
        FormVersionSummaryResponse.model_validate(v, from_attributes=True) for v in versions
    ]
