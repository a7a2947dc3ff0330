"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from formhistory.presentation.api.v1.endpoints.health import router as health_router
from formhistory.presentation.api.v1.endpoints.form_records import router as form_records_router
from formhistory.presentation.api.v1.endpoints.form_versions import (
    audit_router as form_version_audit_router,
    router as form_versions_router,
)

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(form_records_router)
router.include_router(form_versions_router)
router.include_router(form_version_audit_router)
