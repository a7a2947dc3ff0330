"""FastAPI dependency injection — wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from formhistory.config import get_settings
from formhistory.application.services import FormRecordService, FormVersionService
from formhistory.infrastructure.database.session import get_db_session
from formhistory.infrastructure.database.repositories import (
    SQLAlchemyFormRecordRepository,
    SQLAlchemyFormVersionRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActorContext:
    """Identity of the caller, passed explicitly into every versioning operation.

    Authentication happens upstream; this service trusts the gateway-supplied
    headers.
    """

    user_id: str | None
    roles: frozenset[str] = field(default_factory=frozenset)


async def get_actor_context(
    x_user_id: str | None = Header(None),
    x_user_roles: str | None = Header(None),
) -> ActorContext:
    """Read the actor id and comma-separated roles from request headers."""
    roles = frozenset(
        r.strip().lower() for r in (x_user_roles or "").split(",") if r.strip()
    )
    user_id = (x_user_id or "").strip() or None
    return ActorContext(user_id=user_id, roles=roles)


async def require_version_access(
    actor: ActorContext = Depends(get_actor_context),
) -> ActorContext:
    """Only elevated roles may view, compare or restore version history."""
    allowed = get_settings().version_access_roles
    if not actor.roles.intersection(allowed):
        logger.warning(
            "User %s attempted to access version history without one of roles %s",
            actor.user_id,
            allowed,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied: one of roles {allowed} required",
        )
    return actor


def _build_version_service(session: AsyncSession) -> FormVersionService:
    settings = get_settings()
    return FormVersionService(
        version_repository=SQLAlchemyFormVersionRepository(session),
        record_repository=SQLAlchemyFormRecordRepository(session),
        default_change_note=settings.default_change_note,
    )


async def get_form_version_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[FormVersionService, None]:
    """Provides a FormVersionService with both repositories wired up."""
    yield _build_version_service(session)


async def get_form_record_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[FormRecordService, None]:
    """Provides a FormRecordService sharing the request session with its version service."""
    yield FormRecordService(
        repository=SQLAlchemyFormRecordRepository(session),
        version_service=_build_version_service(session),
    )
