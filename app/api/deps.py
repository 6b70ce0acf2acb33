"""FastAPI dependencies for the service instance and session resolution."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.repositories.sql import (
    SqlAshramRepository,
    SqlAssetRepository,
    SqlAssignmentRepository,
    SqlInviteRepository,
    SqlUserRepository,
)
from app.services.asset_management import AssetManagementService
from app.services.sessions import UserSession

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_session)]


def get_service(request: Request, session: DbSession) -> AssetManagementService:
    """Build a request-scoped service over the process-wide session/tag state."""
    return AssetManagementService(
        ashrams=SqlAshramRepository(session),
        users=SqlUserRepository(session),
        assignments=SqlAssignmentRepository(session),
        assets=SqlAssetRepository(session),
        invites=SqlInviteRepository(session),
        sessions=request.app.state.sessions,
        tag_counter=request.app.state.tag_counter,
    )


Service = Annotated[AssetManagementService, Depends(get_service)]


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    service: Service,
) -> UserSession:
    """Resolve a bearer session token to its UserSession."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user_session = await service.get_session(credentials.credentials)
    if user_session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )
    return user_session


# Typed shorthand for use in route signatures
Auth = Annotated[UserSession, Depends(get_current_session)]


async def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    service: Service,
) -> UserSession | None:
    """Like ``get_current_session`` but anonymous callers get ``None``."""
    if credentials is None:
        return None
    return await get_current_session(credentials, service)


OptionalAuth = Annotated[UserSession | None, Depends(get_optional_session)]
