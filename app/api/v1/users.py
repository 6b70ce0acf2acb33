"""User administration — role grants, restricted to admins."""

import uuid

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import Auth, Service
from app.models import ELEVATED_ROLES, UserRead

router = APIRouter(prefix="/users", tags=["users"])


class RoleGrantRequest(BaseModel):
    roles: list[str]


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: uuid.UUID, auth: Auth, service: Service) -> UserRead:
    if user_id != auth.user_id:
        actor = await service.get_user(auth.user_id)
        service.require_any_role(actor, ELEVATED_ROLES)
    return UserRead.model_validate(await service.get_user(user_id))


@router.post("/{user_id}/roles", response_model=UserRead)
async def grant_roles(
    user_id: uuid.UUID,
    body: RoleGrantRequest,
    auth: Auth,
    service: Service,
) -> UserRead:
    user = await service.grant_roles(
        user_id=user_id,
        roles=body.roles,
        requested_by=auth.user_id,
    )
    return UserRead.model_validate(user)
