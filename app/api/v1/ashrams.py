"""Ashram endpoints — site creation, membership and per-site views."""

import uuid
from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr

from app.api.deps import Auth, Service
from app.models import Ashram, Asset, Assignment, Invite
from app.services.dashboards import AshramDashboard

router = APIRouter(prefix="/ashrams", tags=["ashrams"])


# ── Schemas ──────────────────────────────────────────────────

class AshramCreate(BaseModel):
    name: str
    location: str | None = None


class AssignmentCreate(BaseModel):
    user_id: uuid.UUID
    roles: list[str]


class InviteCreate(BaseModel):
    email: EmailStr
    roles: list[str]


# ── Routes ───────────────────────────────────────────────────

@router.post("", response_model=Ashram, status_code=status.HTTP_201_CREATED)
async def create_ashram(body: AshramCreate, auth: Auth, service: Service) -> Ashram:
    return await service.create_ashram(
        name=body.name,
        location=body.location,
        created_by=auth.user_id,
    )


@router.get("", response_model=list[Ashram])
async def list_ashrams(auth: Auth, service: Service) -> list[Ashram]:
    """Every ashram for admins / head office, otherwise the caller's own."""
    return await service.list_ashrams(requested_by=auth.user_id)


@router.post(
    "/{ashram_id}/assignments",
    response_model=Assignment,
    status_code=status.HTTP_201_CREATED,
)
async def assign_user(
    ashram_id: uuid.UUID,
    body: AssignmentCreate,
    auth: Auth,
    service: Service,
) -> Assignment:
    return await service.assign_user_to_ashram(
        user_id=body.user_id,
        ashram_id=ashram_id,
        roles=body.roles,
        requested_by=auth.user_id,
    )


@router.post(
    "/{ashram_id}/invites",
    response_model=Assignment | Invite,
    status_code=status.HTTP_201_CREATED,
)
async def assign_by_email(
    ashram_id: uuid.UUID,
    body: InviteCreate,
    auth: Auth,
    service: Service,
) -> Assignment | Invite:
    """Assign by email; unknown emails get a pending invite instead."""
    return await service.assign_user_by_email(
        email=body.email,
        ashram_id=ashram_id,
        roles=body.roles,
        requested_by=auth.user_id,
    )


@router.get("/{ashram_id}/assets", response_model=list[Asset])
async def list_ashram_assets(ashram_id: uuid.UUID, auth: Auth, service: Service) -> list[Asset]:
    actor = await service.get_user(auth.user_id)
    await service.require_site_access(actor, ashram_id)
    return await service.list_assets_by_ashram(ashram_id)


@router.get("/{ashram_id}/dashboard", response_model=AshramDashboard)
async def get_ashram_dashboard(
    ashram_id: uuid.UUID,
    auth: Auth,
    service: Service,
    due_before: datetime | None = None,
    include_archived: bool = False,
) -> AshramDashboard:
    return await service.get_ashram_dashboard(
        ashram_id=ashram_id,
        requested_by=auth.user_id,
        due_before=due_before,
        include_archived=include_archived,
    )
