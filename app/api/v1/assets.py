"""Asset endpoints — lifecycle, reminders, documents and search."""

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, status
from pydantic import AliasChoices, BaseModel, Field

from app.api.deps import Auth, Service
from app.core.errors import AuthorizationError
from app.models import Asset, DocumentCategory

router = APIRouter(prefix="/assets", tags=["assets"])


# ── Schemas ──────────────────────────────────────────────────

class ReminderCreate(BaseModel):
    type: str
    due_date: datetime
    notes: str | None = None
    completed: bool = False


class DocumentCreate(BaseModel):
    name: str
    url: str
    category: str = DocumentCategory.OTHER
    storage_path: str | None = None


class AssetCreate(BaseModel):
    ashram_id: uuid.UUID
    name: str
    category: str
    purchase_date: datetime
    status: str = "ACTIVE"
    owner: str | None = None
    attributes: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("attributes", "metadata")
    )
    reminders: list[ReminderCreate] = Field(default_factory=list)
    documents: list[DocumentCreate] = Field(default_factory=list)


class AssetUpdate(BaseModel):
    name: str | None = None
    category: str | None = None
    purchase_date: datetime | None = None
    status: str | None = None
    owner: str | None = None
    # Dumped as the service's ``metadata`` keyword
    attributes: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("attributes", "metadata"),
        serialization_alias="metadata",
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("", response_model=Asset, status_code=status.HTTP_201_CREATED)
async def add_asset(body: AssetCreate, auth: Auth, service: Service) -> Asset:
    return await service.add_asset(
        ashram_id=body.ashram_id,
        name=body.name,
        category=body.category,
        purchase_date=body.purchase_date,
        status=body.status,
        owner=body.owner,
        metadata=body.attributes,
        reminders=[r.model_dump() for r in body.reminders],
        documents=[d.model_dump() for d in body.documents],
        added_by=auth.user_id,
    )


@router.get("", response_model=list[Asset])
async def query_assets(
    auth: Auth,
    service: Service,
    category: str | None = None,
    status: str | None = None,
    ashram_id: uuid.UUID | None = None,
    search: str | None = None,
    reminder_due_before: datetime | None = None,
) -> list[Asset]:
    """Search assets. Users without an elevated role must name their ashram."""
    actor = await service.get_user(auth.user_id)
    if not service.is_elevated(actor):
        if ashram_id is None:
            raise AuthorizationError("ashram_id is required for site users")
        await service.require_site_access(actor, ashram_id)
    return await service.query_assets(
        category=category,
        status=status,
        ashram_id=ashram_id,
        search=search,
        reminder_due_before=reminder_due_before,
    )


@router.get("/{asset_id}", response_model=Asset)
async def get_asset(asset_id: uuid.UUID, auth: Auth, service: Service) -> Asset:
    asset = await service.get_asset(asset_id)
    actor = await service.get_user(auth.user_id)
    await service.require_site_access(actor, asset.ashram_id)
    return asset


@router.patch("/{asset_id}", response_model=Asset)
async def update_asset(
    asset_id: uuid.UUID,
    body: AssetUpdate,
    auth: Auth,
    service: Service,
) -> Asset:
    return await service.update_asset(
        asset_id=asset_id,
        updated_by=auth.user_id,
        **body.model_dump(exclude_unset=True, by_alias=True),
    )


@router.post("/{asset_id}/reminders", response_model=Asset, status_code=status.HTTP_201_CREATED)
async def add_reminder(
    asset_id: uuid.UUID,
    body: ReminderCreate,
    auth: Auth,
    service: Service,
) -> Asset:
    return await service.add_reminder(
        asset_id=asset_id,
        reminder_type=body.type,
        due_date=body.due_date,
        notes=body.notes,
        added_by=auth.user_id,
    )


@router.post("/{asset_id}/reminders/{reminder_id}/complete", response_model=Asset)
async def complete_reminder(
    asset_id: uuid.UUID,
    reminder_id: uuid.UUID,
    auth: Auth,
    service: Service,
) -> Asset:
    return await service.mark_reminder_complete(
        asset_id=asset_id,
        reminder_id=reminder_id,
        completed_by=auth.user_id,
    )


@router.post("/{asset_id}/documents", response_model=Asset, status_code=status.HTTP_201_CREATED)
async def attach_document(
    asset_id: uuid.UUID,
    body: DocumentCreate,
    auth: Auth,
    service: Service,
) -> Asset:
    return await service.attach_document(
        asset_id=asset_id,
        name=body.name,
        url=body.url,
        category=body.category,
        storage_path=body.storage_path,
        attached_by=auth.user_id,
    )


@router.post("/{asset_id}/archive", response_model=Asset)
async def archive_asset(asset_id: uuid.UUID, auth: Auth, service: Service) -> Asset:
    return await service.archive_asset(asset_id=asset_id, archived_by=auth.user_id)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_asset(
    asset_id: uuid.UUID,
    auth: Auth,
    service: Service,
    retention_days: int | None = None,
) -> None:
    """Purge an archived asset once its retention period has passed."""
    await service.delete_asset_permanently(
        asset_id=asset_id,
        requested_by=auth.user_id,
        retention_days=retention_days,
    )
