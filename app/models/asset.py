"""Asset model with its reminder and document sub-entities."""

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid, utcnow


class AssetCategory(StrEnum):
    CAR = "CAR"
    ELECTRICAL = "ELECTRICAL"
    LAPTOP = "LAPTOP"
    FURNITURE = "FURNITURE"
    OTHER = "OTHER"


class AssetStatus(StrEnum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    SOLD = "SOLD"


class ReminderType(StrEnum):
    INSURANCE = "INSURANCE"
    TAX = "TAX"
    MAINTENANCE = "MAINTENANCE"
    WARRANTY = "WARRANTY"
    CUSTOM = "CUSTOM"


class DocumentCategory(StrEnum):
    INVOICE = "INVOICE"
    WARRANTY = "WARRANTY"
    RC = "RC"
    INSURANCE = "INSURANCE"
    PHOTO = "PHOTO"
    OTHER = "OTHER"


class Reminder(SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    type: ReminderType
    due_date: datetime
    notes: str | None = None
    completed: bool = False
    completed_at: datetime | None = None


class AssetDocument(SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    name: str
    url: str
    category: DocumentCategory
    # Object key when the file lives in managed storage rather than at `url`
    storage_path: str | None = None
    uploaded_at: datetime = Field(default_factory=utcnow)


class Asset(TimestampMixin, SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    ashram_id: uuid.UUID
    name: str = Field(max_length=255)
    category: AssetCategory
    asset_tag: str = Field(max_length=32)
    purchase_date: datetime
    status: AssetStatus = AssetStatus.ACTIVE
    owner: str | None = None

    # Free-form details, e.g. {"registration": "UK07AB1234"}
    attributes: dict[str, Any] = Field(default_factory=dict)

    reminders: list[Reminder] = Field(default_factory=list)
    documents: list[AssetDocument] = Field(default_factory=list)
    qr_code: str
    created_by: uuid.UUID
    archived_at: datetime | None = None
    deleted_at: datetime | None = None
