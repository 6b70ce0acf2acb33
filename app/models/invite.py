"""Pending site invitation for an email that has no account yet."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid
from app.models.user import Role


class InviteStatus(StrEnum):
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"


class Invite(TimestampMixin, SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    email: str = Field(max_length=320)
    ashram_id: uuid.UUID
    roles: list[Role] = Field(default_factory=list)
    status: InviteStatus = InviteStatus.PENDING
    created_by: uuid.UUID
    fulfilled_at: datetime | None = None
    fulfilled_by: uuid.UUID | None = None
