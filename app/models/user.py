"""User model — a person who can log in and be assigned to ashrams."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Role(StrEnum):
    ADMIN = "ADMIN"
    ASHRAM_USER = "ASHRAM_USER"
    HEAD_OFFICE = "HEAD_OFFICE"


# Roles allowed to manage sites, assignments and asset disposal
ELEVATED_ROLES: tuple[Role, ...] = (Role.ADMIN, Role.HEAD_OFFICE)


class User(TimestampMixin, SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    email: str = Field(max_length=320)
    display_name: str = Field(max_length=255)
    password_hash: str
    roles: list[Role] = Field(default_factory=list)
    ashram_ids: list[uuid.UUID] = Field(default_factory=list)
    last_login_at: datetime | None = None


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    display_name: str
    roles: list[Role]
    ashram_ids: list[uuid.UUID]
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
