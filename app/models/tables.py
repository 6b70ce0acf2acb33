"""SQL tables backing the SQL repositories.

Lists, maps and sub-entities are stored as JSON columns; the repositories
convert rows to and from the value types in ``app.models``.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class UserTable(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    display_name: str = Field(max_length=255, nullable=False)
    password_hash: str = Field(nullable=False)
    roles: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    ashram_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    last_login_at: datetime | None = Field(default=None, nullable=True)


class AshramTable(TimestampMixin, SQLModel, table=True):
    __tablename__ = "ashrams"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    location: str | None = Field(default=None, max_length=255)
    user_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class AssignmentTable(TimestampMixin, SQLModel, table=True):
    __tablename__ = "assignments"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    ashram_id: uuid.UUID = Field(foreign_key="ashrams.id", nullable=False, index=True)
    roles: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class AssetTable(TimestampMixin, SQLModel, table=True):
    __tablename__ = "assets"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    ashram_id: uuid.UUID = Field(foreign_key="ashrams.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    category: str = Field(max_length=20, nullable=False, index=True)
    asset_tag: str = Field(max_length=32, nullable=False, index=True)
    purchase_date: datetime = Field(nullable=False)
    status: str = Field(max_length=20, nullable=False, index=True)
    owner: str | None = Field(default=None, max_length=255)
    attributes: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    reminders: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    documents: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    qr_code: str = Field(sa_column=Column(Text, nullable=False))
    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False)
    archived_at: datetime | None = Field(default=None, nullable=True)
    deleted_at: datetime | None = Field(default=None, nullable=True, index=True)


class InviteTable(TimestampMixin, SQLModel, table=True):
    __tablename__ = "invites"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, nullable=False, index=True)
    ashram_id: uuid.UUID = Field(foreign_key="ashrams.id", nullable=False)
    roles: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: str = Field(max_length=20, nullable=False, index=True)
    created_by: uuid.UUID = Field(foreign_key="users.id", nullable=False)
    fulfilled_at: datetime | None = Field(default=None, nullable=True)
    fulfilled_by: uuid.UUID | None = Field(default=None, nullable=True)
