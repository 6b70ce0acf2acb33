"""Ashram (site) and user-to-ashram assignment models."""

import uuid

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid
from app.models.user import Role


class Ashram(TimestampMixin, SQLModel):
    id: uuid.UUID = Field(default_factory=new_uuid)
    name: str = Field(max_length=255)
    location: str | None = Field(default=None, max_length=255)
    user_ids: list[uuid.UUID] = Field(default_factory=list)


class Assignment(TimestampMixin, SQLModel):
    """One assignment event linking a user to an ashram with a role set.

    Membership lists on User/Ashram are de-duplicated; assignment records
    are not, so repeated grants stay visible as an audit trail.
    """

    id: uuid.UUID = Field(default_factory=new_uuid)
    user_id: uuid.UUID
    ashram_id: uuid.UUID
    roles: list[Role] = Field(default_factory=list)
