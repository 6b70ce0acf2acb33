"""In-memory repositories, used by tests and local experiments."""

import copy
import uuid
from typing import Any, Generic, TypeVar

from sqlmodel import SQLModel

from app.models import Ashram, Asset, Assignment, Invite, InviteStatus, User
from app.models.base import utcnow

RecordT = TypeVar("RecordT", bound=SQLModel)


class InMemoryRepository(Generic[RecordT]):
    """Dict-backed store that copies on every read and write."""

    record_type: type[RecordT]

    def __init__(self) -> None:
        self.items: dict[uuid.UUID, RecordT] = {}

    async def create(self, record: RecordT) -> RecordT:
        stored = record.model_copy(deep=True)
        self.items[stored.id] = stored
        return stored.model_copy(deep=True)

    async def update(self, record_id: uuid.UUID, patch: dict[str, Any]) -> RecordT | None:
        existing = self.items.get(record_id)
        if existing is None:
            return None
        merged = {**existing.model_dump(), **copy.deepcopy(patch), "updated_at": utcnow()}
        stored = self.record_type.model_validate(merged)
        self.items[record_id] = stored
        return stored.model_copy(deep=True)

    async def find_by_id(self, record_id: uuid.UUID) -> RecordT | None:
        record = self.items.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def list(self) -> list[RecordT]:
        return [r.model_copy(deep=True) for r in self.items.values()]


class InMemoryAshramRepository(InMemoryRepository[Ashram]):
    record_type = Ashram


class InMemoryUserRepository(InMemoryRepository[User]):
    record_type = User

    async def find_by_email(self, email: str) -> User | None:
        for record in self.items.values():
            if record.email == email:
                return record.model_copy(deep=True)
        return None


class InMemoryAssignmentRepository(InMemoryRepository[Assignment]):
    record_type = Assignment

    async def list_by_user_id(self, user_id: uuid.UUID) -> list[Assignment]:
        return [r.model_copy(deep=True) for r in self.items.values() if r.user_id == user_id]

    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Assignment]:
        return [r.model_copy(deep=True) for r in self.items.values() if r.ashram_id == ashram_id]

    async def delete(self, record_id: uuid.UUID) -> None:
        self.items.pop(record_id, None)


class InMemoryAssetRepository(InMemoryRepository[Asset]):
    record_type = Asset

    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Asset]:
        return [
            r.model_copy(deep=True)
            for r in self.items.values()
            if r.ashram_id == ashram_id and r.deleted_at is None
        ]

    async def list(self) -> list[Asset]:
        return [
            r.model_copy(deep=True) for r in self.items.values() if r.deleted_at is None
        ]

    async def delete(self, record_id: uuid.UUID) -> Asset | None:
        existing = self.items.get(record_id)
        if existing is None:
            return None
        existing.deleted_at = utcnow()
        return existing.model_copy(deep=True)


class InMemoryInviteRepository(InMemoryRepository[Invite]):
    record_type = Invite

    async def list_pending_by_email(self, email: str) -> list[Invite]:
        return [
            r.model_copy(deep=True)
            for r in self.items.values()
            if r.email == email and r.status == InviteStatus.PENDING
        ]
