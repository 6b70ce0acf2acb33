"""SQL repositories over an async SQLModel session.

Rows never leave this module: every read is converted into a fresh value
object, so callers cannot reach the session's identity map.
"""

import uuid
from typing import Any, Generic, TypeVar

from pydantic_core import to_jsonable_python
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from app.models import Ashram, Asset, Assignment, Invite, InviteStatus, User
from app.models.base import utcnow
from app.models.tables import (
    AshramTable,
    AssetTable,
    AssignmentTable,
    InviteTable,
    UserTable,
)

RecordT = TypeVar("RecordT", bound=SQLModel)


class SqlRepository(Generic[RecordT]):
    record_type: type[RecordT]
    table: type[SQLModel]
    # Columns stored as JSON and therefore written in JSON-compatible form
    json_fields: frozenset[str] = frozenset()

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Conversion ───────────────────────────────────────────

    def _to_record(self, row: SQLModel) -> RecordT:
        return self.record_type.model_validate(row).model_copy(deep=True)

    def _column_value(self, field: str, value: Any) -> Any:
        if field in self.json_fields:
            return to_jsonable_python(value)
        return value

    def _to_row(self, record: RecordT) -> SQLModel:
        values = {
            field: self._column_value(field, getattr(record, field))
            for field in type(record).model_fields
        }
        return self.table(**values)

    # ── Operations ───────────────────────────────────────────

    async def create(self, record: RecordT) -> RecordT:
        row = self._to_row(record)
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_record(row)

    async def update(self, record_id: uuid.UUID, patch: dict[str, Any]) -> RecordT | None:
        row = await self.session.get(self.table, record_id)
        if row is None:
            return None
        for field, value in patch.items():
            setattr(row, field, self._column_value(field, value))
        row.updated_at = utcnow()
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_record(row)

    async def find_by_id(self, record_id: uuid.UUID) -> RecordT | None:
        row = await self.session.get(self.table, record_id)
        return self._to_record(row) if row is not None else None

    async def _select(self, *criteria: Any) -> list[RecordT]:
        stmt = select(self.table).order_by(self.table.created_at.asc())  # type: ignore[attr-defined]
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.session.execute(stmt)
        return [self._to_record(row) for row in result.scalars().all()]

    async def list(self) -> list[RecordT]:
        return await self._select()


class SqlAshramRepository(SqlRepository[Ashram]):
    record_type = Ashram
    table = AshramTable
    json_fields = frozenset({"user_ids"})


class SqlUserRepository(SqlRepository[User]):
    record_type = User
    table = UserTable
    json_fields = frozenset({"roles", "ashram_ids"})

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(UserTable).where(UserTable.email == email))
        row = result.scalar_one_or_none()
        return self._to_record(row) if row is not None else None


class SqlAssignmentRepository(SqlRepository[Assignment]):
    record_type = Assignment
    table = AssignmentTable
    json_fields = frozenset({"roles"})

    async def list_by_user_id(self, user_id: uuid.UUID) -> list[Assignment]:
        return await self._select(AssignmentTable.user_id == user_id)

    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Assignment]:
        return await self._select(AssignmentTable.ashram_id == ashram_id)

    async def delete(self, record_id: uuid.UUID) -> None:
        row = await self.session.get(AssignmentTable, record_id)
        if row is not None:
            await self.session.delete(row)
            await self.session.commit()


class SqlAssetRepository(SqlRepository[Asset]):
    record_type = Asset
    table = AssetTable
    json_fields = frozenset({"attributes", "reminders", "documents"})

    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Asset]:
        return await self._select(
            AssetTable.ashram_id == ashram_id,
            AssetTable.deleted_at.is_(None),  # type: ignore[union-attr]
        )

    async def list(self) -> list[Asset]:
        return await self._select(AssetTable.deleted_at.is_(None))  # type: ignore[union-attr]

    async def delete(self, record_id: uuid.UUID) -> Asset | None:
        return await self.update(record_id, {"deleted_at": utcnow()})


class SqlInviteRepository(SqlRepository[Invite]):
    record_type = Invite
    table = InviteTable
    json_fields = frozenset({"roles"})

    async def list_pending_by_email(self, email: str) -> list[Invite]:
        return await self._select(
            InviteTable.email == email,
            InviteTable.status == InviteStatus.PENDING,
        )
