"""Storage contracts consumed by the asset service.

Implementations must hand out independent copies: the service mutates
returned records in place before persisting them, so a shared reference
would leak unsaved changes into storage.
"""

import uuid
from typing import Any, Protocol, TypeVar

from app.models import Ashram, Asset, Assignment, Invite, User

T = TypeVar("T")


class Repository(Protocol[T]):
    async def create(self, record: T) -> T: ...

    async def update(self, record_id: uuid.UUID, patch: dict[str, Any]) -> T | None: ...

    async def find_by_id(self, record_id: uuid.UUID) -> T | None: ...

    async def list(self) -> list[T]: ...


class AshramRepository(Repository[Ashram], Protocol):
    pass


class UserRepository(Repository[User], Protocol):
    async def find_by_email(self, email: str) -> User | None: ...


class AssignmentRepository(Repository[Assignment], Protocol):
    async def list_by_user_id(self, user_id: uuid.UUID) -> list[Assignment]: ...

    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Assignment]: ...

    async def delete(self, record_id: uuid.UUID) -> None:
        """Hard delete."""
        ...


class AssetRepository(Repository[Asset], Protocol):
    async def list_by_ashram_id(self, ashram_id: uuid.UUID) -> list[Asset]:
        """Non-deleted assets of one ashram."""
        ...

    async def delete(self, record_id: uuid.UUID) -> Asset | None:
        """Soft delete: stamp ``deleted_at`` and hide from listings."""
        ...


class InviteRepository(Repository[Invite], Protocol):
    async def list_pending_by_email(self, email: str) -> list[Invite]: ...
