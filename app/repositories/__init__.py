"""Repository contracts and their in-memory / SQL implementations."""

from app.repositories.base import (
    AshramRepository,
    AssetRepository,
    AssignmentRepository,
    InviteRepository,
    UserRepository,
)
from app.repositories.memory import (
    InMemoryAshramRepository,
    InMemoryAssetRepository,
    InMemoryAssignmentRepository,
    InMemoryInviteRepository,
    InMemoryUserRepository,
)
from app.repositories.sql import (
    SqlAshramRepository,
    SqlAssetRepository,
    SqlAssignmentRepository,
    SqlInviteRepository,
    SqlUserRepository,
)

__all__ = [
    "AshramRepository",
    "AssetRepository",
    "AssignmentRepository",
    "InviteRepository",
    "InMemoryAshramRepository",
    "InMemoryAssetRepository",
    "InMemoryAssignmentRepository",
    "InMemoryInviteRepository",
    "InMemoryUserRepository",
    "SqlAshramRepository",
    "SqlAssetRepository",
    "SqlAssignmentRepository",
    "SqlInviteRepository",
    "SqlUserRepository",
    "UserRepository",
]
