"""Domain value types shared by the service, repositories and API."""

from app.models.ashram import Ashram, Assignment
from app.models.asset import (
    Asset,
    AssetCategory,
    AssetDocument,
    AssetStatus,
    DocumentCategory,
    Reminder,
    ReminderType,
)
from app.models.invite import Invite, InviteStatus
from app.models.user import ELEVATED_ROLES, Role, User, UserRead

__all__ = [
    "ELEVATED_ROLES",
    "Ashram",
    "Asset",
    "AssetCategory",
    "AssetDocument",
    "AssetStatus",
    "Assignment",
    "DocumentCategory",
    "Invite",
    "InviteStatus",
    "Reminder",
    "ReminderType",
    "Role",
    "User",
    "UserRead",
]
