"""Cross-site views — upcoming reminders and the head-office dashboard."""

import uuid
from datetime import datetime

from fastapi import APIRouter

from app.api.deps import Auth, Service
from app.core.errors import AuthorizationError
from app.services.dashboards import HeadOfficeDashboard, UpcomingReminder

router = APIRouter(tags=["dashboard"])


@router.get("/reminders/upcoming", response_model=list[UpcomingReminder])
async def upcoming_reminders(
    auth: Auth,
    service: Service,
    due_before: datetime | None = None,
    ashram_id: uuid.UUID | None = None,
) -> list[UpcomingReminder]:
    """Open reminders due by ``due_before`` (default: the reminder window)."""
    actor = await service.get_user(auth.user_id)
    if not service.is_elevated(actor):
        if ashram_id is None:
            raise AuthorizationError("ashram_id is required for site users")
        await service.require_site_access(actor, ashram_id)
    cutoff = due_before or service.default_reminder_cutoff()
    return await service.get_upcoming_reminders(due_before=cutoff, ashram_id=ashram_id)


@router.get("/dashboard/head-office", response_model=HeadOfficeDashboard)
async def head_office_dashboard(
    auth: Auth,
    service: Service,
    category: str | None = None,
    status: str | None = None,
    ashram_id: uuid.UUID | None = None,
    search: str | None = None,
    due_before: datetime | None = None,
    include_archived: bool = False,
) -> HeadOfficeDashboard:
    return await service.get_head_office_dashboard(
        requested_by=auth.user_id,
        category=category,
        status=status,
        ashram_id=ashram_id,
        search=search,
        due_before=due_before,
        include_archived=include_archived,
    )
