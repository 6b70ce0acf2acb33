"""Asset filtering and dashboard aggregation.

Everything here is pure: the service loads assets through its
repositories and hands them to these helpers.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from app.models import Ashram, Asset, AssetCategory, AssetStatus, Reminder


@dataclass
class AssetFilters:
    """AND-combined asset filters. ``None`` means "don't filter"."""
    category: AssetCategory | None = None
    status: AssetStatus | None = None
    ashram_id: uuid.UUID | None = None
    search: str | None = None
    reminder_due_before: datetime | None = None

    def matches(self, asset: Asset) -> bool:
        if self.category is not None and asset.category != self.category:
            return False
        if self.status is not None and asset.status != self.status:
            return False
        if self.ashram_id is not None and asset.ashram_id != self.ashram_id:
            return False
        if self.search:
            term = self.search.lower()
            haystacks = (asset.name, asset.asset_tag, asset.owner or "")
            if not any(term in text.lower() for text in haystacks):
                return False
        if self.reminder_due_before is not None and not has_due_reminder(
            asset, self.reminder_due_before
        ):
            return False
        return True


@dataclass
class UpcomingReminder:
    asset_id: uuid.UUID
    asset_name: str
    asset_tag: str
    ashram_id: uuid.UUID
    reminder: Reminder


@dataclass
class AshramSummary:
    ashram_id: uuid.UUID
    name: str
    asset_count: int


@dataclass
class AshramDashboard:
    ashram_id: uuid.UUID
    ashram_name: str
    total_assets: int
    by_category: dict[AssetCategory, int]
    top_category: AssetCategory | None
    upcoming_reminders: list[UpcomingReminder]
    due_before: datetime


@dataclass
class HeadOfficeDashboard:
    total_assets: int
    total_ashrams: int
    by_category: dict[AssetCategory, int]
    ashram_breakdown: list[AshramSummary]
    upcoming_reminders: list[UpcomingReminder]
    due_before: datetime
    include_archived: bool = False
    filters: AssetFilters = field(default_factory=AssetFilters)


def is_due(reminder: Reminder, cutoff: datetime) -> bool:
    return not reminder.completed and reminder.due_date <= cutoff


def has_due_reminder(asset: Asset, cutoff: datetime) -> bool:
    return any(is_due(r, cutoff) for r in asset.reminders)


def collect_upcoming_reminders(
    assets: Iterable[Asset], cutoff: datetime
) -> list[UpcomingReminder]:
    """Flatten open reminders due on or before ``cutoff``, soonest first.

    The sort is stable, so reminders sharing a due date keep the order in
    which their assets were listed.
    """
    upcoming = [
        UpcomingReminder(
            asset_id=asset.id,
            asset_name=asset.name,
            asset_tag=asset.asset_tag,
            ashram_id=asset.ashram_id,
            reminder=reminder,
        )
        for asset in assets
        for reminder in asset.reminders
        if is_due(reminder, cutoff)
    ]
    upcoming.sort(key=lambda item: item.reminder.due_date)
    return upcoming


def count_by_category(assets: Iterable[Asset]) -> dict[AssetCategory, int]:
    counts = {category: 0 for category in AssetCategory}
    for asset in assets:
        counts[asset.category] += 1
    return counts


def top_category(counts: dict[AssetCategory, int]) -> AssetCategory | None:
    # max() keeps the first maximum, i.e. enum order breaks ties
    best = max(AssetCategory, key=lambda category: counts.get(category, 0))
    return best if counts.get(best, 0) > 0 else None


def build_ashram_breakdown(
    ashrams: Iterable[Ashram], assets: Iterable[Asset]
) -> list[AshramSummary]:
    per_ashram: dict[uuid.UUID, int] = {}
    for asset in assets:
        per_ashram[asset.ashram_id] = per_ashram.get(asset.ashram_id, 0) + 1
    summaries = [
        AshramSummary(ashram_id=a.id, name=a.name, asset_count=per_ashram.get(a.id, 0))
        for a in ashrams
    ]
    summaries.sort(key=lambda s: (-s.asset_count, s.name))
    return summaries


def exclude_archived(assets: Iterable[Asset]) -> list[Asset]:
    return [a for a in assets if a.status != AssetStatus.ARCHIVED]
