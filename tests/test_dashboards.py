"""Per-ashram and head-office dashboards."""

from datetime import datetime, timedelta

import pytest

from app.core.errors import AuthorizationError
from app.models import AssetCategory
from app.models.base import utcnow
from app.services.dashboards import count_by_category, top_category


async def _add(service, ashram, user, name, category, reminders=()):
    return await service.add_asset(
        ashram_id=ashram.id,
        name=name,
        category=category,
        purchase_date="2020-01-01",
        reminders=list(reminders),
        added_by=user.id,
    )


def test_top_category_tie_uses_enum_order():
    counts = count_by_category([])
    assert top_category(counts) is None
    counts[AssetCategory.LAPTOP] = 2
    counts[AssetCategory.CAR] = 2
    assert top_category(counts) == AssetCategory.CAR


@pytest.mark.asyncio
async def test_ashram_dashboard(service, ashram, site_user):
    soon = utcnow() + timedelta(days=5)
    later = utcnow() + timedelta(days=90)
    await _add(service, ashram, site_user, "Bolero", "CAR", [{"type": "TAX", "due_date": later}])
    await _add(service, ashram, site_user, "Jeep", "CAR", [{"type": "INSURANCE", "due_date": soon}])
    await _add(service, ashram, site_user, "Fan", "ELECTRICAL")

    dashboard = await service.get_ashram_dashboard(ashram_id=ashram.id, requested_by=site_user.id)
    assert dashboard.ashram_name == "Yamunotri"
    assert dashboard.total_assets == 3
    assert dashboard.by_category[AssetCategory.CAR] == 2
    assert dashboard.by_category[AssetCategory.FURNITURE] == 0
    assert dashboard.top_category == AssetCategory.CAR
    # Default window is 30 days
    assert [u.asset_name for u in dashboard.upcoming_reminders] == ["Jeep"]

    wide = await service.get_ashram_dashboard(
        ashram_id=ashram.id, requested_by=site_user.id, due_before=utcnow() + timedelta(days=120)
    )
    assert [u.asset_name for u in wide.upcoming_reminders] == ["Jeep", "Bolero"]


@pytest.mark.asyncio
async def test_ashram_dashboard_excludes_archived(service, admin, ashram, site_user):
    fan = await _add(service, ashram, site_user, "Fan", "ELECTRICAL")
    await _add(service, ashram, site_user, "Chair", "FURNITURE")
    await service.archive_asset(asset_id=fan.id, archived_by=admin.id)

    dashboard = await service.get_ashram_dashboard(ashram_id=ashram.id, requested_by=admin.id)
    assert dashboard.total_assets == 1
    assert dashboard.top_category == AssetCategory.FURNITURE

    everything = await service.get_ashram_dashboard(
        ashram_id=ashram.id, requested_by=admin.id, include_archived=True
    )
    assert everything.total_assets == 2


@pytest.mark.asyncio
async def test_ashram_dashboard_requires_access(service, admin, head_office):
    other = await service.create_ashram(name="Gangotri", created_by=admin.id)
    outsider = await service.register_user(
        email="out@ashram.org",
        password="correct-horse-1",
        display_name="Outsider",
        roles=["ASHRAM_USER"],
    )
    with pytest.raises(AuthorizationError):
        await service.get_ashram_dashboard(ashram_id=other.id, requested_by=outsider.id)

    dashboard = await service.get_ashram_dashboard(ashram_id=other.id, requested_by=head_office.id)
    assert dashboard.total_assets == 0
    assert dashboard.top_category is None


@pytest.mark.asyncio
async def test_head_office_dashboard(service, admin, head_office, ashram, site_user):
    gangotri = await service.create_ashram(name="Gangotri", created_by=admin.id)
    badri = await service.create_ashram(name="Badrinath", created_by=admin.id)
    await service.assign_user_to_ashram(
        user_id=site_user.id, ashram_id=gangotri.id, roles=["ASHRAM_USER"], requested_by=admin.id
    )
    due = datetime(2025, 1, 1)
    await _add(service, ashram, site_user, "Bolero", "CAR", [{"type": "TAX", "due_date": due}])
    await _add(service, gangotri, site_user, "Jeep", "CAR")
    await _add(service, gangotri, site_user, "Desk", "FURNITURE")

    dashboard = await service.get_head_office_dashboard(
        requested_by=head_office.id, due_before="2025-06-01"
    )
    assert dashboard.total_assets == 3
    # Sites without matching assets stay in the breakdown but are not counted
    assert dashboard.total_ashrams == 2
    assert [(s.name, s.asset_count) for s in dashboard.ashram_breakdown] == [
        ("Gangotri", 2),
        ("Yamunotri", 1),
        ("Badrinath", 0),
    ]
    assert dashboard.by_category[AssetCategory.CAR] == 2
    assert [u.asset_name for u in dashboard.upcoming_reminders] == ["Bolero"]
    assert dashboard.include_archived is False
    assert badri.id in {s.ashram_id for s in dashboard.ashram_breakdown}


@pytest.mark.asyncio
async def test_head_office_dashboard_echoes_filters(service, admin, ashram, site_user):
    await _add(service, ashram, site_user, "Bolero", "CAR")
    await _add(service, ashram, site_user, "Fan", "ELECTRICAL")

    dashboard = await service.get_head_office_dashboard(
        requested_by=admin.id, category="CAR", ashram_id=str(ashram.id), search=" bol "
    )
    assert dashboard.total_assets == 1
    assert dashboard.total_ashrams == 1
    assert dashboard.filters.category == AssetCategory.CAR
    assert dashboard.filters.ashram_id == ashram.id
    assert dashboard.filters.search == "bol"


@pytest.mark.asyncio
async def test_head_office_archived_status_filter(service, admin, ashram, site_user):
    fan = await _add(service, ashram, site_user, "Fan", "ELECTRICAL")
    await _add(service, ashram, site_user, "Chair", "FURNITURE")
    await service.archive_asset(asset_id=fan.id, archived_by=admin.id)

    default = await service.get_head_office_dashboard(requested_by=admin.id)
    assert default.total_assets == 1

    archived = await service.get_head_office_dashboard(requested_by=admin.id, status="ARCHIVED")
    assert [s.asset_count for s in archived.ashram_breakdown] == [1]
    assert archived.total_assets == 1


@pytest.mark.asyncio
async def test_site_user_cannot_see_head_office(service, ashram, site_user):
    with pytest.raises(AuthorizationError):
        await service.get_head_office_dashboard(requested_by=site_user.id)


@pytest.mark.asyncio
async def test_head_office_counts_only_sites_with_matches(service, admin, ashram, site_user):
    gangotri = await service.create_ashram(name="Gangotri", created_by=admin.id)
    await service.assign_user_to_ashram(
        user_id=site_user.id, ashram_id=gangotri.id, roles=["ASHRAM_USER"], requested_by=admin.id
    )
    await _add(service, ashram, site_user, "Bolero", "CAR")
    await _add(service, gangotri, site_user, "Desk", "FURNITURE")

    dashboard = await service.get_head_office_dashboard(requested_by=admin.id, category="CAR")
    assert dashboard.total_assets == 1
    assert dashboard.total_ashrams == 1
    assert [(s.name, s.asset_count) for s in dashboard.ashram_breakdown] == [
        ("Yamunotri", 1),
        ("Gangotri", 0),
    ]
