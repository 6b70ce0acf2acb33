"""Asset search and upcoming reminder queries."""

from datetime import datetime

import pytest

from app.core.errors import ValidationError
from app.models import AssetCategory


@pytest.fixture
async def fleet(service, admin, ashram, site_user):
    """Three assets at Yamunotri and one at Gangotri."""
    gangotri = await service.create_ashram(name="Gangotri", created_by=admin.id)
    await service.assign_user_to_ashram(
        user_id=site_user.id, ashram_id=gangotri.id, roles=["ASHRAM_USER"], requested_by=admin.id
    )

    async def add(ashram_id, name, category, reminders=()):
        return await service.add_asset(
            ashram_id=ashram_id,
            name=name,
            category=category,
            purchase_date="2021-06-01",
            owner="Kitchen" if category == "ELECTRICAL" else None,
            reminders=list(reminders),
            added_by=site_user.id,
        )

    bolero = await add(
        ashram.id,
        "Bolero",
        "CAR",
        [
            {"type": "INSURANCE", "due_date": "2025-03-10"},
            {"type": "TAX", "due_date": "2025-01-15"},
        ],
    )
    fridge = await add(
        ashram.id, "Fridge", "ELECTRICAL", [{"type": "WARRANTY", "due_date": "2025-03-10"}]
    )
    laptop = await add(ashram.id, "Office laptop", "LAPTOP")
    jeep = await add(
        gangotri.id, "Jeep", "CAR", [{"type": "MAINTENANCE", "due_date": "2025-02-01"}]
    )
    return {
        "gangotri": gangotri,
        "bolero": bolero,
        "fridge": fridge,
        "laptop": laptop,
        "jeep": jeep,
    }


@pytest.mark.asyncio
async def test_list_assets_by_ashram(service, ashram, fleet):
    assets = await service.list_assets_by_ashram(ashram.id)
    assert [a.name for a in assets] == ["Bolero", "Fridge", "Office laptop"]


@pytest.mark.asyncio
async def test_query_without_filters_returns_everything(service, fleet):
    assert len(await service.query_assets()) == 4


@pytest.mark.asyncio
async def test_filters_are_and_combined(service, ashram, fleet):
    cars = await service.query_assets(category="CAR")
    assert {a.name for a in cars} == {"Bolero", "Jeep"}

    site_cars = await service.query_assets(category=AssetCategory.CAR, ashram_id=ashram.id)
    assert [a.name for a in site_cars] == ["Bolero"]


@pytest.mark.asyncio
async def test_search_matches_name_tag_and_owner(service, fleet):
    assert [a.name for a in await service.query_assets(search="  laptop ")] == ["Office laptop"]
    assert [a.name for a in await service.query_assets(search="GANG-CAR")] == ["Jeep"]
    assert [a.name for a in await service.query_assets(search="kitchen")] == ["Fridge"]


@pytest.mark.asyncio
async def test_reminder_due_before_filter(service, fleet):
    due = await service.query_assets(reminder_due_before="2025-02-01")
    assert {a.name for a in due} == {"Bolero", "Jeep"}


@pytest.mark.asyncio
async def test_query_validates_filters(service, fleet):
    with pytest.raises(ValidationError):
        await service.query_assets(category="BOAT")
    with pytest.raises(ValidationError):
        await service.query_assets(reminder_due_before="soon")


@pytest.mark.asyncio
async def test_upcoming_reminders_sorted_and_stable(service, fleet):
    upcoming = await service.get_upcoming_reminders(due_before=datetime(2025, 3, 10))
    assert [(u.asset_name, u.reminder.type) for u in upcoming] == [
        ("Bolero", "TAX"),
        ("Jeep", "MAINTENANCE"),
        ("Bolero", "INSURANCE"),
        ("Fridge", "WARRANTY"),
    ]
    assert upcoming[0].asset_tag == fleet["bolero"].asset_tag


@pytest.mark.asyncio
async def test_upcoming_reminders_scope_and_cutoff(service, ashram, fleet):
    upcoming = await service.get_upcoming_reminders(due_before="2025-02-28", ashram_id=ashram.id)
    assert [u.reminder.type for u in upcoming] == ["TAX"]
    assert upcoming[0].ashram_id == ashram.id


@pytest.mark.asyncio
async def test_completed_reminders_are_skipped(service, site_user, fleet):
    bolero = fleet["bolero"]
    tax = next(r for r in bolero.reminders if r.type == "TAX")
    await service.mark_reminder_complete(
        asset_id=bolero.id, reminder_id=tax.id, completed_by=site_user.id
    )
    upcoming = await service.get_upcoming_reminders(due_before="2025-02-28")
    assert [u.asset_name for u in upcoming] == ["Jeep"]


@pytest.mark.asyncio
async def test_upcoming_requires_cutoff(service, fleet):
    with pytest.raises(ValidationError):
        await service.get_upcoming_reminders(due_before=None)
