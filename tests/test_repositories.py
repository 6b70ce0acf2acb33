"""Repository contract: copies on read and write, for both backends."""

import uuid
from datetime import datetime

import pytest

from app.models import (
    Ashram,
    Asset,
    Assignment,
    Invite,
    InviteStatus,
    Reminder,
    Role,
    User,
)
from app.repositories import (
    InMemoryAshramRepository,
    InMemoryAssetRepository,
    InMemoryAssignmentRepository,
    InMemoryInviteRepository,
    InMemoryUserRepository,
    SqlAshramRepository,
    SqlAssetRepository,
    SqlAssignmentRepository,
    SqlInviteRepository,
    SqlUserRepository,
)


@pytest.fixture(params=["memory", "sql"])
async def repos(request, session):
    if request.param == "memory":
        return {
            "ashrams": InMemoryAshramRepository(),
            "users": InMemoryUserRepository(),
            "assignments": InMemoryAssignmentRepository(),
            "assets": InMemoryAssetRepository(),
            "invites": InMemoryInviteRepository(),
        }
    return {
        "ashrams": SqlAshramRepository(session),
        "users": SqlUserRepository(session),
        "assignments": SqlAssignmentRepository(session),
        "assets": SqlAssetRepository(session),
        "invites": SqlInviteRepository(session),
    }


async def _seed(repos):
    user = await repos["users"].create(
        User(email="seva@ashram.org", display_name="Seva", password_hash="x", roles=[Role.ADMIN])
    )
    ashram = await repos["ashrams"].create(Ashram(name="Yamunotri"))
    asset = await repos["assets"].create(
        Asset(
            ashram_id=ashram.id,
            name="Bolero",
            category="CAR",
            asset_tag="YAMU-CAR-0001",
            purchase_date=datetime(2022, 4, 1),
            attributes={"seats": 7},
            reminders=[Reminder(type="TAX", due_date=datetime(2030, 1, 1))],
            qr_code="e30",
            created_by=user.id,
        )
    )
    return user, ashram, asset


@pytest.mark.asyncio
async def test_round_trip_preserves_sub_entities(repos):
    _, _, asset = await _seed(repos)
    found = await repos["assets"].find_by_id(asset.id)
    assert found == asset
    assert found.reminders[0].type == "TAX"
    assert found.attributes == {"seats": 7}


@pytest.mark.asyncio
async def test_returned_records_are_copies(repos):
    _, _, asset = await _seed(repos)
    asset.name = "Mutated"
    asset.reminders[0].completed = True

    found = await repos["assets"].find_by_id(asset.id)
    assert found.name == "Bolero"
    assert found.reminders[0].completed is False

    found.attributes["seats"] = 2
    assert (await repos["assets"].find_by_id(asset.id)).attributes == {"seats": 7}


@pytest.mark.asyncio
async def test_update_merges_patch(repos):
    user, _, _ = await _seed(repos)
    updated = await repos["users"].update(user.id, {"display_name": "Swami"})
    assert updated.display_name == "Swami"
    assert updated.email == "seva@ashram.org"
    assert updated.updated_at >= user.updated_at
    assert await repos["users"].update(uuid.uuid4(), {"display_name": "x"}) is None


@pytest.mark.asyncio
async def test_find_by_email(repos):
    user, _, _ = await _seed(repos)
    assert (await repos["users"].find_by_email("seva@ashram.org")).id == user.id
    assert await repos["users"].find_by_email("other@ashram.org") is None


@pytest.mark.asyncio
async def test_membership_lists_round_trip(repos):
    user, ashram, _ = await _seed(repos)
    await repos["users"].update(user.id, {"ashram_ids": [ashram.id]})
    await repos["ashrams"].update(ashram.id, {"user_ids": [user.id]})
    assert (await repos["users"].find_by_id(user.id)).ashram_ids == [ashram.id]
    assert (await repos["ashrams"].find_by_id(ashram.id)).user_ids == [user.id]


@pytest.mark.asyncio
async def test_assignment_queries_and_delete(repos):
    user, ashram, _ = await _seed(repos)
    assignment = await repos["assignments"].create(
        Assignment(user_id=user.id, ashram_id=ashram.id, roles=[Role.ASHRAM_USER])
    )
    assert [a.id for a in await repos["assignments"].list_by_user_id(user.id)] == [assignment.id]
    assert [a.id for a in await repos["assignments"].list_by_ashram_id(ashram.id)] == [
        assignment.id
    ]

    await repos["assignments"].delete(assignment.id)
    assert await repos["assignments"].find_by_id(assignment.id) is None


@pytest.mark.asyncio
async def test_asset_delete_is_soft(repos):
    _, ashram, asset = await _seed(repos)
    await repos["assets"].delete(asset.id)

    assert await repos["assets"].list() == []
    assert await repos["assets"].list_by_ashram_id(ashram.id) == []
    hidden = await repos["assets"].find_by_id(asset.id)
    assert hidden.deleted_at is not None


@pytest.mark.asyncio
async def test_pending_invites_by_email(repos):
    user, ashram, _ = await _seed(repos)
    pending = await repos["invites"].create(
        Invite(
            email="later@ashram.org",
            ashram_id=ashram.id,
            roles=["ASHRAM_USER"],
            created_by=user.id,
        )
    )
    done = await repos["invites"].create(
        Invite(email="later@ashram.org", ashram_id=ashram.id, created_by=user.id)
    )
    await repos["invites"].update(done.id, {"status": InviteStatus.FULFILLED})

    found = await repos["invites"].list_pending_by_email("later@ashram.org")
    assert [i.id for i in found] == [pending.id]
    assert found[0].roles == [Role.ASHRAM_USER]
    assert await repos["invites"].list_pending_by_email("other@ashram.org") == []
