"""
SwapService tests against the data layer - race and stale-read behavior.
Two sessions on one database stand in for two concurrent requests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ItemUnavailableError, OfferedItemUnavailableError
from app.db.models import FoodStatus, SwapStatus
from app.db.repositories import FoodItemRepository, SwapRepository
from app.schemas.swap import SwapCreate
from app.services.expiry_service import sweep_expired_items

from helpers import food_status, swap_service


@pytest.mark.asyncio
async def test_reserve_is_compare_and_set(session, session_maker, users, make_food):
    item_id = await make_food(users["alice"].id)
    await session.commit()
    now = datetime.now(timezone.utc)

    async with session_maker() as first:
        assert await FoodItemRepository(first).reserve(item_id, now=now) is True
        await first.commit()
    async with session_maker() as second:
        assert await FoodItemRepository(second).reserve(item_id, now=now) is False
        await second.rollback()


@pytest.mark.asyncio
async def test_stale_read_loses_claim(session, session_maker, users, make_food, monkeypatch):
    """B validated the item while it was available, A commits first, B must fail."""
    item_id = await make_food(users["alice"].id)
    await session.commit()

    async with session_maker() as session_a, session_maker() as session_b:
        svc_b = swap_service(session_b)
        snapshot = await svc_b.food_repo.get_by_id(item_id)
        assert snapshot.status == FoodStatus.AVAILABLE

        await swap_service(session_a).request_swap(users["bob"].id, SwapCreate(food_item_id=item_id))
        await session_a.commit()

        async def stale_get_by_id(_id):
            return snapshot

        monkeypatch.setattr(svc_b.food_repo, "get_by_id", stale_get_by_id)
        with pytest.raises(ItemUnavailableError):
            await svc_b.request_swap(users["carol"].id, SwapCreate(food_item_id=item_id))
        await session_b.rollback()

    async with session_maker() as check:
        assert await SwapRepository(check).count_active_for_item(item_id) == 1
        assert await food_status(check, item_id) == FoodStatus.RESERVED


@pytest.mark.asyncio
async def test_expired_but_unswept_item_cannot_be_claimed(session, users, make_food):
    item_id = await make_food(
        users["alice"].id, expires_at=datetime.now(timezone.utc) - timedelta(minutes=5)
    )
    with pytest.raises(ItemUnavailableError):
        await swap_service(session).request_swap(users["bob"].id, SwapCreate(food_item_id=item_id))
    assert await food_status(session, item_id) == FoodStatus.AVAILABLE
    assert await SwapRepository(session).count_active_for_item(item_id) == 0


@pytest.mark.asyncio
async def test_sweep_wins_then_claim_fails(session, users, make_food):
    item_id = await make_food(
        users["alice"].id, expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )
    assert await sweep_expired_items(session) == [item_id]
    with pytest.raises(ItemUnavailableError):
        await swap_service(session).request_swap(users["bob"].id, SwapCreate(food_item_id=item_id))


@pytest.mark.asyncio
async def test_claim_wins_then_sweep_skips(session, users, make_food):
    item_id = await make_food(
        users["alice"].id, expires_at=datetime.now(timezone.utc) + timedelta(seconds=30)
    )
    await swap_service(session).request_swap(users["bob"].id, SwapCreate(food_item_id=item_id))

    later = datetime.now(timezone.utc) + timedelta(minutes=5)
    assert await sweep_expired_items(session, now=later) == []
    assert await food_status(session, item_id) == FoodStatus.RESERVED


@pytest.mark.asyncio
async def test_offered_item_lost_race_releases_primary(session, users, make_food, monkeypatch):
    alice, bob = users["alice"], users["bob"]
    item_id = await make_food(alice.id)
    offered_id = await make_food(bob.id)
    svc = swap_service(session)

    real_reserve = svc.food_repo.reserve

    async def reserve_primary_only(target_id, *, now):
        if target_id == offered_id:
            # Someone else claimed the offered item after validation
            return False
        return await real_reserve(target_id, now=now)

    monkeypatch.setattr(svc.food_repo, "reserve", reserve_primary_only)
    with pytest.raises(OfferedItemUnavailableError):
        await svc.request_swap(bob.id, SwapCreate(food_item_id=item_id, offered_item_id=offered_id))

    assert await food_status(session, item_id) == FoodStatus.AVAILABLE
    assert await SwapRepository(session).count_active_for_item(item_id) == 0


@pytest.mark.asyncio
async def test_offering_the_requested_item_itself_fails(session, users, make_food):
    item_id = await make_food(users["alice"].id)
    with pytest.raises(OfferedItemUnavailableError):
        await swap_service(session).request_swap(
            users["bob"].id, SwapCreate(food_item_id=item_id, offered_item_id=item_id)
        )


@pytest.mark.asyncio
async def test_concurrent_status_change_is_detected(session, session_maker, users, make_food):
    """Provider accepts while the requester cancels from a stale read."""
    alice, bob = users["alice"], users["bob"]
    item_id = await make_food(alice.id)
    swap = await swap_service(session).request_swap(bob.id, SwapCreate(food_item_id=item_id))
    await session.commit()

    async with session_maker() as session_a:
        await swap_service(session_a).set_status(swap.id, alice.id, SwapStatus.ACCEPTED)
        await session_a.commit()

    async with session_maker() as session_b:
        repo = SwapRepository(session_b)
        now = datetime.now(timezone.utc)
        assert not await repo.compare_and_set_status(
            swap.id, expected=SwapStatus.PENDING, new=SwapStatus.CANCELLED, now=now
        )
        await session_b.rollback()

    async with session_maker() as check:
        assert (await SwapRepository(check).get_full(swap.id)).status == SwapStatus.ACCEPTED


@pytest.mark.asyncio
async def test_at_most_one_active_swap_per_item(session, users, make_food):
    alice, bob, carol = users["alice"], users["bob"], users["carol"]
    item_id = await make_food(alice.id)
    svc = swap_service(session)

    first = await svc.request_swap(bob.id, SwapCreate(food_item_id=item_id))
    with pytest.raises(ItemUnavailableError):
        await svc.request_swap(carol.id, SwapCreate(food_item_id=item_id))
    await svc.set_status(first.id, alice.id, SwapStatus.REJECTED)

    second = await svc.request_swap(carol.id, SwapCreate(food_item_id=item_id))
    assert second.status == SwapStatus.PENDING
    assert await SwapRepository(session).count_active_for_item(item_id) == 1
