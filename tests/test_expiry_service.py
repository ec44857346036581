"""
Expiry sweep tests - only available, overdue listings are demoted.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.config import get_settings
from app.db.models import FoodStatus
from app.queue import tasks
from app.queue.celery_app import celery_app
from app.services.expiry_service import sweep_expired_items

from helpers import food_status


@pytest.mark.asyncio
async def test_sweep_demotes_only_available_past_items(session, users, make_food):
    owner = users["alice"].id
    now = datetime.now(timezone.utc)
    overdue = await make_food(owner, expires_at=now - timedelta(hours=1))
    due_now = await make_food(owner, expires_at=now)
    fresh = await make_food(owner, expires_at=now + timedelta(hours=1))
    reserved = await make_food(owner, expires_at=now - timedelta(hours=1), status=FoodStatus.RESERVED)
    completed = await make_food(owner, expires_at=now - timedelta(hours=1), status=FoodStatus.COMPLETED)

    expired_ids = await sweep_expired_items(session, now=now)

    assert sorted(expired_ids) == sorted([overdue, due_now])
    assert await food_status(session, overdue) == FoodStatus.EXPIRED
    assert await food_status(session, due_now) == FoodStatus.EXPIRED
    assert await food_status(session, fresh) == FoodStatus.AVAILABLE
    assert await food_status(session, reserved) == FoodStatus.RESERVED
    assert await food_status(session, completed) == FoodStatus.COMPLETED


@pytest.mark.asyncio
async def test_sweep_is_idempotent(session, users, make_food):
    now = datetime.now(timezone.utc)
    item_id = await make_food(users["alice"].id, expires_at=now - timedelta(minutes=1))
    assert await sweep_expired_items(session, now=now) == [item_id]
    assert await sweep_expired_items(session, now=now) == []


@pytest.mark.asyncio
async def test_expired_items_leave_public_listing(client, session, users, make_food):
    now = datetime.now(timezone.utc)
    item_id = await make_food(users["alice"].id, expires_at=now - timedelta(minutes=1))
    await sweep_expired_items(session, now=now)

    response = await client.get("/api/v1/food-items")
    assert item_id not in [item["id"] for item in response.json()]


def test_sweep_task_syncs_search_status(monkeypatch, queued):
    async def fake_sweep():
        return [3, 4]

    monkeypatch.setattr(tasks, "_sweep_once", fake_sweep)
    assert tasks.sweep_expired_items_task() == 2
    assert queued["status"] == [(3, "expired"), (4, "expired")]


def test_sweep_is_scheduled_on_beat():
    entry = celery_app.conf.beat_schedule["sweep-expired-food-items"]
    assert entry["task"] == "app.queue.tasks.sweep_expired_items_task"
    assert entry["schedule"] == float(get_settings().expiry_sweep_interval_seconds)
