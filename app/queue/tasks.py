"""
Celery tasks - search indexing and the periodic expiry sweep.
Challenge: Offload Elasticsearch writes from the request path; keep the index in
step with listing status changes made by the ledger and the sweeper.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import get_settings
from app.queue.celery_app import celery_app
from app.search.elasticsearch_client import (
    ensure_food_index_sync,
    index_food_item_sync,
    update_food_status_sync,
)
from app.services.expiry_service import sweep_expired_items

logger = logging.getLogger(__name__)
settings = get_settings()


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task(bind=True, max_retries=3)
def index_food_item_task(self, doc: dict):
    """
    Index a listing in Elasticsearch.
    Fired after create/edit (event-driven: API publishes, worker consumes).
    """
    ensure_food_index_sync()
    if not index_food_item_sync(doc):
        raise self.retry(exc=RuntimeError(f"indexing food item {doc.get('id')} failed"), countdown=5)


@celery_app.task(bind=True, max_retries=3)
def update_food_status_task(self, item_id: int, status: str):
    """Mirror a status transition into the search index."""
    if not update_food_status_sync(item_id, status):
        raise self.retry(exc=RuntimeError(f"status sync for food item {item_id} failed"), countdown=5)


async def _sweep_once() -> list[int]:
    # Fresh engine per run: pooled asyncpg connections are bound to the loop that opened them
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_maker() as session:
            async with session.begin():
                return await sweep_expired_items(session)
    finally:
        await engine.dispose()


@celery_app.task
def sweep_expired_items_task() -> int:
    """Periodic (beat) pass marking overdue available listings as expired."""
    expired_ids = _run_async(_sweep_once())
    for item_id in expired_ids:
        enqueue_status_sync(item_id, "expired")
    return len(expired_ids)


def enqueue_food_index(doc: dict) -> None:
    """Publish an indexing job; a down broker must not fail the request."""
    try:
        index_food_item_task.delay(doc)
    except Exception as e:
        logger.warning("Could not enqueue indexing for food item %s: %s", doc.get("id"), e)


def enqueue_status_sync(item_id: int, status: str) -> None:
    try:
        update_food_status_task.delay(item_id, status)
    except Exception as e:
        logger.warning("Could not enqueue status sync for food item %s: %s", item_id, e)
