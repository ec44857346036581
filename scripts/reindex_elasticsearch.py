#!/usr/bin/env python3
"""
Reindex all food listings from the DB into Elasticsearch via Celery.
Use this after fixing the worker or when the index was empty; no new data is created.
Requires: database reachable and a running Celery worker to process the queue.

If you get 503 / no_shard_available from Elasticsearch, delete the broken index and reindex:
  python scripts/reindex_elasticsearch.py --reset-index

  python scripts/reindex_elasticsearch.py
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from app.db.models import FoodItem
from app.db.session import async_session_maker, engine
from app.queue.tasks import index_food_item_task
from app.services.food_service import food_to_doc

BATCH_SIZE = 500


def delete_food_index():
    """Delete the index so Celery recreates it with number_of_replicas=0 (single-node safe)."""
    from app.search.elasticsearch_client import FOOD_INDEX, _sync_es_client
    es = _sync_es_client()
    if es.indices.exists(index=FOOD_INDEX):
        es.indices.delete(index=FOOD_INDEX)
        print(f"Deleted index '{FOOD_INDEX}'. Celery will recreate it when processing the first task.")
    else:
        print(f"Index '{FOOD_INDEX}' does not exist (already deleted or never created).")


async def load_docs() -> list[dict]:
    """Every listing, any status: search filters on status itself."""
    docs = []
    async with async_session_maker() as session:
        offset = 0
        while True:
            result = await session.execute(
                select(FoodItem).order_by(FoodItem.id).offset(offset).limit(BATCH_SIZE)
            )
            batch = list(result.scalars().all())
            docs.extend(food_to_doc(item) for item in batch)
            if len(batch) < BATCH_SIZE:
                break
            offset += BATCH_SIZE
    await engine.dispose()
    return docs


def main():
    ap = argparse.ArgumentParser(description="Enqueue all food listings for Elasticsearch reindex")
    ap.add_argument("--reset-index", action="store_true", help="Delete the index first (fixes 503 / no_shard_available), then enqueue")
    args = ap.parse_args()

    if args.reset_index:
        delete_food_index()
        print()

    docs = asyncio.run(load_docs())
    if not docs:
        print("No listings in DB. Run seed_data.py first.")
        return

    for doc in docs:
        index_food_item_task.delay(doc)

    print(f"Enqueued {len(docs)} listings for Elasticsearch reindex. Ensure Celery worker is running.")
    print("Wait a few seconds, then: curl -s 'http://localhost:9200/food_items/_count?pretty'")


if __name__ == "__main__":
    main()
