"""
Elasticsearch client - full-text search over food listings.
Challenge: Index management, async operations, graceful degradation when ES is down.
Sync helpers used by Celery workers (no event loop in fork).
"""

import logging
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch, Elasticsearch

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

FOOD_INDEX = "food_items"

_es_client: AsyncElasticsearch | None = None


def _es_client_options() -> dict:
    """Build Elasticsearch client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    if "@" in url and "://" in url:
        parsed = urlparse(url)
        if parsed.username and parsed.password:
            basic_auth = (parsed.username, parsed.password)
        # Remove auth from URL for the client (it uses basic_auth separately)
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": 30,
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    """Get Elasticsearch client. Dependency injection for tests."""
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


async def close_elasticsearch() -> None:
    global _es_client
    if _es_client is not None:
        await _es_client.close()
        _es_client = None


def _food_index_mappings() -> dict:
    """Mapping for the food index (shared by async and sync create)."""
    return {
        "properties": {
            "id": {"type": "integer"},
            "title": {"type": "text", "analyzer": "standard"},
            "description": {"type": "text", "analyzer": "standard"},
            "category": {"type": "keyword"},
            "status": {"type": "keyword"},
            "owner_id": {"type": "integer"},
            "price": {"type": "float"},
            "is_free": {"type": "boolean"},
            "address": {"type": "text"},
            "expires_at": {"type": "date"},
            "created_at": {"type": "date"},
        }
    }


async def ensure_food_index() -> None:
    """Create food index with mapping if not exists. Single-node: 0 replicas to avoid unassigned shards."""
    es = await get_elasticsearch()
    if not await es.indices.exists(index=FOOD_INDEX):
        await es.indices.create(
            index=FOOD_INDEX,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_food_index_mappings(),
        )


async def search_food_items(query: str, skip: int = 0, limit: int = 20) -> list[dict[str, Any]]:
    """Full-text search on title and description, restricted to claimable listings."""
    try:
        es = await get_elasticsearch()
        response = await es.search(
            index=FOOD_INDEX,
            query={
                "bool": {
                    "must": {
                        "multi_match": {
                            "query": query,
                            "fields": ["title^2", "description"],
                            "fuzziness": "AUTO",
                        }
                    },
                    "filter": {"term": {"status": "available"}},
                }
            },
            from_=skip,
            size=limit,
        )
        body = getattr(response, "body", response)
        hits = body["hits"]["hits"]
        if not hits:
            logger.info("search_food_items: query=%r returned 0 hits", query)
        return [hit["_source"] for hit in hits]
    except Exception as e:
        logger.warning("search_food_items failed: query=%r error=%s", query, e)
        return []


# --- Sync API for Celery (workers run in sync context; async + new_event_loop fails after fork) ---

def _sync_es_client() -> Elasticsearch:
    """New sync client per call (safe in forked Celery worker)."""
    return Elasticsearch(**_es_client_options())


def ensure_food_index_sync() -> None:
    """Create food index if not exists. Call from Celery task."""
    try:
        es = _sync_es_client()
        if not es.indices.exists(index=FOOD_INDEX):
            es.indices.create(
                index=FOOD_INDEX,
                settings={"index": {"number_of_replicas": 0}},
                mappings=_food_index_mappings(),
            )
    except Exception as e:
        logger.warning("ensure_food_index_sync failed: %s", e)


def index_food_item_sync(doc: dict[str, Any]) -> bool:
    """Index (or overwrite) one listing. ES 8 requires id to be str."""
    try:
        es = _sync_es_client()
        payload = {k: v for k, v in doc.items() if v is not None}
        es.index(index=FOOD_INDEX, id=str(doc["id"]), document=payload)
        return True
    except Exception as e:
        logger.warning("index_food_item_sync failed for doc id=%s: %s", doc.get("id"), e)
        return False


def update_food_status_sync(item_id: int, status: str) -> bool:
    """Patch only the status field after a ledger or sweeper transition."""
    try:
        es = _sync_es_client()
        es.update(index=FOOD_INDEX, id=str(item_id), doc={"status": status})
        return True
    except Exception as e:
        logger.warning("update_food_status_sync failed for id=%s: %s", item_id, e)
        return False
