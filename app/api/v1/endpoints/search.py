"""
Search endpoint - Elasticsearch full-text search over claimable listings.
Challenge: Expose search API, pagination, graceful fallback if ES down.
"""

from fastapi import APIRouter, Query

from app.search.elasticsearch_client import search_food_items

router = APIRouter()


@router.get("/food-items")
async def search_food_items_endpoint(
    q: str = Query(..., min_length=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """Full-text search on listings (title, description) via Elasticsearch."""
    hits = await search_food_items(query=q, skip=skip, limit=limit)
    return {"query": q, "results": hits, "count": len(hits)}
