"""
Search endpoint - Elasticsearch full-text search over listed items.
Returns an empty result set when Elasticsearch is unavailable.
"""

from fastapi import APIRouter, Query

from swapshop.config import get_settings
from swapshop.search.elasticsearch_client import search_items

router = APIRouter()
settings = get_settings()


@router.get("/items")
async def search_items_endpoint(
    q: str = Query(..., min_length=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Full-text search on title, description and tags."""
    hits = await search_items(query=q, skip=skip, limit=limit)
    return {"query": q, "results": hits, "count": len(hits)}
