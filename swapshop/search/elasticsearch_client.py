"""
Elasticsearch client - full-text item search.
Index management, async operations, graceful degradation when ES is down.
Sync helpers used by Celery workers (no event loop in fork).
"""

import logging
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch, Elasticsearch

from swapshop.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

ITEMS_INDEX = "items"

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
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


def _items_index_mappings() -> dict:
    """Mapping for items index (shared by async and sync create)."""
    return {
        "properties": {
            "id": {"type": "integer"},
            "title": {"type": "text", "analyzer": "standard"},
            "description": {"type": "text", "analyzer": "standard"},
            "tags": {"type": "text", "analyzer": "standard"},
            "category": {"type": "keyword"},
            "size": {"type": "keyword"},
            "condition": {"type": "keyword"},
            "status": {"type": "keyword"},
            "is_approved": {"type": "boolean"},
            "point_value": {"type": "integer"},
            "owner_id": {"type": "integer"},
            "created_at": {"type": "date"},
        }
    }


async def ensure_items_index() -> None:
    """Create items index with mapping if not exists. Single-node: 0 replicas to avoid unassigned shards."""
    es = await get_elasticsearch()
    if not await es.indices.exists(index=ITEMS_INDEX):
        await es.indices.create(
            index=ITEMS_INDEX,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_items_index_mappings(),
        )


async def search_items(query: str, skip: int = 0, limit: int = 20) -> list[dict[str, Any]]:
    """Full-text search over listed items. Only active, approved items are returned."""
    try:
        es = await get_elasticsearch()
        response = await es.search(
            index=ITEMS_INDEX,
            query={
                "bool": {
                    "must": {
                        "multi_match": {
                            "query": query,
                            "fields": ["title^2", "description", "tags"],
                            "fuzziness": "AUTO",
                        }
                    },
                    "filter": [
                        {"term": {"status": "active"}},
                        {"term": {"is_approved": True}},
                    ],
                }
            },
            from_=skip,
            size=limit,
        )
        body = getattr(response, "body", response)
        return [hit["_source"] for hit in body["hits"]["hits"]]
    except Exception as e:
        logger.warning("search_items failed: query=%r error=%s", query, e)
        return []


# --- Sync API for Celery (workers run in sync context; async + new_event_loop fails after fork) ---

def _sync_es_client() -> Elasticsearch:
    """New sync client per call (safe in forked Celery worker)."""
    return Elasticsearch(**_es_client_options())


def ensure_items_index_sync(es: Elasticsearch) -> None:
    if not es.indices.exists(index=ITEMS_INDEX):
        es.indices.create(
            index=ITEMS_INDEX,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_items_index_mappings(),
        )


def index_item_sync(doc: dict[str, Any]) -> None:
    """Index (or re-index after a status change) a single item. ES 8 requires id to be str."""
    es = _sync_es_client()
    ensure_items_index_sync(es)
    payload = {k: v for k, v in doc.items() if v is not None}
    es.index(index=ITEMS_INDEX, id=str(doc["id"]), document=payload)


def delete_items_index_sync() -> bool:
    """Drop the items index (used by the reindex script). Returns False if it did not exist."""
    es = _sync_es_client()
    if not es.indices.exists(index=ITEMS_INDEX):
        return False
    es.indices.delete(index=ITEMS_INDEX)
    return True
