"""
Celery tasks - search indexing fired after item create and status changes.
The API publishes documents; workers write them to Elasticsearch.
"""

import logging

from swapshop.config import get_settings
from swapshop.queue.celery_app import celery_app
from swapshop.search.elasticsearch_client import index_item_sync

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def index_item_task(self, item_doc: dict):
    """Index one item document, retrying while Elasticsearch is unavailable."""
    try:
        index_item_sync(item_doc)
    except Exception as exc:
        raise self.retry(exc=exc, countdown=5)


def enqueue_item_index(item_doc: dict) -> bool:
    """Publish an index task. A broker outage must never fail the request that changed the item."""
    if not get_settings().search_indexing_enabled:
        return False
    try:
        index_item_task.delay(item_doc)
        return True
    except Exception as e:
        logger.warning("could not enqueue index task for item %s: %s", item_doc.get("id"), e)
        return False
