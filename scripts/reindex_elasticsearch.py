#!/usr/bin/env python3
"""
Reindex every item from the database into Elasticsearch via Celery.
Documents carry the current status, so swapped and removed items drop out of search.
Celery worker must be running to process the queue.

If Elasticsearch returns 503 / no_shard_available, delete the broken index and reindex:
  python scripts/reindex_elasticsearch.py --reset-index

  python scripts/reindex_elasticsearch.py
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from swapshop.db.models.item import Item
from swapshop.db.session import async_session_maker
from swapshop.queue.tasks import index_item_task
from swapshop.search.elasticsearch_client import ITEMS_INDEX, delete_items_index_sync
from swapshop.services.item_service import item_to_doc

BATCH_SIZE = 100


async def load_docs() -> list[dict]:
    docs = []
    async with async_session_maker() as session:
        last_id = 0
        while True:
            result = await session.execute(
                select(Item)
                .where(Item.id > last_id)
                .options(selectinload(Item.category))
                .order_by(Item.id)
                .limit(BATCH_SIZE)
            )
            batch = list(result.scalars().all())
            if not batch:
                break
            docs.extend(item_to_doc(item) for item in batch)
            last_id = batch[-1].id
    return docs


def main():
    ap = argparse.ArgumentParser(description="Enqueue all items for Elasticsearch reindex")
    ap.add_argument(
        "--reset-index",
        action="store_true",
        help="Delete the items index first (fixes 503 / no_shard_available), then enqueue",
    )
    args = ap.parse_args()

    if args.reset_index:
        if delete_items_index_sync():
            print(f"Deleted index '{ITEMS_INDEX}'. Celery will recreate it when processing the first task.")
        else:
            print(f"Index '{ITEMS_INDEX}' does not exist (already deleted or never created).")
        print()

    docs = asyncio.run(load_docs())
    if not docs:
        print("No items in DB. Run seed_data.py first.")
        return

    for doc in docs:
        index_item_task.delay(doc)

    print(f"Enqueued {len(docs)} items for Elasticsearch reindex. Ensure Celery worker is running.")
    print("Wait a few seconds, then try: curl -s 'http://localhost:9200/items/_count?pretty'")


if __name__ == "__main__":
    main()
