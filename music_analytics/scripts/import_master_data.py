# scripts/import_master_data.py
"""
Load master data (artists, songs, users) and stream events from JSONL files
into MongoDB. Each line is upserted by its `_id`, so reruns are idempotent.

Usage: python -m music_analytics.scripts.import_master_data [data_dir]
"""
import json
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from pymongo import MongoClient, UpdateOne #type: ignore
from tqdm import tqdm

from music_analytics import config as cfg
from music_analytics.common.logger import get_logger

BATCH_SIZE = 5000
logger = get_logger("Import Master Data")

# (file name, collection, fields stored as BSON dates)
SOURCES = [
    ("artists.jsonl", cfg.COLLECTION_ARTISTS, ()),
    ("songs.jsonl", cfg.COLLECTION_SONGS, ()),
    ("users.jsonl", cfg.COLLECTION_USERS, ("birth_date",)),
    ("streams.jsonl", cfg.COLLECTION_STREAMS, ("date",)),
]


def parse_date(value):
    """ISO-8601 string or epoch milliseconds -> aware UTC datetime."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def prepare_document(record: dict, date_fields=()) -> Optional[dict]:
    """Normalize the id to `_id` and convert date fields. None if no id."""
    doc_id = record.get("_id") or record.get("id")
    if not doc_id:
        return None
    doc = {k: v for k, v in record.items() if k not in ("_id", "id")}
    for name in date_fields:
        if name in doc:
            doc[name] = parse_date(doc[name])
    doc["_id"] = str(doc_id)
    return doc


def count_lines(path: Path) -> int:
    with path.open("r", encoding="utf-8") as f:
        return sum(1 for line in f if line.strip())


def import_file(db, path: Path, collection: str, date_fields) -> int:
    col = db[collection]
    total = count_lines(path)
    pbar = tqdm(total=total, desc=f"Importing {collection}", unit=" doc")
    operations = []
    imported = 0
    skipped = 0

    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line: continue
            try:
                doc = prepare_document(json.loads(line), date_fields)
            except ValueError as e:
                logger.warning(f"Skipping bad line in {path.name}: {e}")
                doc = None
            if doc is None:
                skipped += 1
                pbar.update(1)
                continue

            operations.append(UpdateOne(
                {"_id": doc["_id"]},
                {"$set": {k: v for k, v in doc.items() if k != "_id"}},
                upsert=True
            ))
            if len(operations) >= BATCH_SIZE:
                col.bulk_write(operations, ordered=False)
                imported += len(operations)
                pbar.update(len(operations))
                operations = []

    if operations:
        col.bulk_write(operations, ordered=False)
        imported += len(operations)
        pbar.update(len(operations))

    pbar.close()
    logger.info(f"{collection}: {imported:,} upserted, {skipped:,} skipped.")
    return imported


def sync_data(data_dir: Path):
    logger.info(f"=== IMPORT STARTED AT {time.strftime('%Y-%m-%d %H:%M:%S')} ===")
    if not data_dir.exists():
        logger.error(f"Directory {data_dir} does not exist.")
        return

    client = MongoClient(cfg.MONGO_URI)
    try:
        client.admin.command('ping')
        db = client[cfg.MONGO_DB]
        for file_name, collection, date_fields in SOURCES:
            path = data_dir / file_name
            if not path.exists():
                logger.warning(f"{file_name} not found, skipping {collection}.")
                continue
            import_file(db, path, collection, date_fields)
    finally:
        client.close()
    logger.info("Import finished.")


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(cfg.MASTER_DATA_PATH)
    sync_data(target)
