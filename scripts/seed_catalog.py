#!/usr/bin/env python3
"""
Seed the brand catalog.

Loads each brand's JSON export into its own collection, replacing what was
there before.

Usage:
    python scripts/seed_catalog.py --data-dir data/
    python scripts/seed_catalog.py --data-dir data/ --mongo-uri mongodb://db:27017 --db brands
"""
import argparse
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from bson import ObjectId
from dotenv import load_dotenv

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# (JSON file, collection)
BRANDS = [
    ("mariaB.json", "MariaB"),
    ("limelight.json", "Limelight"),
    ("sapphire.json", "Sapphire"),
    ("gulAhmed.json", "GulAhmed"),
    ("edenrobe.json", "Edenrobe"),
    ("beechtree.json", "Beechtree"),
    ("junaidJamshed.json", "JunaidJamshed"),
    ("bonanza.json", "Bonanza"),
    ("khaadi.json", "Khaadi"),
    ("outfitters.json", "Outfitters"),
]


def transform_product(product: dict, collection: str, now: datetime) -> dict:
    """Stamp a raw export record with id, brand and timestamps."""
    return {
        **product,
        "_id": ObjectId(),
        "brand": collection,
        "price": product.get("price") or product.get("sale_price") or product.get("original_price"),
        "createdAt": now,
        "updatedAt": now,
    }


def load_brand_file(path: Path) -> list[dict]:
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path.name} does not contain a list of products")
    return data


def seed(data_dir: Path, db) -> dict[str, int]:
    """Replace each brand collection with its export. Returns inserted counts."""
    summary: dict[str, int] = {}
    now = datetime.now(timezone.utc)

    for filename, collection_name in BRANDS:
        path = data_dir / filename
        print(f"Processing {collection_name}...")
        if not path.exists():
            print(f"  WARNING: {path} not found, skipping")
            continue

        products = load_brand_file(path)
        collection = db[collection_name]
        collection.delete_many({})

        documents = [transform_product(p, collection_name, now) for p in products]
        if documents:
            collection.insert_many(documents)
            print(f"  Inserted {len(documents)} products into {collection_name}")
        else:
            print(f"  WARNING: no data found for {collection_name}")
        summary[collection_name] = len(documents)

    return summary


def main() -> int:
    load_dotenv()

    from fashionhive.db import MONGO_DB_NAME, MONGO_URI, get_mongo_sync

    parser = argparse.ArgumentParser(description="Seed brand collections from JSON exports")
    parser.add_argument("--data-dir", required=True, type=Path, help="Directory with <brand>.json files")
    parser.add_argument("--mongo-uri", default=MONGO_URI)
    parser.add_argument("--db", default=MONGO_DB_NAME)
    args = parser.parse_args()

    client = get_mongo_sync(args.mongo_uri)
    try:
        db = client[args.db]
        summary = seed(args.data_dir, db)

        print("\nSummary:")
        for collection_name, count in summary.items():
            print(f"  - {collection_name}: {count} products")

        print("\nCollections in database:")
        for name in sorted(db.list_collection_names()):
            if not name.startswith("system."):
                print(f"  - {name}")
    except Exception as e:
        print(f"ERROR: Seeding failed: {e}")
        return 1
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
