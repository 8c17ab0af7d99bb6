"""
Upsert the curated categories, proprietary software and alternatives.

    python seed.py

Re-running is safe: curated fields are overwritten, while counters that the
app or the GitHub sync maintain are only written when a document is created.
"""

from typing import Dict, Iterable, List, Optional

from pymongo.database import Database

import seed_data
from database import db, ensure_indexes, utcnow
from logging_config import configure_logging, get_logger

logger = get_logger(__name__)

# Only written on insert
COUNTER_DEFAULTS = {
    "stars": 0,
    "forks": 0,
    "contributors": 0,
    "health_score": 50,
    "vote_score": 0,
    "last_commit": None,
    "github_synced_at": None,
}


def resolve_category_ids(
    keywords: Iterable[str],
    keyword_map: Dict[str, List[str]],
    ids_by_slug: Dict[str, str],
    limit: int = 5,
) -> List[str]:
    """Map free-form keywords to category ids, keeping first-seen order."""
    result: List[str] = []
    for keyword in keywords:
        for slug in keyword_map.get(keyword.strip().lower(), []):
            category_id = ids_by_slug.get(slug)
            if category_id and category_id not in result:
                result.append(category_id)
                if len(result) >= limit:
                    return result
    return result


def _ids_by_slug(db: Database, collection: str) -> Dict[str, str]:
    return {doc["slug"]: str(doc["_id"]) for doc in db[collection].find({}, {"slug": 1})}


def _upsert_by_slug(db: Database, collection: str, updates: List[dict]) -> Dict[str, int]:
    """Apply each {"$set", "$setOnInsert"} update to the document with the same slug."""
    counts = {"inserted": 0, "updated": 0}
    for update in updates:
        result = db[collection].update_one({"slug": update["$set"]["slug"]}, update, upsert=True)
        if result.upserted_id is not None:
            counts["inserted"] += 1
        else:
            counts["updated"] += result.matched_count
    return counts


def upsert_categories(db: Database, categories: Optional[List[dict]] = None) -> Dict[str, int]:
    categories = seed_data.CATEGORIES if categories is None else categories
    now = utcnow()
    updates = []
    for category in categories:
        fields = {
            "name": category["name"],
            "slug": category["slug"],
            "description": category.get("description", ""),
            "icon": category.get("icon", "Code"),
        }
        updates.append({"$set": {**fields, "updated_at": now}, "$setOnInsert": {"created_at": now, "parent_id": None}})
    counts = _upsert_by_slug(db, "category", updates)

    # Parents can only be linked once every category has an id
    ids = _ids_by_slug(db, "category")
    for category in categories:
        parent_id = ids.get(category.get("parent") or "")
        if parent_id:
            db["category"].update_one({"slug": category["slug"]}, {"$set": {"parent_id": parent_id}})
    return counts


def upsert_proprietary(
    db: Database,
    entries: Optional[List[dict]] = None,
    keyword_map: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, int]:
    entries = seed_data.PROPRIETARY if entries is None else entries
    keyword_map = seed_data.CATEGORY_KEYWORD_MAP if keyword_map is None else keyword_map
    category_ids = _ids_by_slug(db, "category")
    now = utcnow()

    updates = []
    for entry in entries:
        fields = {
            "name": entry["name"],
            "slug": entry["slug"],
            "description": entry["description"],
            "website": entry["website"],
            "icon_url": entry.get("icon_url"),
            "categories": resolve_category_ids(entry.get("category_keywords", []), keyword_map, category_ids),
        }
        updates.append({"$set": {**fields, "updated_at": now}, "$setOnInsert": {"created_at": now}})
    return _upsert_by_slug(db, "proprietarysoftware", updates)


def upsert_alternatives(
    db: Database,
    entries: Optional[List[dict]] = None,
    keyword_map: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, int]:
    entries = seed_data.ALTERNATIVES if entries is None else entries
    keyword_map = seed_data.CATEGORY_KEYWORD_MAP if keyword_map is None else keyword_map
    category_ids = _ids_by_slug(db, "category")
    proprietary_ids = _ids_by_slug(db, "proprietarysoftware")
    now = utcnow()

    updates = []
    for entry in entries:
        alternative_to = []
        for slug in entry.get("alternative_to", []):
            if slug in proprietary_ids:
                alternative_to.append(proprietary_ids[slug])
            else:
                logger.warning("seed_proprietary_missing", alternative=entry["slug"], proprietary=slug)

        fields = {
            "name": entry["name"],
            "slug": entry["slug"],
            "description": entry["description"],
            "short_description": entry.get("short_description"),
            "website": entry["website"],
            "github": entry["github"],
            "license": entry.get("license"),
            "is_self_hosted": entry.get("is_self_hosted", False),
            "featured": entry.get("featured", False),
            "approved": True,
            "status": "approved",
            "categories": resolve_category_ids(entry.get("category_keywords", []), keyword_map, category_ids),
            "alternative_to": alternative_to,
        }
        on_insert = {key: entry.get(key, default) for key, default in COUNTER_DEFAULTS.items()}
        on_insert.update({
            "created_at": now,
            "submission_plan": "free",
            "tags": [],
            "tech_stacks": [],
            "screenshots": [],
            "alternative_tags": {"alerts": [], "highlights": [], "platforms": [], "properties": []},
        })
        updates.append({"$set": {**fields, "updated_at": now}, "$setOnInsert": on_insert})
    return _upsert_by_slug(db, "alternative", updates)


def main() -> None:
    configure_logging()
    ensure_indexes(db)
    categories = upsert_categories(db)
    logger.info("seed_categories_done", **categories)
    proprietary = upsert_proprietary(db)
    logger.info("seed_proprietary_done", **proprietary)
    alternatives = upsert_alternatives(db)
    logger.info("seed_alternatives_done", **alternatives)


if __name__ == "__main__":
    main()
