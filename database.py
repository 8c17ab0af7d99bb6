from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

import config

_client = MongoClient(config.DATABASE_URL)
db = _client[config.DATABASE_NAME]


def get_db() -> Database:
    """FastAPI dependency; tests override it with an in-memory database."""
    return db


def utcnow() -> datetime:
    # Naive UTC, matching what pymongo hands back on reads.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_object_id(value: str, label: str = "id") -> ObjectId:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")


def serialize_doc(doc):
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    for k, v in list(doc.items()):
        doc[k] = _serialize_value(v)
    return doc


def _serialize_value(v):
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, list):
        return [_serialize_value(i) for i in v]
    if isinstance(v, dict):
        return {k: _serialize_value(i) for k, i in v.items()}
    return v


def create_document(database: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    now = utcnow()
    fields = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    payload = {**fields, "created_at": now, "updated_at": now}
    col = database[collection_name]
    res = col.insert_one(payload)
    return col.find_one({"_id": res.inserted_id})


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def find_by_ids(database: Database, collection_name: str, ids) -> Dict[str, Dict[str, Any]]:
    """Load documents for a list of string ids, keyed by id. Malformed ids are ignored."""
    oids = []
    for i in ids:
        try:
            oids.append(ObjectId(str(i)))
        except (InvalidId, TypeError):
            continue
    if not oids:
        return {}
    return {str(d["_id"]): d for d in database[collection_name].find({"_id": {"$in": oids}})}


def ensure_indexes(database: Database) -> None:
    for name in ("category", "tag", "techstack", "proprietarysoftware", "alternative"):
        database[name].create_index([("slug", ASCENDING)], unique=True)

    alternatives = database["alternative"]
    alternatives.create_index([("approved", ASCENDING), ("health_score", DESCENDING)])
    alternatives.create_index([("approved", ASCENDING), ("vote_score", DESCENDING)])
    alternatives.create_index([("approved", ASCENDING), ("created_at", DESCENDING)])
    alternatives.create_index([("status", ASCENDING)])
    alternatives.create_index([("user_id", ASCENDING)])
    alternatives.create_index([("categories", ASCENDING)])
    alternatives.create_index([("alternative_to", ASCENDING)])
    alternatives.create_index([("github_synced_at", ASCENDING)])

    database["user"].create_index([("email", ASCENDING)], unique=True)
    database["session"].create_index([("token", ASCENDING)], unique=True)
    database["vote"].create_index([("user_id", ASCENDING), ("alternative_id", ASCENDING)], unique=True)
    database["discussion"].create_index([("alternative_id", ASCENDING), ("created_at", DESCENDING)])
    database["discussion"].create_index([("parent_id", ASCENDING)])
    database["creatornotification"].create_index([("creator_id", ASCENDING), ("is_read", ASCENDING)])
    database["advertisement"].create_index(
        [("ad_type", ASCENDING), ("status", ASCENDING), ("is_active", ASCENDING)]
    )
    database["newslettersubscription"].create_index([("email", ASCENDING)], unique=True)
