"""Read-side helpers shared by the routers: reference expansion, counts and trees."""

import re
from typing import Any, Dict, Iterable, List, Optional

from pymongo.database import Database

from database import find_by_ids, serialize_doc
from slugs import generate_slug, generate_unique_slug

REFERENCE_FIELDS = {
    "categories": "category",
    "tags": "tag",
    "tech_stacks": "techstack",
    "alternative_to": "proprietarysoftware",
}

PRIVATE_ALTERNATIVE_FIELDS = ("submitter_email", "sponsor_payment_id")


def _summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    summary = {"id": str(doc["_id"]), "name": doc.get("name"), "slug": doc.get("slug")}
    for extra in ("icon", "icon_url", "type"):
        if extra in doc:
            summary[extra] = doc[extra]
    return summary


def populate_alternatives(db: Database, alternatives: Iterable[Dict[str, Any]], include_private: bool = False) -> List[Dict[str, Any]]:
    """Serialize alternatives with their references expanded to {id, name, slug}."""
    alternatives = list(alternatives)
    lookups = {}
    for field, collection in REFERENCE_FIELDS.items():
        ids = {ref for alt in alternatives for ref in alt.get(field) or []}
        lookups[field] = find_by_ids(db, collection, ids)

    result = []
    for alt in alternatives:
        item = serialize_doc(alt)
        for field, found in lookups.items():
            item[field] = [_summary(found[ref]) for ref in alt.get(field) or [] if ref in found]
        if not include_private:
            for private in PRIVATE_ALTERNATIVE_FIELDS:
                item.pop(private, None)
        result.append(item)
    return result


def populate_alternative(db: Database, alternative: Dict[str, Any], include_private: bool = False) -> Dict[str, Any]:
    return populate_alternatives(db, [alternative], include_private)[0]


def approved_counts(db: Database, field: str) -> Dict[str, int]:
    """Number of approved alternatives referencing each id in the array `field`."""
    pipeline = [
        {"$match": {"approved": True}},
        {"$unwind": f"${field}"},
        {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
    ]
    return {doc["_id"]: doc["count"] for doc in db["alternative"].aggregate(pipeline)}


def with_counts(docs: Iterable[Dict[str, Any]], counts: Dict[str, int]) -> List[Dict[str, Any]]:
    result = []
    for doc in docs:
        item = serialize_doc(doc)
        item["alternatives_count"] = counts.get(item["id"], 0)
        result.append(item)
    return result


def build_category_tree(categories: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Nest serialized categories under their parent_id. Orphans become roots."""
    by_id = {c["id"]: {**c, "children": []} for c in categories}
    roots = []
    for node in by_id.values():
        parent = by_id.get(node.get("parent_id") or "")
        if parent is not None and parent is not node:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots


def find_by_slug(db: Database, collection: str, slug: str) -> Optional[Dict[str, Any]]:
    return db[collection].find_one({"slug": slug})


def find_by_name(db: Database, name: str, exclude_id=None) -> Optional[Dict[str, Any]]:
    """Case-insensitive exact name match among alternatives."""
    query: Dict[str, Any] = {"name": {"$regex": "^" + re.escape(name.strip()) + "$", "$options": "i"}}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return db["alternative"].find_one(query)


def allocate_slug(db: Database, name: str, exclude_id=None) -> str:
    """
    Pick an alternative slug for `name` that no other document uses.

    Reserved route names get an "-app" suffix and clashes a numeric one. Returns
    an empty string when the name has nothing to slugify.
    """
    base = generate_slug(name)
    if not base:
        return ""
    query: Dict[str, Any] = {"slug": {"$regex": "^" + re.escape(base) + r"(-app)?(-[0-9]+)?$"}}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    taken = [doc["slug"] for doc in db["alternative"].find(query, {"slug": 1})]
    return generate_unique_slug(name, taken)


def active_ads_query(ad_type: Optional[str], now) -> Dict[str, Any]:
    """Approved, switched on, inside its schedule window and not expired."""
    query: Dict[str, Any] = {
        "status": "approved",
        "is_active": True,
        "$and": [
            {"$or": [{"start_date": None}, {"start_date": {"$lte": now}}]},
            {"$or": [{"end_date": None}, {"end_date": {"$gte": now}}]},
            {"$or": [{"expires_at": None}, {"expires_at": {"$gt": now}}]},
        ],
    }
    if ad_type:
        query["ad_type"] = ad_type
    return query


def find_active_ads(db: Database, ad_type: Optional[str], now, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = db["advertisement"].find(active_ads_query(ad_type, now)).sort([("priority", -1), ("created_at", -1)])
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def owns_alternative(user: Optional[Dict[str, Any]], alternative: Dict[str, Any]) -> bool:
    if not user:
        return False
    if alternative.get("user_id") and alternative["user_id"] == str(user["_id"]):
        return True
    email = alternative.get("submitter_email")
    return bool(email) and email.lower() == user.get("email", "").lower()


def submitted_by(user: Dict[str, Any]) -> Dict[str, Any]:
    """Filter for documents linked to the user by id or by submitter email, ignoring case."""
    email = "^" + re.escape(user.get("email", "")) + "$"
    return {"$or": [{"user_id": str(user["_id"])}, {"submitter_email": {"$regex": email, "$options": "i"}}]}
