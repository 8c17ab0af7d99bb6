"""Recently added alternatives, filtered by how long ago they launched."""

from datetime import timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from database import get_db, utcnow
from queries import find_by_slug, populate_alternatives

router = APIRouter(prefix="/launches", tags=["launches"])

TimeFrame = Literal["today", "week", "month", "year", "all"]

LAUNCH_SORTS = {
    "vote_score": [("vote_score", -1), ("created_at", -1)],
    "stars": [("stars", -1), ("created_at", -1)],
    "newest": [("created_at", -1)],
    "health_score": [("health_score", -1), ("created_at", -1)],
}


def launch_window_start(time_frame: str, now):
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if time_frame == "today":
        return midnight
    if time_frame == "week":
        return now - timedelta(days=7)
    if time_frame == "month":
        return midnight.replace(day=1)
    if time_frame == "year":
        return midnight.replace(month=1, day=1)
    return None


@router.get("")
def list_launches(
    time_frame: TimeFrame = "all",
    category: Optional[str] = None,
    alternative_to: Optional[str] = None,
    sort_by: Literal["vote_score", "stars", "newest", "health_score"] = "vote_score",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Database = Depends(get_db),
):
    empty = {"alternatives": [], "total": 0, "page": page, "limit": limit, "has_more": False}
    query = {"approved": True}
    start = launch_window_start(time_frame, utcnow())
    if start:
        query["created_at"] = {"$gte": start}

    # An unknown slug filter matches nothing
    for slug, collection, field in ((category, "category", "categories"), (alternative_to, "proprietarysoftware", "alternative_to")):
        if not slug:
            continue
        ref = find_by_slug(db, collection, slug)
        if not ref:
            return empty
        query[field] = str(ref["_id"])

    total = db["alternative"].count_documents(query)
    offset = (page - 1) * limit
    docs = db["alternative"].find(query).sort(LAUNCH_SORTS[sort_by]).skip(offset).limit(limit)
    return {
        "alternatives": populate_alternatives(db, docs),
        "total": total,
        "page": page,
        "limit": limit,
        "has_more": offset + limit < total,
    }
