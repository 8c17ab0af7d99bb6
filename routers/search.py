import re

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import get_db, serialize_doc
from queries import populate_alternatives

router = APIRouter(tags=["search"])

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 20
MAX_PROPRIETARY_MATCHES = 10


@router.get("/search")
def search(q: str = "", db: Database = Depends(get_db)):
    """
    Search approved alternatives.

    Alternatives to a proprietary product whose name matches come first,
    then alternatives matching on name or description.
    """
    q = q.strip()
    if len(q) < MIN_QUERY_LENGTH:
        return {"results": [], "proprietary_matches": []}

    pattern = {"$regex": re.escape(q), "$options": "i"}
    proprietary = list(db["proprietarysoftware"].find({"name": pattern}).limit(MAX_PROPRIETARY_MATCHES))
    proprietary_ids = [str(p["_id"]) for p in proprietary]

    combined = []
    if proprietary_ids:
        combined.extend(
            db["alternative"]
            .find({"approved": True, "alternative_to": {"$in": proprietary_ids}})
            .sort("health_score", -1)
            .limit(MAX_RESULTS)
        )
    seen = {alt["_id"] for alt in combined}
    direct = (
        db["alternative"]
        .find({
            "approved": True,
            "$or": [{"name": pattern}, {"description": pattern}, {"short_description": pattern}],
        })
        .sort("health_score", -1)
        .limit(MAX_RESULTS)
    )
    combined.extend(alt for alt in direct if alt["_id"] not in seen)

    return {
        "results": populate_alternatives(db, combined[:MAX_RESULTS]),
        "proprietary_matches": [
            {k: v for k, v in serialize_doc(p).items() if k in ("id", "name", "slug", "icon_url")}
            for p in proprietary
        ],
    }
