from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from pymongo.database import Database

from database import find_by_ids, get_db, parse_object_id, serialize_doc, utcnow
from security import get_current_user

router = APIRouter(prefix="/notifications", tags=["notifications"])


class MarkReadRequest(BaseModel):
    notification_id: Optional[str] = None
    mark_all: bool = False


@router.get("")
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Database = Depends(get_db),
    user=Depends(get_current_user),
):
    query = {"creator_id": str(user["_id"])}
    unread_count = db["creatornotification"].count_documents({**query, "is_read": False})
    if unread_only:
        query["is_read"] = False
    docs = list(db["creatornotification"].find(query).sort([("created_at", -1), ("_id", -1)]).limit(limit))

    alternatives = find_by_ids(db, "alternative", {d["alternative_id"] for d in docs})
    items = []
    for doc in docs:
        item = serialize_doc(doc)
        alt = alternatives.get(doc["alternative_id"])
        item["alternative"] = {"id": doc["alternative_id"], "name": alt["name"], "slug": alt["slug"]} if alt else None
        items.append(item)
    return {"notifications": items, "unread_count": unread_count}


@router.patch("")
def mark_read(payload: MarkReadRequest, db: Database = Depends(get_db), user=Depends(get_current_user)):
    owner = {"creator_id": str(user["_id"])}
    update = {"$set": {"is_read": True, "updated_at": utcnow()}}
    if payload.mark_all:
        result = db["creatornotification"].update_many({**owner, "is_read": False}, update)
        return {"success": True, "updated": result.modified_count}
    if not payload.notification_id:
        raise HTTPException(status_code=400, detail="notification_id or mark_all is required")

    oid = parse_object_id(payload.notification_id, "notification id")
    result = db["creatornotification"].update_one({**owner, "_id": oid}, update)
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True, "updated": result.modified_count}


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, db: Database = Depends(get_db), user=Depends(get_current_user)):
    oid = parse_object_id(notification_id, "notification id")
    result = db["creatornotification"].delete_one({"_id": oid, "creator_id": str(user["_id"])})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}
