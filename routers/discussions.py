from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from pymongo.database import Database

from database import create_document, find_by_ids, get_db, parse_object_id, serialize_doc
from logging_config import get_logger
from queries import owns_alternative
from schemas import CreatorNotification, Discussion as DiscussionSchema
from security import get_current_user, is_admin

logger = get_logger(__name__)
router = APIRouter(prefix="/discussions", tags=["discussions"])


class CreateDiscussionRequest(BaseModel):
    alternative_id: str
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: Optional[str] = None
    request_creator_response: bool = False


def _author(users, user_id):
    user = users.get(user_id)
    if not user:
        return None
    return {"id": user_id, "name": user.get("name"), "avatar_url": user.get("avatar_url")}


def _creator_id(db: Database, alt) -> Optional[str]:
    if alt.get("user_id"):
        return alt["user_id"]
    email = alt.get("submitter_email")
    creator = db["user"].find_one({"email": email.lower()}, {"_id": 1}) if email else None
    return str(creator["_id"]) if creator else None


@router.get("")
def list_discussions(alternative_id: str, db: Database = Depends(get_db)):
    """Top level posts newest first, each with its replies oldest first."""
    alternative_id = str(parse_object_id(alternative_id, "alternative id"))
    docs = list(db["discussion"].find({"alternative_id": alternative_id}))
    users = find_by_ids(db, "user", {d["user_id"] for d in docs})

    threads = {}
    replies = []
    for doc in docs:
        item = serialize_doc(doc)
        item["author"] = _author(users, doc["user_id"])
        if doc.get("parent_id"):
            replies.append(((doc["created_at"], doc["_id"]), item))
        else:
            item["replies"] = []
            threads[item["id"]] = ((doc["created_at"], doc["_id"]), item)

    for _, reply in sorted(replies, key=lambda r: r[0]):
        parent = threads.get(reply["parent_id"])
        if parent:
            parent[1]["replies"].append(reply)

    ordered = sorted(threads.values(), key=lambda t: t[0], reverse=True)
    return [item for _, item in ordered]


@router.post("", status_code=201)
def create_discussion(payload: CreateDiscussionRequest, db: Database = Depends(get_db), user=Depends(get_current_user)):
    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="content: must not be blank")
    alt = db["alternative"].find_one({"_id": parse_object_id(payload.alternative_id, "alternative id")})
    if not alt:
        raise HTTPException(status_code=404, detail="Alternative not found")
    alternative_id = str(alt["_id"])

    parent_id = None
    if payload.parent_id:
        parent = db["discussion"].find_one({"_id": parse_object_id(payload.parent_id, "parent id")})
        if not parent or parent["alternative_id"] != alternative_id:
            raise HTTPException(status_code=404, detail="Parent discussion not found")
        # threads stay one level deep
        parent_id = parent.get("parent_id") or str(parent["_id"])

    user_id = str(user["_id"])
    is_creator = owns_alternative(user, alt)
    discussion = DiscussionSchema(
        alternative_id=alternative_id,
        user_id=user_id,
        content=content,
        parent_id=parent_id,
        request_creator_response=payload.request_creator_response and not is_creator,
        is_creator_response=is_creator,
    )
    doc = create_document(db, "discussion", discussion)
    discussion_id = str(doc["_id"])

    creator_id = _creator_id(db, alt)
    if creator_id and not is_creator:
        poster = user.get("name") or "Someone"
        if discussion.request_creator_response:
            notification = CreatorNotification(
                creator_id=creator_id,
                alternative_id=alternative_id,
                discussion_id=discussion_id,
                type="response_request",
                message=f'{poster} requested your response on "{alt["name"]}"',
            )
            create_document(db, "creatornotification", notification)
        elif parent_id is None:
            notification = CreatorNotification(
                creator_id=creator_id,
                alternative_id=alternative_id,
                discussion_id=discussion_id,
                type="new_discussion",
                message=f'{poster} started a discussion on "{alt["name"]}"',
            )
            create_document(db, "creatornotification", notification)

    logger.info("discussion_created", discussion_id=discussion_id, alternative_id=alternative_id, reply=parent_id is not None)
    item = serialize_doc(doc)
    item["author"] = {"id": user_id, "name": user.get("name"), "avatar_url": user.get("avatar_url")}
    if parent_id is None:
        item["replies"] = []
    return item


@router.delete("/{discussion_id}")
def delete_discussion(discussion_id: str, db: Database = Depends(get_db), user=Depends(get_current_user)):
    oid = parse_object_id(discussion_id, "discussion id")
    doc = db["discussion"].find_one({"_id": oid})
    if not doc:
        raise HTTPException(status_code=404, detail="Discussion not found")
    if doc["user_id"] != str(user["_id"]) and not is_admin(user):
        raise HTTPException(status_code=403, detail="You can only delete your own comments")

    reply_ids = [str(r["_id"]) for r in db["discussion"].find({"parent_id": discussion_id}, {"_id": 1})]
    removed = db["discussion"].delete_many({"$or": [{"_id": oid}, {"parent_id": discussion_id}]}).deleted_count
    db["creatornotification"].delete_many({"discussion_id": {"$in": [discussion_id] + reply_ids}})
    logger.info("discussion_deleted", discussion_id=discussion_id, removed=removed)
    return {"success": True, "deleted": removed}
