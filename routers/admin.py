from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator
from pymongo import ReturnDocument
from pymongo.database import Database

from database import create_document, get_db, parse_object_id, serialize_doc, utcnow
from listing import paginate
from logging_config import get_logger
from queries import populate_alternative, populate_alternatives
from routers.alternatives import REFERENCE_IDS, UpdateAlternativeRequest, reference_updates, rename_updates
from schemas import Category as CategorySchema, Role, TechStack as TechStackSchema
from security import public_user, require_admin
from slugs import generate_slug, slug_to_display_name, validate_slug
from voting import refresh_vote_score

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

STATUS_FILTERS = {
    "pending": {"status": "pending"},
    "approved": {"status": "approved"},
    "rejected": {"status": "rejected"},
    "all": {},
}


def _checked_slug(value: Optional[str]) -> Optional[str]:
    if value is not None:
        problem = validate_slug(value)
        if problem:
            raise ValueError(problem)
    return value


class SubmissionUpdate(UpdateAlternativeRequest):
    action: Literal["approve", "reject", "update"] = "update"
    rejection_reason: Optional[str] = None
    slug: Optional[str] = None
    featured: Optional[bool] = None
    health_score: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("slug")
    @classmethod
    def usable_slug(cls, value):
        return _checked_slug(value)


class AdvertisementReview(BaseModel):
    action: Literal["approve", "reject", "update"] = "update"
    rejection_reason: Optional[str] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class TaxonomyRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def usable_slug(cls, value):
        return _checked_slug(value)


class CategoryRequest(TaxonomyRequest):
    description: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None


class TechStackRequest(TaxonomyRequest):
    type: Optional[str] = Field(None, min_length=1)


class UserUpdate(BaseModel):
    role: Role


def _slug_in_use(db: Database, collection: str, slug: str, exclude_id=None) -> bool:
    query = {"slug": slug}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return db[collection].find_one(query, {"_id": 1}) is not None


def _new_name_and_slug(db: Database, collection: str, payload: TaxonomyRequest):
    """Fill whichever of name and slug is missing from the other."""
    if not payload.name and not payload.slug:
        raise HTTPException(status_code=400, detail="name or slug is required")
    slug = payload.slug or generate_slug(payload.name)
    problem = validate_slug(slug)
    if problem:
        raise HTTPException(status_code=400, detail=f"slug: {problem}")
    if _slug_in_use(db, collection, slug):
        raise HTTPException(status_code=409, detail=f'Slug "{slug}" is already in use')
    return payload.name or slug_to_display_name(slug), slug


def _update_taxonomy(db: Database, collection: str, label: str, item_id: str, update: dict):
    oid = parse_object_id(item_id, f"{label} id")
    if "slug" in update and _slug_in_use(db, collection, update["slug"], exclude_id=oid):
        raise HTTPException(status_code=409, detail=f'Slug "{update["slug"]}" is already in use')
    update["updated_at"] = utcnow()
    doc = db[collection].find_one_and_update({"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER)
    if not doc:
        raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
    logger.info("taxonomy_updated", collection=collection, item_id=item_id)
    return serialize_doc(doc)


def _delete_taxonomy(db: Database, collection: str, label: str, item_id: str, reference_field: str):
    """Delete the document and pull its id out of every list that references it."""
    oid = parse_object_id(item_id, f"{label} id")
    if db[collection].delete_one({"_id": oid}).deleted_count == 0:
        raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
    item_id = str(oid)
    detached = db["alternative"].update_many({reference_field: item_id}, {"$pull": {reference_field: item_id}}).modified_count
    logger.info("taxonomy_deleted", collection=collection, item_id=item_id, detached=detached)
    return item_id


@router.get("/submissions")
def list_submissions(
    status: Literal["pending", "approved", "rejected", "all"] = "pending",
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    db: Database = Depends(get_db),
):
    docs = list(db["alternative"].find(STATUS_FILTERS[status]).sort("created_at", -1))
    result = paginate(docs, page, per_page)
    result["items"] = populate_alternatives(db, result["items"], include_private=True)
    return result


@router.put("/submissions/{alternative_id}")
def review_submission(alternative_id: str, payload: SubmissionUpdate, db: Database = Depends(get_db)):
    oid = parse_object_id(alternative_id, "alternative id")
    alt = db["alternative"].find_one({"_id": oid})
    if not alt:
        raise HTTPException(status_code=404, detail="Submission not found")
    now = utcnow()

    update = payload.model_dump(exclude_unset=True, exclude={"action", "rejection_reason", "name", "slug", *REFERENCE_IDS})
    if payload.name is not None:
        update.update(rename_updates(db, alt, payload.name))
    if payload.slug is not None:
        if _slug_in_use(db, "alternative", payload.slug, exclude_id=oid):
            raise HTTPException(status_code=409, detail=f'Slug "{payload.slug}" is already in use')
        update["slug"] = payload.slug
    update.update(reference_updates(payload))
    if payload.action == "approve":
        update.update({"approved": True, "status": "approved", "rejection_reason": None, "rejected_at": None})
    elif payload.action == "reject":
        update.update({
            "approved": False,
            "status": "rejected",
            "rejection_reason": payload.rejection_reason or "No reason provided",
            "rejected_at": now,
        })
    update["updated_at"] = now

    doc = db["alternative"].find_one_and_update({"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER)
    logger.info("submission_reviewed", alternative_id=alternative_id, action=payload.action)
    return populate_alternative(db, doc, include_private=True)


@router.delete("/submissions/{alternative_id}")
def delete_submission(alternative_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(alternative_id, "alternative id")
    if db["alternative"].delete_one({"_id": oid}).deleted_count == 0:
        raise HTTPException(status_code=404, detail="Submission not found")

    alternative_id = str(oid)
    db["vote"].delete_many({"alternative_id": alternative_id})
    db["discussion"].delete_many({"alternative_id": alternative_id})
    db["creatornotification"].delete_many({"alternative_id": alternative_id})
    logger.info("submission_deleted", alternative_id=alternative_id)
    return {"success": True}


@router.put("/advertisements/{advertisement_id}")
def review_advertisement(advertisement_id: str, payload: AdvertisementReview, db: Database = Depends(get_db)):
    oid = parse_object_id(advertisement_id, "advertisement id")
    now = utcnow()

    update = payload.model_dump(exclude_unset=True, exclude={"action", "rejection_reason"})
    if payload.action == "approve":
        update.update({"status": "approved", "approved_at": now, "rejection_reason": None})
        update.setdefault("is_active", True)
    elif payload.action == "reject":
        update.update({
            "status": "rejected",
            "is_active": False,
            "rejection_reason": payload.rejection_reason or "No reason provided",
        })
    update["updated_at"] = now

    doc = db["advertisement"].find_one_and_update({"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER)
    if not doc:
        raise HTTPException(status_code=404, detail="Advertisement not found")
    logger.info("advertisement_reviewed", advertisement_id=advertisement_id, action=payload.action)
    return serialize_doc(doc)


@router.post("/categories", status_code=201)
def create_category(payload: CategoryRequest, db: Database = Depends(get_db)):
    name, slug = _new_name_and_slug(db, "category", payload)
    if payload.parent_id and not db["category"].find_one({"_id": parse_object_id(payload.parent_id, "parent id")}, {"_id": 1}):
        raise HTTPException(status_code=404, detail="Parent category not found")
    category = CategorySchema(
        name=name,
        slug=slug,
        description=payload.description or "",
        icon=payload.icon or "Code",
        parent_id=payload.parent_id,
    )
    doc = create_document(db, "category", category)
    logger.info("category_created", category_id=str(doc["_id"]), slug=slug)
    return serialize_doc(doc)


@router.put("/categories/{category_id}")
def update_category(category_id: str, payload: CategoryRequest, db: Database = Depends(get_db)):
    update = payload.model_dump(exclude_unset=True)
    for field in ("name", "slug"):
        if field in update and update[field] is None:
            raise HTTPException(status_code=400, detail=f"{field}: must not be null")
    if update.get("parent_id"):
        parent_oid = parse_object_id(update["parent_id"], "parent id")
        if parent_oid == parse_object_id(category_id, "category id"):
            raise HTTPException(status_code=400, detail="parent_id: a category cannot be its own parent")
        if not db["category"].find_one({"_id": parent_oid}, {"_id": 1}):
            raise HTTPException(status_code=404, detail="Parent category not found")
    return _update_taxonomy(db, "category", "category", category_id, update)


@router.delete("/categories/{category_id}")
def delete_category(category_id: str, db: Database = Depends(get_db)):
    category_id = _delete_taxonomy(db, "category", "category", category_id, "categories")
    db["proprietarysoftware"].update_many({"categories": category_id}, {"$pull": {"categories": category_id}})
    db["category"].update_many({"parent_id": category_id}, {"$set": {"parent_id": None}})
    return {"success": True}


@router.post("/tech-stacks", status_code=201)
def create_tech_stack(payload: TechStackRequest, db: Database = Depends(get_db)):
    name, slug = _new_name_and_slug(db, "techstack", payload)
    doc = create_document(db, "techstack", TechStackSchema(name=name, slug=slug, type=payload.type or "Tool"))
    logger.info("tech_stack_created", tech_stack_id=str(doc["_id"]), slug=slug)
    return serialize_doc(doc)


@router.put("/tech-stacks/{tech_stack_id}")
def update_tech_stack(tech_stack_id: str, payload: TechStackRequest, db: Database = Depends(get_db)):
    update = payload.model_dump(exclude_unset=True)
    for field in ("name", "slug", "type"):
        if field in update and update[field] is None:
            raise HTTPException(status_code=400, detail=f"{field}: must not be null")
    return _update_taxonomy(db, "techstack", "tech stack", tech_stack_id, update)


@router.delete("/tech-stacks/{tech_stack_id}")
def delete_tech_stack(tech_stack_id: str, db: Database = Depends(get_db)):
    _delete_taxonomy(db, "techstack", "tech stack", tech_stack_id, "tech_stacks")
    return {"success": True}


@router.get("/users")
def list_users(
    role: Optional[Role] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    db: Database = Depends(get_db),
):
    docs = list(db["user"].find({"role": role} if role else {}).sort("created_at", -1))
    result = paginate(docs, page, per_page)
    result["items"] = [{**public_user(doc), "created_at": doc.get("created_at")} for doc in result["items"]]
    return result


@router.put("/users/{user_id}")
def update_user(user_id: str, payload: UserUpdate, db: Database = Depends(get_db), admin=Depends(require_admin)):
    oid = parse_object_id(user_id, "user id")
    if oid == admin["_id"]:
        raise HTTPException(status_code=400, detail="You cannot change your own role")
    doc = db["user"].find_one_and_update(
        {"_id": oid},
        {"$set": {"role": payload.role, "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("user_role_changed", user_id=user_id, role=payload.role)
    return {"user": public_user(doc)}


@router.delete("/users/{user_id}")
def delete_user(user_id: str, db: Database = Depends(get_db), admin=Depends(require_admin)):
    """Remove the account with its sessions, votes and notifications. Comments stay, without an author."""
    oid = parse_object_id(user_id, "user id")
    if oid == admin["_id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if db["user"].delete_one({"_id": oid}).deleted_count == 0:
        raise HTTPException(status_code=404, detail="User not found")

    user_id = str(oid)
    voted = db["vote"].distinct("alternative_id", {"user_id": user_id})
    db["vote"].delete_many({"user_id": user_id})
    for alternative_id in voted:
        refresh_vote_score(db, alternative_id)
    db["session"].delete_many({"user_id": user_id})
    db["creatornotification"].delete_many({"creator_id": user_id})
    logger.info("user_deleted", user_id=user_id, votes_removed=len(voted))
    return {"success": True}


@router.get("/newsletter")
def list_subscribers(
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=500),
    db: Database = Depends(get_db),
):
    docs = list(db["newslettersubscription"].find().sort("created_at", -1))
    result = paginate(docs, page, per_page)
    result["items"] = [serialize_doc(doc) for doc in result["items"]]
    return result


@router.get("/stats")
def admin_stats(db: Database = Depends(get_db)):
    return {
        "total_alternatives": db["alternative"].count_documents({}),
        "approved_alternatives": db["alternative"].count_documents({"status": "approved"}),
        "pending_submissions": db["alternative"].count_documents({"status": "pending"}),
        "rejected_submissions": db["alternative"].count_documents({"status": "rejected"}),
        "total_categories": db["category"].count_documents({}),
        "total_tech_stacks": db["techstack"].count_documents({}),
        "total_users": db["user"].count_documents({}),
        "pending_advertisements": db["advertisement"].count_documents({"status": "pending"}),
        "newsletter_subscribers": db["newslettersubscription"].count_documents({}),
    }
