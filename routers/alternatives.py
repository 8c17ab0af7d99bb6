from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator
from pymongo.database import Database

from database import get_db, parse_object_id, serialize_doc, utcnow
from github import parse_github_url
from listing import (
    DEFAULT_SORT,
    filter_alternatives,
    intersperse_ads,
    is_active_sponsor,
    paginate,
    rotate_ads,
    select_featured,
    sort_alternatives,
)
from logging_config import get_logger
from queries import (
    allocate_slug,
    find_active_ads,
    find_by_name,
    find_by_slug,
    owns_alternative,
    populate_alternative,
    populate_alternatives,
)
from schemas import AlternativeTags
from security import get_current_user, get_optional_user, is_admin

logger = get_logger(__name__)
router = APIRouter(prefix="/alternatives", tags=["alternatives"])

FREE_EDIT_INTERVAL = timedelta(days=30)

# request field -> stored reference field
REFERENCE_IDS = {
    "category_ids": "categories",
    "tag_ids": "tags",
    "tech_stack_ids": "tech_stacks",
    "alternative_to_ids": "alternative_to",
}

# May be left out of an edit but never set to null
REQUIRED_FIELDS = ("name", "description", "website", "github")


class UpdateAlternativeRequest(BaseModel):
    """Listing edit. Omitted fields are left alone."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    short_description: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    long_description: Optional[str] = None
    icon_url: Optional[str] = None
    website: Optional[str] = Field(None, min_length=1)
    github: Optional[str] = Field(None, min_length=1)
    is_self_hosted: Optional[bool] = None
    license: Optional[str] = None
    screenshots: Optional[List[str]] = None
    alternative_tags: Optional[AlternativeTags] = None
    category_ids: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = None
    tech_stack_ids: Optional[List[str]] = None
    alternative_to_ids: Optional[List[str]] = None

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("github")
    @classmethod
    def github_repository(cls, value):
        if value is not None and not parse_github_url(value):
            raise ValueError("must be a GitHub repository URL")
        return value


def reference_updates(payload: BaseModel) -> dict:
    """Validated reference id lists from a request body, keyed by stored field."""
    update = {}
    for request_field, stored_field in REFERENCE_IDS.items():
        ids = getattr(payload, request_field, None)
        if ids is None:
            continue
        for ref in ids:
            parse_object_id(ref, request_field)
        update[stored_field] = list(dict.fromkeys(ids))
    return update


def rename_updates(db: Database, alt, name: str) -> dict:
    """Name and slug for a renamed alternative; 409 when another listing has the name."""
    if name == alt.get("name"):
        return {}
    if find_by_name(db, name, exclude_id=alt["_id"]):
        raise HTTPException(status_code=409, detail=f'An alternative with the name "{name}" already exists')
    slug = allocate_slug(db, name, exclude_id=alt["_id"])
    if not slug:
        raise HTTPException(status_code=400, detail="name: must contain letters or numbers")
    return {"name": name, "slug": slug}


@router.get("")
def list_alternatives(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    tech_stack: Optional[str] = None,
    alternative_to: Optional[str] = None,
    self_hosted: bool = False,
    license: Optional[str] = None,
    sort: str = DEFAULT_SORT,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    ads_every: Optional[int] = Query(None, ge=1, le=50),
    max_ads: Optional[int] = Query(None, ge=0),
    db: Database = Depends(get_db),
):
    query = {"approved": True}
    slug_filters = (
        (category, "category", "categories"),
        (tag, "tag", "tags"),
        (tech_stack, "techstack", "tech_stacks"),
        (alternative_to, "proprietarysoftware", "alternative_to"),
    )
    for slug, collection, field in slug_filters:
        if not slug:
            continue
        ref = find_by_slug(db, collection, slug)
        if not ref:
            raise HTTPException(status_code=404, detail=f"Unknown {collection}: {slug}")
        query[field] = str(ref["_id"])

    now = utcnow()
    docs = filter_alternatives(db["alternative"].find(query), self_hosted_only=self_hosted, license=license)
    result = paginate(sort_alternatives(docs, sort, now), page, per_page)

    sponsor_ids = {str(d["_id"]) for d in result["items"] if is_active_sponsor(d, now)}
    items = []
    for alt in populate_alternatives(db, result["items"]):
        alt["kind"] = "alternative"
        alt["is_sponsor"] = alt["id"] in sponsor_ids
        items.append(alt)

    if ads_every:
        ads = [{**serialize_doc(ad), "kind": "advertisement"} for ad in find_active_ads(db, "card", now)]
        ads = rotate_ads(ads, page, per_page, ads_every, max_ads)
        items = intersperse_ads(items, ads, interval=ads_every, max_ads=max_ads)

    result["items"] = items
    return result


@router.get("/featured")
def featured_alternatives(limit: int = Query(9, ge=1, le=50), db: Database = Depends(get_db)):
    now = utcnow()
    sponsors = [a for a in db["alternative"].find({"approved": True, "submission_plan": "sponsor"}) if is_active_sponsor(a, now)]
    featured = db["alternative"].find({"approved": True, "featured": True}).sort("health_score", -1).limit(limit)
    return populate_alternatives(db, select_featured(sort_alternatives(sponsors, now=now), featured, limit))


@router.get("/id/{alternative_id}")
def get_alternative_by_id(alternative_id: str, db: Database = Depends(get_db), user=Depends(get_optional_user)):
    alt = db["alternative"].find_one({"_id": parse_object_id(alternative_id, "alternative id")})
    return _visible(db, alt, user)


@router.get("/{slug}")
def get_alternative(slug: str, db: Database = Depends(get_db), user=Depends(get_optional_user)):
    return _visible(db, find_by_slug(db, "alternative", slug), user)


def _visible(db: Database, alt, user):
    # Unapproved listings are only shown to their owner and admins
    if not alt:
        raise HTTPException(status_code=404, detail="Alternative not found")
    privileged = owns_alternative(user, alt) or is_admin(user)
    if not alt.get("approved") and not privileged:
        raise HTTPException(status_code=404, detail="Alternative not found")
    item = populate_alternative(db, alt, include_private=privileged)
    item["is_sponsor"] = is_active_sponsor(alt, utcnow())
    return item


@router.put("/{alternative_id}")
def update_alternative(
    alternative_id: str,
    payload: UpdateAlternativeRequest,
    db: Database = Depends(get_db),
    user=Depends(get_current_user),
):
    oid = parse_object_id(alternative_id, "alternative id")
    alt = db["alternative"].find_one({"_id": oid})
    if not alt:
        raise HTTPException(status_code=404, detail="Alternative not found")

    admin = is_admin(user)
    if not admin and not owns_alternative(user, alt):
        raise HTTPException(status_code=403, detail="You do not have permission to edit this alternative")

    now = utcnow()
    is_sponsor = alt.get("submission_plan") == "sponsor"
    last_edit = alt.get("last_edited_at")
    if not admin and not is_sponsor and last_edit and now - last_edit < FREE_EDIT_INTERVAL:
        raise HTTPException(status_code=429, detail="Free listings can be edited once every 30 days")

    update = payload.model_dump(exclude_unset=True, exclude=set(REFERENCE_IDS) | {"name"})
    if payload.name is not None:
        update.update(rename_updates(db, alt, payload.name))
    update.update(reference_updates(payload))
    update.update({
        "approved": is_sponsor,
        "status": "approved" if is_sponsor else "pending",
        "rejection_reason": None,
        "rejected_at": None,
        "last_edited_at": now,
        "updated_at": now,
    })
    db["alternative"].update_one({"_id": oid}, {"$set": update})
    logger.info("alternative_updated", alternative_id=alternative_id, user_id=str(user["_id"]), resubmitted=not is_sponsor)

    return populate_alternative(db, db["alternative"].find_one({"_id": oid}), include_private=True)
