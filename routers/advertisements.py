from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field
from pymongo import ReturnDocument
from pymongo.database import Database

from database import create_document, get_db, parse_object_id, serialize_doc, to_naive_utc, utcnow
from logging_config import get_logger
from queries import find_active_ads, submitted_by
from schemas import Advertisement as AdvertisementSchema
from security import get_current_user, get_optional_user

logger = get_logger(__name__)
router = APIRouter(prefix="/advertisements", tags=["advertisements"])

PUBLIC_FIELDS = (
    "id", "name", "ad_type", "company_name", "company_website", "company_logo", "headline",
    "cta_text", "destination_url", "icon_url", "short_description", "description", "priority",
)


class CreateAdvertisementRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    ad_type: Literal["banner", "card", "popup"]
    company_name: str = Field(..., min_length=1)
    company_website: str = Field(..., min_length=1)
    company_logo: Optional[str] = None
    headline: Optional[str] = None
    cta_text: Optional[str] = None
    destination_url: str = Field(..., min_length=1)
    icon_url: Optional[str] = None
    short_description: Optional[str] = None
    submitter_name: Optional[str] = None
    submitter_email: EmailStr
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


def public_ad(doc):
    item = serialize_doc(doc)
    return {k: item.get(k) for k in PUBLIC_FIELDS}


@router.get("")
def list_advertisements(
    type: Optional[Literal["banner", "card", "popup"]] = None,
    limit: int = Query(20, ge=1, le=100),
    db: Database = Depends(get_db),
):
    ads = find_active_ads(db, type, utcnow(), limit)
    return {"advertisements": [public_ad(ad) for ad in ads]}


@router.post("", status_code=201)
def create_advertisement(payload: CreateAdvertisementRequest, db: Database = Depends(get_db), user=Depends(get_optional_user)):
    start, end = to_naive_utc(payload.start_date), to_naive_utc(payload.end_date)
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="end_date: must not be before start_date")

    data = payload.model_dump()
    data.update(
        cta_text=payload.cta_text or "Learn More",
        submitter_email=payload.submitter_email.lower(),
        start_date=start,
        end_date=end,
    )
    ad = AdvertisementSchema(**data, user_id=str(user["_id"]) if user else None)
    doc = create_document(db, "advertisement", ad)
    logger.info("advertisement_submitted", advertisement_id=str(doc["_id"]), ad_type=payload.ad_type)
    return serialize_doc(doc)


@router.get("/mine")
def my_advertisements(db: Database = Depends(get_db), user=Depends(get_current_user)):
    docs = db["advertisement"].find(submitted_by(user)).sort("created_at", -1)
    return {"advertisements": [serialize_doc(d) for d in docs]}


@router.post("/{advertisement_id}/track")
def track_advertisement(
    advertisement_id: str,
    action: Literal["click", "impression"] = "impression",
    db: Database = Depends(get_db),
):
    field = "clicks" if action == "click" else "impressions"
    doc = db["advertisement"].find_one_and_update(
        {"_id": parse_object_id(advertisement_id, "advertisement id")},
        {"$inc": {field: 1}},
        projection={"impressions": 1, "clicks": 1},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise HTTPException(status_code=404, detail="Advertisement not found")
    return {"success": True, "impressions": doc.get("impressions", 0), "clicks": doc.get("clicks", 0)}
