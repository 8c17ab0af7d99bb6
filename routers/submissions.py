import re
from datetime import timedelta
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from database import create_document, get_db, utcnow
from github import parse_github_url
from logging_config import get_logger
from queries import allocate_slug, find_by_name
from routers.alternatives import reference_updates
from schemas import Alternative as AlternativeSchema, AlternativeTags
from security import get_optional_user

logger = get_logger(__name__)
router = APIRouter(prefix="/submit", tags=["submissions"])

SPONSOR_DAYS = 7


class SubmitRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    short_description: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    long_description: Optional[str] = None
    icon_url: Optional[str] = None
    website: str = Field(..., min_length=1)
    github: str = Field(..., min_length=1)
    is_self_hosted: bool = False
    license: Optional[str] = None
    submitter_name: Optional[str] = None
    submitter_email: Optional[str] = None
    screenshots: List[str] = Field(default_factory=list)
    alternative_tags: AlternativeTags = Field(default_factory=AlternativeTags)
    category_ids: List[str] = Field(default_factory=list)
    tag_ids: List[str] = Field(default_factory=list)
    tech_stack_ids: List[str] = Field(default_factory=list)
    alternative_to_ids: List[str] = Field(default_factory=list)
    submission_plan: Literal["free", "sponsor"] = "free"
    sponsor_payment_id: Optional[str] = None

    @model_validator(mode="after")
    def sponsor_needs_payment(self):
        if self.submission_plan == "sponsor" and not self.sponsor_payment_id:
            raise ValueError("Payment is required for sponsor submissions")
        return self


class CheckDuplicateRequest(BaseModel):
    name: Optional[str] = None
    github: Optional[str] = None


def normalize_github(url: str) -> str:
    url = url.strip().rstrip("/")
    return re.sub(r"\.git$", "", url, flags=re.IGNORECASE)


def find_duplicate(db: Database, name: Optional[str] = None, github: Optional[str] = None):
    """Return (field, existing document) for the first clash on name or repository URL."""
    if name:
        existing = find_by_name(db, name)
        if existing:
            return "name", existing
    if github:
        pattern = "^" + re.escape(normalize_github(github)) + r"(\.git)?/?$"
        existing = db["alternative"].find_one({"github": {"$regex": pattern, "$options": "i"}})
        if existing:
            return "github", existing
    return None, None


@router.post("", status_code=201)
def submit_alternative(payload: SubmitRequest, db: Database = Depends(get_db), user=Depends(get_optional_user)):
    slug = allocate_slug(db, payload.name)
    if not slug:
        raise HTTPException(status_code=400, detail="name: must contain letters or numbers")
    if not parse_github_url(payload.github):
        raise HTTPException(status_code=400, detail="github: must be a GitHub repository URL")

    field, _ = find_duplicate(db, payload.name, payload.github)
    if field == "name":
        raise HTTPException(status_code=409, detail=f'An alternative with the name "{payload.name}" already exists')
    if field == "github":
        raise HTTPException(status_code=409, detail="This GitHub repository has already been submitted")

    now = utcnow()
    sponsor = payload.submission_plan == "sponsor"
    until = now + timedelta(days=SPONSOR_DAYS) if sponsor else None
    fields = payload.model_dump(exclude={"category_ids", "tag_ids", "tech_stack_ids", "alternative_to_ids"})
    alternative = AlternativeSchema(
        **fields,
        **reference_updates(payload),
        slug=slug,
        user_id=str(user["_id"]) if user else None,
        health_score=50,
        vote_score=0,
        approved=sponsor,
        status="approved" if sponsor else "pending",
        featured=sponsor,
        newsletter_included=sponsor,
        sponsor_featured_until=until,
        sponsor_priority_until=until,
        sponsor_paid_at=now if sponsor else None,
    )
    if not alternative.submitter_email and user:
        alternative.submitter_email = user["email"]
    if alternative.submitter_email:
        alternative.submitter_email = alternative.submitter_email.strip().lower()

    try:
        doc = create_document(db, "alternative", alternative)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=f'An alternative with the name "{payload.name}" already exists')

    logger.info("alternative_submitted", alternative_id=str(doc["_id"]), slug=slug, plan=payload.submission_plan)
    message = (
        "Your project is now live! It will be featured on the homepage for 7 days and included in our weekly newsletter."
        if sponsor
        else "Alternative submitted successfully! It will be reviewed before being published."
    )
    return {
        "success": True,
        "message": message,
        "id": str(doc["_id"]),
        "slug": slug,
        "plan": payload.submission_plan,
        "approved": sponsor,
        "features": {
            "featured_until": until.isoformat(),
            "priority_until": until.isoformat(),
            "newsletter": True,
        } if sponsor else None,
    }


@router.post("/check-duplicate")
def check_duplicate(payload: CheckDuplicateRequest, db: Database = Depends(get_db)):
    if not payload.name and not payload.github:
        raise HTTPException(status_code=400, detail="name or github is required")
    field, existing = find_duplicate(db, payload.name, payload.github)
    if not existing:
        return {"duplicate": False}
    return {
        "duplicate": True,
        "field": field,
        "existing": {"id": str(existing["_id"]), "name": existing.get("name"), "slug": existing.get("slug")},
    }
