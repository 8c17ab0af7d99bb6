from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from pymongo.database import Database

from database import get_db, utcnow
from queries import populate_alternatives, submitted_by
from security import get_current_user, public_user

router = APIRouter(prefix="/profile", tags=["profile"])


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    website: Optional[str] = None
    github_username: Optional[str] = Field(None, max_length=39)
    twitter_username: Optional[str] = Field(None, max_length=15)


@router.get("")
def get_profile(user=Depends(get_current_user)):
    return {"user": public_user(user)}


@router.put("")
def update_profile(payload: UpdateProfileRequest, db: Database = Depends(get_db), user=Depends(get_current_user)):
    update = payload.model_dump(exclude_unset=True)
    if update:
        update["updated_at"] = utcnow()
        db["user"].update_one({"_id": user["_id"]}, {"$set": update})
    return {"user": public_user(db["user"].find_one({"_id": user["_id"]}))}


@router.get("/alternatives")
def my_alternatives(db: Database = Depends(get_db), user=Depends(get_current_user)):
    """Everything the user submitted, whatever its review status."""
    docs = db["alternative"].find(submitted_by(user)).sort("created_at", -1)
    return populate_alternatives(db, docs, include_private=True)
