from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from pymongo.database import Database

from database import get_db, utcnow
from logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/newsletter", tags=["newsletter"])


class SubscribeRequest(BaseModel):
    email: EmailStr


@router.post("")
def subscribe(payload: SubscribeRequest, db: Database = Depends(get_db)):
    email = payload.email.lower()
    now = utcnow()
    result = db["newslettersubscription"].update_one(
        {"email": email},
        {"$setOnInsert": {"email": email, "created_at": now, "updated_at": now}},
        upsert=True,
    )
    subscribed = result.upserted_id is not None
    if subscribed:
        logger.info("newsletter_subscribed")
    return {"success": True, "already_subscribed": not subscribed}
