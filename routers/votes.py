from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from pymongo.database import Database

from database import get_db, parse_object_id
from security import get_current_user, get_optional_user
from voting import apply_vote

router = APIRouter(prefix="/votes", tags=["votes"])


class VoteRequest(BaseModel):
    alternative_id: str
    vote_type: int


@router.get("")
def get_votes(alternative_id: str, db: Database = Depends(get_db), user=Depends(get_optional_user)):
    oid = parse_object_id(alternative_id, "alternative id")
    alt = db["alternative"].find_one({"_id": oid}, {"vote_score": 1})
    if not alt:
        raise HTTPException(status_code=404, detail="Alternative not found")

    user_vote = 0
    if user:
        vote = db["vote"].find_one({"user_id": str(user["_id"]), "alternative_id": str(oid)})
        user_vote = vote["vote_type"] if vote else 0
    return {"vote_score": alt.get("vote_score", 0), "user_vote": user_vote}


@router.post("")
def cast_vote(payload: VoteRequest, db: Database = Depends(get_db), user=Depends(get_current_user)):
    """Press a vote button. Pressing the button matching the current vote removes it."""
    if payload.vote_type not in (-1, 0, 1):
        raise HTTPException(status_code=400, detail="vote_type: must be -1, 0 or 1")
    oid = parse_object_id(payload.alternative_id, "alternative id")
    if not db["alternative"].find_one({"_id": oid}, {"_id": 1}):
        raise HTTPException(status_code=404, detail="Alternative not found")

    vote_score, user_vote = apply_vote(db, str(user["_id"]), str(oid), payload.vote_type)
    return {"vote_score": vote_score, "user_vote": user_vote}
