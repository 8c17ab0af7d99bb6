from typing import Optional, Tuple

from pymongo.database import Database

from database import parse_object_id, utcnow
from logging_config import get_logger

logger = get_logger(__name__)

VALID_VOTES = (-1, 0, 1)


def resolve_vote(current: Optional[int], requested: int) -> int:
    """
    Work out the vote to store after a user presses a vote button.

    Pressing the button matching the current vote clears it; 0 always clears.
    """
    if requested not in VALID_VOTES:
        raise ValueError(f"Invalid vote value: {requested}")
    if requested == 0 or requested == current:
        return 0
    return requested


def compute_vote_score(db: Database, alternative_id: str) -> int:
    pipeline = [
        {"$match": {"alternative_id": alternative_id}},
        {"$group": {"_id": "$alternative_id", "score": {"$sum": "$vote_type"}}},
    ]
    result = list(db["vote"].aggregate(pipeline))
    return int(result[0]["score"]) if result else 0


def refresh_vote_score(db: Database, alternative_id: str) -> int:
    vote_score = compute_vote_score(db, alternative_id)
    db["alternative"].update_one(
        {"_id": parse_object_id(alternative_id, "alternative id")},
        {"$set": {"vote_score": vote_score}},
    )
    return vote_score


def apply_vote(db: Database, user_id: str, alternative_id: str, requested: int) -> Tuple[int, int]:
    """Persist the resolved vote and refresh the alternative's vote_score.

    Returns (vote_score, user_vote).
    """
    existing = db["vote"].find_one({"user_id": user_id, "alternative_id": alternative_id})
    current = existing["vote_type"] if existing else None
    user_vote = resolve_vote(current, requested)

    now = utcnow()
    if user_vote == 0:
        db["vote"].delete_one({"user_id": user_id, "alternative_id": alternative_id})
    else:
        db["vote"].update_one(
            {"user_id": user_id, "alternative_id": alternative_id},
            {
                "$set": {"vote_type": user_vote, "updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

    vote_score = refresh_vote_score(db, alternative_id)
    logger.info("vote_recorded", alternative_id=alternative_id, user_id=user_id, vote=user_vote, vote_score=vote_score)
    return vote_score, user_vote
