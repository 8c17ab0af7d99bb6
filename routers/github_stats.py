import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from pymongo.database import Database

import config
from database import get_db
from github import GitHubClient, parse_github_url, sync_github_stats
from logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/github-stats", tags=["github"])


class SyncRequest(BaseModel):
    limit: int = Field(50, ge=1)
    force: bool = False
    slug: Optional[str] = None


def get_github_client():
    client = GitHubClient()
    try:
        yield client
    finally:
        client.close()


def verify_cron_secret(request: Request) -> None:
    if not config.CRON_SECRET:
        return
    expected = f"Bearer {config.CRON_SECRET}"
    if not secrets.compare_digest(request.headers.get("Authorization", "").encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("")
def get_github_stats(url: str, client: GitHubClient = Depends(get_github_client)):
    if not parse_github_url(url):
        raise HTTPException(status_code=400, detail="Invalid GitHub URL")
    stats = client.fetch_stats(url)
    if stats is None:
        raise HTTPException(status_code=502, detail="Failed to fetch GitHub stats")
    return stats.to_dict()


@router.post("/sync", dependencies=[Depends(verify_cron_secret)])
def sync_stats(
    payload: Optional[SyncRequest] = None,
    db: Database = Depends(get_db),
    client: GitHubClient = Depends(get_github_client),
):
    payload = payload or SyncRequest()
    results = sync_github_stats(db, client, limit=payload.limit, force=payload.force, slug=payload.slug)
    return {"success": True, **results}
