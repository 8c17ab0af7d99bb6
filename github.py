"""
GitHub repository statistics and the health score derived from them.
"""

import math
import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pymongo.database import Database

import config
from database import to_naive_utc, utcnow
from logging_config import get_logger

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
STALE_AFTER = timedelta(hours=6)
MAX_SYNC_LIMIT = 200
MAX_ERROR_DETAILS = 10

_URL_PATTERNS = (
    re.compile(r"github\.com/([^/]+)/([^/?#]+)"),
    re.compile(r"github\.com:([^/]+)/([^/?#]+)"),
)
_LAST_PAGE = re.compile(r'[?&]page=(\d+)[^>]*>;\s*rel="last"')


@dataclass
class GitHubStats:
    stars: int
    forks: int
    contributors: int
    last_commit: Optional[datetime]
    open_issues: int
    license: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    health_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stars": self.stars,
            "forks": self.forks,
            "contributors": self.contributors,
            "last_commit": self.last_commit.isoformat() if self.last_commit else None,
            "open_issues": self.open_issues,
            "license": self.license,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "health_score": self.health_score,
        }


def parse_github_url(url: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return (owner, repo) for a GitHub URL, or None when it is not one."""
    if not url:
        return None
    for pattern in _URL_PATTERNS:
        match = pattern.search(url)
        if match:
            repo = re.sub(r"\.git$", "", match.group(2))
            if repo:
                return match.group(1), repo
    return None


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def calculate_health_score(
    stars: int,
    forks: int,
    contributors: int,
    last_commit: Optional[datetime],
    created_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> int:
    """
    Score a repository from 0 to 100.

    Popularity (stars, forks, contributors) scales logarithmically and is
    worth up to 60 points, commit recency up to 30 and project age up to 10.
    """
    now = now or utcnow()
    score = 0.0

    if stars > 0:
        score += min(25, math.log10(stars + 1) * 6.25)
    if forks > 0:
        score += min(15, math.log10(forks + 1) * 5)
    if contributors > 0:
        score += min(20, math.log10(contributors + 1) * 10)

    if last_commit is not None:
        days = (now - last_commit).total_seconds() / 86400
        if days <= 7:
            score += 30
        elif days <= 30:
            score += 25
        elif days <= 90:
            score += 18
        elif days <= 180:
            score += 10
        elif days <= 365:
            score += 5

    if created_at is not None:
        years = (now - created_at).total_seconds() / (86400 * 365)
        if years >= 5:
            score += 10
        elif years >= 2:
            score += 7
        elif years >= 1:
            score += 4
        else:
            score += 2
    else:
        score += 2

    return int(round(min(100, max(0, score))))


class GitHubClient:
    """Thin wrapper over the GitHub REST API; pass `session` to reuse or mock transport."""

    def __init__(self, token: Optional[str] = None, session: Optional[httpx.Client] = None, base_url: str = GITHUB_API_URL):
        self.token = token if token is not None else config.GITHUB_TOKEN
        self.base_url = base_url.rstrip("/")
        self._session = session or httpx.Client(timeout=15.0)

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "OSS-Finder",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _count_contributors(self, owner: str, repo: str) -> int:
        try:
            response = self._session.get(
                f"{self.base_url}/repos/{owner}/{repo}/contributors",
                params={"per_page": 1, "anon": 1},
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("github_contributors_failed", owner=owner, repo=repo, error=str(exc))
            return 0
        if response.status_code != 200:
            return 0
        link = response.headers.get("Link")
        if link:
            match = _LAST_PAGE.search(link)
            if match:
                return int(match.group(1))
        if not response.content:
            return 0
        body = response.json()
        return len(body) if isinstance(body, list) else 0

    def fetch_stats(self, url: str, now: Optional[datetime] = None) -> Optional[GitHubStats]:
        parsed = parse_github_url(url)
        if not parsed:
            logger.warning("github_url_invalid", url=url)
            return None
        owner, repo = parsed

        try:
            response = self._session.get(f"{self.base_url}/repos/{owner}/{repo}", headers=self._headers())
        except httpx.HTTPError as exc:
            logger.error("github_request_failed", owner=owner, repo=repo, error=str(exc))
            return None
        if response.status_code != 200:
            logger.error("github_api_error", owner=owner, repo=repo, status=response.status_code)
            return None

        data = response.json()
        contributors = self._count_contributors(owner, repo)
        last_commit = _parse_timestamp(data.get("pushed_at"))
        created_at = _parse_timestamp(data.get("created_at"))
        stars = data.get("stargazers_count") or 0
        forks = data.get("forks_count") or 0
        license_info = data.get("license") or {}

        return GitHubStats(
            stars=stars,
            forks=forks,
            contributors=contributors,
            last_commit=last_commit,
            open_issues=data.get("open_issues_count") or 0,
            license=license_info.get("spdx_id"),
            created_at=created_at,
            updated_at=_parse_timestamp(data.get("updated_at")),
            health_score=calculate_health_score(stars, forks, contributors, last_commit, created_at, now),
        )

    def close(self) -> None:
        self._session.close()


def _stats_unchanged(alt: Dict[str, Any], stats: GitHubStats) -> bool:
    return (
        alt.get("stars") == stats.stars
        and alt.get("forks") == stats.forks
        and alt.get("contributors") == stats.contributors
        and alt.get("health_score") == stats.health_score
        and alt.get("last_commit") == stats.last_commit
    )


def sync_github_stats(
    db: Database,
    client: GitHubClient,
    limit: int = 50,
    force: bool = False,
    slug: Optional[str] = None,
    delay: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Refresh GitHub statistics on approved alternatives.

    Without `force` or `slug` only alternatives that were never synced or
    were synced more than six hours ago are picked, oldest first.
    """
    now = now or utcnow()
    delay = config.GITHUB_SYNC_DELAY if delay is None else delay
    limit = max(1, min(limit, MAX_SYNC_LIMIT))

    query: Dict[str, Any] = {"approved": True, "github": {"$nin": [None, ""]}}
    if slug:
        query["slug"] = slug
    elif not force:
        query["$or"] = [
            {"github_synced_at": None},
            {"github_synced_at": {"$lt": now - STALE_AFTER}},
        ]

    candidates = list(db["alternative"].find(query).sort("github_synced_at", 1).limit(limit))
    logger.info("github_sync_started", candidates=len(candidates), force=force, slug=slug)

    results = {"total": len(candidates), "updated": 0, "skipped": 0, "failed": 0, "errors": []}
    errors: List[str] = results["errors"]

    for index, alt in enumerate(candidates):
        if index and delay:
            time.sleep(delay)
        stats = client.fetch_stats(alt["github"], now=now)
        if stats is None:
            results["failed"] += 1
            if len(errors) < MAX_ERROR_DETAILS:
                errors.append(f"{alt.get('name')}: failed to fetch stats")
            continue

        if _stats_unchanged(alt, stats):
            db["alternative"].update_one({"_id": alt["_id"]}, {"$set": {"github_synced_at": now}})
            results["skipped"] += 1
            continue

        update = {
            "stars": stats.stars,
            "forks": stats.forks,
            "contributors": stats.contributors,
            "last_commit": stats.last_commit,
            "health_score": stats.health_score,
            "github_synced_at": now,
        }
        if stats.license and not alt.get("license"):
            update["license"] = stats.license
        db["alternative"].update_one({"_id": alt["_id"]}, {"$set": update})
        results["updated"] += 1

    logger.info(
        "github_sync_finished",
        total=results["total"],
        updated=results["updated"],
        skipped=results["skipped"],
        failed=results["failed"],
    )
    return results
