"""
Trigger the GitHub stats sync endpoint; meant for cron.

    python -m scripts.sync_github_stats --limit 50

Recommended schedule: every 6 hours. SITE_URL and CRON_SECRET come from the
environment (or .env).
"""

import argparse
import os
import sys
import time
from typing import Any, Dict, Optional

import httpx

import config
from logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def trigger_sync(
    site_url: str,
    secret: str = "",
    limit: int = 50,
    force: bool = False,
    slug: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    headers = {"Content-Type": "application/json"}
    if secret:
        headers["Authorization"] = f"Bearer {secret}"
    body: Dict[str, Any] = {"limit": limit, "force": force}
    if slug:
        body["slug"] = slug

    session = client or httpx.Client(timeout=600.0)
    try:
        response = session.post(f"{site_url.rstrip('/')}/github-stats/sync", json=body, headers=headers)
        response.raise_for_status()
        return response.json()
    finally:
        if client is None:
            session.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--site-url", default=os.getenv("SITE_URL", f"http://localhost:{config.PORT}"))
    parser.add_argument("--limit", type=int, default=int(os.getenv("SYNC_LIMIT", 50)))
    parser.add_argument("--force", action="store_true", help="ignore the 6 hour freshness window")
    parser.add_argument("--slug", help="sync a single alternative")
    args = parser.parse_args(argv)

    configure_logging()
    started = time.monotonic()
    logger.info("github_sync_triggered", site_url=args.site_url, limit=args.limit, force=args.force)
    try:
        result = trigger_sync(args.site_url, config.CRON_SECRET, args.limit, args.force, args.slug)
    except httpx.HTTPError as exc:
        logger.error("github_sync_request_failed", error=str(exc))
        return 1

    logger.info(
        "github_sync_completed",
        elapsed=round(time.monotonic() - started, 1),
        total=result.get("total"),
        updated=result.get("updated"),
        skipped=result.get("skipped"),
        failed=result.get("failed"),
    )
    for error in result.get("errors", []):
        logger.warning("github_sync_error", detail=error)
    return 0


if __name__ == "__main__":
    sys.exit(main())
