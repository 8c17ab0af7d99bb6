"""
List helpers for alternative documents: sponsor detection, filtering,
sorting, pagination, ad interspersion and featured selection.

All functions work on plain dicts as read from MongoDB and never touch the
database themselves.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

SORT_OPTIONS = ("health_score", "votes", "stars", "recent", "newest", "name")
DEFAULT_SORT = "health_score"

_OLDEST = datetime.min


def is_active_sponsor(alt: Dict[str, Any], now: datetime) -> bool:
    until = alt.get("sponsor_priority_until")
    return alt.get("submission_plan") == "sponsor" and until is not None and until > now


def _sort_key(sort_by: str):
    if sort_by == "votes":
        return lambda a: (-(a.get("vote_score") or 0),)
    if sort_by == "stars":
        return lambda a: (-(a.get("stars") or 0),)
    if sort_by == "recent":
        return lambda a: a.get("last_commit") or _OLDEST
    if sort_by == "newest":
        return lambda a: a.get("created_at") or _OLDEST
    if sort_by == "name":
        return lambda a: (a.get("name") or "").lower()
    return lambda a: (-(a.get("health_score") or 0),)


def sort_alternatives(items: Sequence[Dict[str, Any]], sort_by: str = DEFAULT_SORT, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Active sponsors first, then everyone else; each group ordered by `sort_by`."""
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    if sort_by not in SORT_OPTIONS:
        sort_by = DEFAULT_SORT
    key = _sort_key(sort_by)
    descending = sort_by in ("recent", "newest")

    sponsors = [a for a in items if is_active_sponsor(a, now)]
    others = [a for a in items if not is_active_sponsor(a, now)]
    return sorted(sponsors, key=key, reverse=descending) + sorted(others, key=key, reverse=descending)


def filter_alternatives(items: Sequence[Dict[str, Any]], self_hosted_only: bool = False, license: Optional[str] = None) -> List[Dict[str, Any]]:
    result = list(items)
    if self_hosted_only:
        result = [a for a in result if a.get("is_self_hosted")]
    if license:
        wanted = license.lower()
        result = [a for a in result if (a.get("license") or "").lower() == wanted]
    return result


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    page = max(1, page)
    per_page = max(1, per_page)
    total = len(items)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": math.ceil(total / per_page) if total else 0,
    }


def intersperse_ads(items: Sequence[Any], ads: Sequence[Any], interval: int = 6, max_ads: Optional[int] = None) -> List[Any]:
    """
    Insert one ad after every `interval` items.

    Ads are used in order and each at most once, so the number inserted is
    bounded by len(ads) and by max_ads. No ad is placed after the last item.
    """
    if interval <= 0 or not ads:
        return list(items)
    cap = len(ads) if max_ads is None else min(max_ads, len(ads))

    result = []
    ad_index = 0
    for index, item in enumerate(items):
        result.append(item)
        is_last = index == len(items) - 1
        if (index + 1) % interval == 0 and not is_last and ad_index < cap:
            result.append(ads[ad_index])
            ad_index += 1
    return result


def rotate_ads(ads: Sequence[Any], page: int, per_page: int, interval: int, max_ads: Optional[int] = None) -> List[Any]:
    """Start each page where the previous one left off in the ad list."""
    if not ads or interval <= 0:
        return list(ads)
    slots = per_page // interval
    if max_ads is not None:
        slots = min(slots, max_ads)
    start = ((page - 1) * slots) % len(ads)
    return list(ads[start:]) + list(ads[:start])

def select_featured(sponsors: Sequence[Dict[str, Any]], featured: Sequence[Dict[str, Any]], limit: int = 9) -> List[Dict[str, Any]]:
    result = []
    seen = set()
    for alt in list(sponsors) + list(featured):
        key = str(alt.get("_id", alt.get("id")))
        if key in seen:
            continue
        seen.add(key)
        result.append(alt)
        if len(result) >= limit:
            break
    return result
