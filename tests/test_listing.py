from datetime import datetime, timedelta

from listing import (
    filter_alternatives,
    intersperse_ads,
    is_active_sponsor,
    paginate,
    rotate_ads,
    select_featured,
    sort_alternatives,
)

NOW = datetime(2025, 6, 1, 12, 0, 0)


def alt(name, **kwargs):
    doc = {"_id": name, "name": name, "health_score": 50, "vote_score": 0, "stars": 0, "submission_plan": "free"}
    doc.update(kwargs)
    return doc


def sponsor(name, **kwargs):
    return alt(name, submission_plan="sponsor", sponsor_priority_until=NOW + timedelta(days=3), **kwargs)


def test_is_active_sponsor():
    assert is_active_sponsor(sponsor("a"), NOW)
    assert not is_active_sponsor(alt("b", submission_plan="sponsor", sponsor_priority_until=NOW - timedelta(seconds=1)), NOW)
    assert not is_active_sponsor(alt("c", sponsor_priority_until=NOW + timedelta(days=1)), NOW)
    assert not is_active_sponsor(alt("d", submission_plan="sponsor"), NOW)


def test_sort_puts_active_sponsors_first():
    items = [alt("high", health_score=99), sponsor("low-sponsor", health_score=10), alt("mid", health_score=70)]
    names = [a["name"] for a in sort_alternatives(items, "health_score", NOW)]
    assert names == ["low-sponsor", "high", "mid"]


def test_sort_options():
    items = [
        alt("beta", vote_score=5, stars=10, created_at=NOW - timedelta(days=1), last_commit=None),
        alt("Alpha", vote_score=1, stars=300, created_at=NOW - timedelta(days=9), last_commit=NOW - timedelta(days=2)),
        alt("gamma", vote_score=9, stars=20, created_at=NOW, last_commit=NOW - timedelta(days=30)),
    ]

    def order(sort_by):
        return [a["name"] for a in sort_alternatives(items, sort_by, NOW)]

    assert order("votes") == ["gamma", "beta", "Alpha"]
    assert order("stars") == ["Alpha", "gamma", "beta"]
    assert order("newest") == ["gamma", "beta", "Alpha"]
    assert order("recent") == ["Alpha", "gamma", "beta"]
    assert order("name") == ["Alpha", "beta", "gamma"]
    assert order("bogus") == order("health_score")


def test_filter_alternatives():
    items = [alt("a", is_self_hosted=True, license="MIT"), alt("b", is_self_hosted=False, license="GPL-3.0"), alt("c", is_self_hosted=True)]
    assert [a["name"] for a in filter_alternatives(items, self_hosted_only=True)] == ["a", "c"]
    assert [a["name"] for a in filter_alternatives(items, license="mit")] == ["a"]
    assert len(filter_alternatives(items)) == 3


def test_paginate_returns_requested_page():
    items = list(range(45))
    page = paginate(items, page=3, per_page=20)
    assert page["items"] == list(range(40, 45))
    assert page["total"] == 45
    assert page["total_pages"] == 3
    assert paginate(items, page=2, per_page=20)["items"] == list(range(20, 40))


def test_paginate_past_end_is_empty():
    page = paginate(list(range(5)), page=4, per_page=2)
    assert page["items"] == []
    assert page["total_pages"] == 3
    assert paginate([], 1, 20)["total_pages"] == 0


def test_intersperse_ads_spacing():
    items = [f"i{n}" for n in range(14)]
    result = intersperse_ads(items, ["ad1", "ad2", "ad3"], interval=6)
    assert result[6] == "ad1"
    assert result[13] == "ad2"
    assert result.count("ad3") == 0
    assert len(result) == 16


def test_intersperse_ads_respects_cap_and_supply():
    items = [f"i{n}" for n in range(30)]
    assert sum(1 for x in intersperse_ads(items, ["ad1", "ad2", "ad3"], interval=6, max_ads=2) if x.startswith("ad")) == 2
    assert sum(1 for x in intersperse_ads(items, ["ad1"], interval=6) if x.startswith("ad")) == 1
    assert intersperse_ads(items, [], interval=6) == items


def test_intersperse_ads_no_trailing_ad():
    items = [f"i{n}" for n in range(12)]
    result = intersperse_ads(items, ["ad1", "ad2"], interval=6)
    assert result[-1] == "i11"
    assert result.count("ad1") == 1


def test_select_featured_dedupes_and_limits():
    s1, s2 = sponsor("s1"), sponsor("s2")
    featured = [alt("f1"), s1, alt("f2"), alt("f3")]
    result = select_featured([s1, s2], featured, limit=4)
    assert [a["name"] for a in result] == ["s1", "s2", "f1", "f2"]


def test_rotate_ads_continues_across_pages():
    ads = ["ad1", "ad2", "ad3"]
    assert rotate_ads(ads, page=1, per_page=12, interval=6) == ["ad1", "ad2", "ad3"]
    assert rotate_ads(ads, page=2, per_page=12, interval=6) == ["ad3", "ad1", "ad2"]
    assert rotate_ads(ads, page=2, per_page=12, interval=6, max_ads=1) == ["ad2", "ad3", "ad1"]
    assert rotate_ads([], page=3, per_page=12, interval=6) == []
