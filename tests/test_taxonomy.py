import pytest

from database import create_document


@pytest.fixture
def catalog(mongo_db, make_alternative):
    design = create_document(mongo_db, "category", {"name": "Design", "slug": "design", "parent_id": None})
    ui = create_document(mongo_db, "category", {"name": "UI Design", "slug": "ui-design", "parent_id": str(design["_id"])})
    analytics = create_document(mongo_db, "category", {"name": "Analytics", "slug": "analytics", "parent_id": None})
    figma = create_document(mongo_db, "proprietarysoftware", {
        "name": "Figma", "slug": "figma", "description": "Design tool", "website": "https://figma.com",
        "categories": [str(design["_id"])],
    })
    ids = {"design": str(design["_id"]), "ui": str(ui["_id"]), "analytics": str(analytics["_id"]), "figma": str(figma["_id"])}

    make_alternative(name="Penpot", slug="penpot", description="Design and prototyping", health_score=80,
                     categories=[ids["design"], ids["ui"]], alternative_to=[ids["figma"]])
    make_alternative(name="Quant UX", slug="quant-ux", description="Prototype testing", health_score=40,
                     categories=[ids["ui"]], alternative_to=[ids["figma"]])
    make_alternative(name="Hidden Draft", slug="hidden-draft", approved=False, status="pending",
                     categories=[ids["design"]], alternative_to=[ids["figma"]])
    make_alternative(name="Plausible", slug="plausible", description="Privacy friendly web analytics",
                     categories=[ids["analytics"]])
    return ids


def test_categories_are_counted_and_sorted(client, catalog):
    categories = client.get("/categories").json()
    assert [c["slug"] for c in categories] == ["analytics", "design", "ui-design"]
    assert {c["slug"]: c["alternatives_count"] for c in categories} == {"analytics": 1, "design": 1, "ui-design": 2}


def test_category_tree(client, catalog):
    roots = client.get("/categories", params={"tree": True}).json()
    assert [r["slug"] for r in roots] == ["analytics", "design"]
    design = roots[1]
    assert [c["slug"] for c in design["children"]] == ["ui-design"]


def test_category_detail(client, catalog):
    design = client.get("/categories/design").json()
    assert [c["slug"] for c in design["children"]] == ["ui-design"]
    ui = client.get("/categories/ui-design").json()
    assert ui["parent"] == {"id": catalog["design"], "name": "Design", "slug": "design"}
    assert ui["alternatives_count"] == 2
    assert client.get("/categories/missing").status_code == 404


def test_proprietary_detail(client, catalog):
    figma = client.get("/proprietary/figma").json()
    assert [a["slug"] for a in figma["alternatives"]] == ["penpot", "quant-ux"]
    assert figma["alternatives_count"] == 2
    assert figma["categories"] == [{"id": catalog["design"], "name": "Design", "slug": "design"}]
    assert client.get("/proprietary").json()[0]["alternatives_count"] == 2
    assert client.get("/proprietary/sketch").status_code == 404


def test_tags_and_tech_stacks(client, mongo_db, make_alternative):
    python = create_document(mongo_db, "techstack", {"name": "Python", "slug": "python", "type": "Language"})
    create_document(mongo_db, "tag", {"name": "Self-hosted", "slug": "self-hosted"})
    make_alternative(tech_stacks=[str(python["_id"])])
    assert client.get("/tech-stacks").json()[0]["alternatives_count"] == 1
    assert client.get("/tags").json()[0]["alternatives_count"] == 0


def test_search_ranks_proprietary_matches_first(client, catalog):
    body = client.get("/search", params={"q": "figma"}).json()
    assert [a["slug"] for a in body["results"]] == ["penpot", "quant-ux"]
    assert body["proprietary_matches"] == [{"id": catalog["figma"], "name": "Figma", "slug": "figma"}]


def test_search_matches_descriptions_without_duplicates(client, catalog):
    results = client.get("/search", params={"q": "proto"}).json()["results"]
    assert [a["slug"] for a in results] == ["penpot", "quant-ux"]
    assert [a["slug"] for a in client.get("/search", params={"q": "ANALYTICS"}).json()["results"]] == ["plausible"]


def test_search_short_or_special_queries(client, catalog):
    assert client.get("/search", params={"q": "a"}).json() == {"results": [], "proprietary_matches": []}
    assert client.get("/search", params={"q": "(.*"}).json()["results"] == []
