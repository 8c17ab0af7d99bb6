from datetime import timedelta

from database import create_document, utcnow


def test_list_only_approved(client, make_alternative):
    make_alternative()
    make_alternative(approved=False, status="pending")
    body = client.get("/alternatives").json()
    assert body["total"] == 1
    assert body["items"][0]["slug"] == "project-1"
    assert body["items"][0]["kind"] == "alternative"
    assert "submitter_email" not in body["items"][0]


def test_list_returns_requested_page(client, make_alternative):
    for n in range(25):
        make_alternative(health_score=100 - n)
    body = client.get("/alternatives", params={"page": 2, "per_page": 10}).json()
    assert [a["slug"] for a in body["items"]] == [f"project-{n}" for n in range(11, 21)]
    assert body["total"] == 25
    assert body["total_pages"] == 3
    assert body["page"] == 2


def test_list_filters_by_slug_references(client, mongo_db, make_alternative):
    design = create_document(mongo_db, "category", {"name": "Design", "slug": "design"})
    figma = create_document(mongo_db, "proprietarysoftware", {"name": "Figma", "slug": "figma", "description": "", "website": ""})
    make_alternative(name="Penpot", slug="penpot", categories=[str(design["_id"])], alternative_to=[str(figma["_id"])])
    make_alternative()

    by_category = client.get("/alternatives", params={"category": "design"}).json()
    assert [a["slug"] for a in by_category["items"]] == ["penpot"]
    assert by_category["items"][0]["categories"] == [{"id": str(design["_id"]), "name": "Design", "slug": "design"}]

    by_product = client.get("/alternatives", params={"alternative_to": "figma"}).json()
    assert [a["slug"] for a in by_product["items"]] == ["penpot"]

    assert client.get("/alternatives", params={"category": "missing"}).status_code == 404


def test_list_self_hosted_and_license(client, make_alternative):
    make_alternative(is_self_hosted=True, license="AGPL-3.0")
    make_alternative(is_self_hosted=False, license="MIT")
    assert client.get("/alternatives", params={"self_hosted": True}).json()["total"] == 1
    assert client.get("/alternatives", params={"license": "mit"}).json()["total"] == 1


def test_list_per_page_is_capped(client):
    assert client.get("/alternatives", params={"per_page": 500}).status_code == 400


def test_list_sponsor_first_and_ads(client, mongo_db, make_alternative):
    now = utcnow()
    for _ in range(6):
        make_alternative(health_score=90)
    make_alternative(name="Sponsor", slug="sponsor", health_score=10, submission_plan="sponsor",
                     sponsor_priority_until=now + timedelta(days=2))
    create_document(mongo_db, "advertisement", {
        "name": "Ad", "description": "An ad", "ad_type": "card", "company_name": "Acme",
        "company_website": "https://acme.example.com", "destination_url": "https://acme.example.com",
        "submitter_email": "ads@example.com", "status": "approved", "is_active": True,
        "start_date": None, "end_date": None, "expires_at": None, "priority": 0,
    })

    items = client.get("/alternatives", params={"ads_every": 3}).json()["items"]
    assert items[0]["slug"] == "sponsor"
    assert items[0]["is_sponsor"] is True
    assert items[3]["kind"] == "advertisement"
    assert sum(1 for i in items if i["kind"] == "advertisement") == 1


def test_featured_prefers_active_sponsors(client, make_alternative):
    now = utcnow()
    make_alternative(name="Featured", slug="featured", featured=True, health_score=95)
    make_alternative(name="Paid", slug="paid", submission_plan="sponsor", featured=True,
                     sponsor_priority_until=now + timedelta(days=1))
    make_alternative(name="Lapsed", slug="lapsed", submission_plan="sponsor",
                     sponsor_priority_until=now - timedelta(days=1))
    slugs = [a["slug"] for a in client.get("/alternatives/featured").json()]
    assert slugs == ["paid", "featured"]


def test_unapproved_is_hidden_except_from_owner(client, make_user, make_alternative):
    owner, owner_headers = make_user(email="owner@example.com")
    _, other_headers = make_user(email="other@example.com")
    alt = make_alternative(approved=False, status="pending", user_id=str(owner["_id"]), submitter_email="owner@example.com")

    assert client.get(f"/alternatives/{alt['slug']}").status_code == 404
    assert client.get(f"/alternatives/{alt['slug']}", headers=other_headers).status_code == 404
    visible = client.get(f"/alternatives/{alt['slug']}", headers=owner_headers)
    assert visible.status_code == 200
    assert visible.json()["submitter_email"] == "owner@example.com"
    assert client.get(f"/alternatives/id/{alt['_id']}", headers=owner_headers).status_code == 200


def test_get_unknown_alternative(client):
    response = client.get("/alternatives/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"error": "Alternative not found"}
    assert client.get("/alternatives/id/not-an-id").status_code == 400


def test_edit_requires_owner(client, make_user, make_alternative):
    owner, _ = make_user(email="owner@example.com")
    _, other_headers = make_user(email="other@example.com")
    alt = make_alternative(user_id=str(owner["_id"]))
    response = client.put(f"/alternatives/{alt['_id']}", json={"name": "Hijacked"}, headers=other_headers)
    assert response.status_code == 403
    assert client.put(f"/alternatives/{alt['_id']}", json={"name": "Anon"}).status_code == 401


def test_free_edit_goes_back_to_review(client, mongo_db, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    alt = make_alternative(user_id=str(owner["_id"]))

    response = client.put(f"/alternatives/{alt['_id']}", json={"short_description": "Updated"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["short_description"] == "Updated"
    stored = mongo_db["alternative"].find_one({"_id": alt["_id"]})
    assert stored["approved"] is False
    assert stored["status"] == "pending"
    assert stored["name"] == alt["name"]

    again = client.put(f"/alternatives/{alt['_id']}", json={"short_description": "Again"}, headers=headers)
    assert again.status_code == 429


def test_sponsor_edit_stays_live(client, mongo_db, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    alt = make_alternative(user_id=str(owner["_id"]), submission_plan="sponsor", last_edited_at=utcnow())
    response = client.put(f"/alternatives/{alt['_id']}", json={"license": "Apache-2.0"}, headers=headers)
    assert response.status_code == 200
    stored = mongo_db["alternative"].find_one({"_id": alt["_id"]})
    assert stored["approved"] is True
    assert stored["license"] == "Apache-2.0"


def test_edit_owner_by_submitter_email(client, make_user, make_alternative):
    _, headers = make_user(email="Maker@Example.com")
    alt = make_alternative(submitter_email="maker@example.com")
    response = client.put(f"/alternatives/{alt['_id']}", json={"website": "https://new.example.com"}, headers=headers)
    assert response.status_code == 200


def card_ad(mongo_db, name, priority):
    return create_document(mongo_db, "advertisement", {
        "name": name, "description": "An ad", "ad_type": "card", "company_name": "Acme",
        "company_website": "https://acme.example.com", "destination_url": "https://acme.example.com",
        "submitter_email": "ads@example.com", "status": "approved", "is_active": True,
        "start_date": None, "end_date": None, "expires_at": None, "priority": priority,
    })


def test_list_ads_capped_and_rotated_across_pages(client, mongo_db, make_alternative):
    for _ in range(12):
        make_alternative()
    for name, priority in (("A", 3), ("B", 2), ("C", 1)):
        card_ad(mongo_db, name, priority)

    def ad_names(**params):
        items = client.get("/alternatives", params={"per_page": 6, "ads_every": 2, **params}).json()["items"]
        return [i["name"] for i in items if i["kind"] == "advertisement"]

    assert ad_names(page=1) == ["A", "B"]
    assert ad_names(page=1, max_ads=1) == ["A"]
    assert ad_names(page=2, max_ads=1) == ["B"]
    assert ad_names(page=1, max_ads=0) == []
    assert client.get("/alternatives", params={"ads_every": 2, "max_ads": -1}).status_code == 400


def test_edit_rejects_null_required_fields(client, mongo_db, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    alt = make_alternative(user_id=str(owner["_id"]))
    for field in ("name", "description", "website", "github"):
        response = client.put(f"/alternatives/{alt['_id']}", json={field: None}, headers=headers)
        assert response.status_code == 400
        assert response.json()["error"].startswith(f"{field}:")
    stored = mongo_db["alternative"].find_one({"_id": alt["_id"]})
    assert stored["name"] == alt["name"]
    assert stored["github"] == alt["github"]
    assert stored["last_edited_at"] is None


def test_edit_rejects_non_github_url(client, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    alt = make_alternative(user_id=str(owner["_id"]))
    response = client.put(f"/alternatives/{alt['_id']}", json={"github": "https://gitlab.com/a/b"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("github:")


def test_rename_updates_slug(client, mongo_db, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    alt = make_alternative(user_id=str(owner["_id"]))
    response = client.put(f"/alternatives/{alt['_id']}", json={"name": "Board Studio"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["slug"] == "board-studio"
    assert mongo_db["alternative"].find_one({"_id": alt["_id"]})["name"] == "Board Studio"


def test_rename_to_existing_name_conflicts(client, mongo_db, make_user, make_alternative):
    owner, headers = make_user(email="owner@example.com")
    make_alternative(name="Penpot", slug="penpot")
    alt = make_alternative(user_id=str(owner["_id"]))
    response = client.put(f"/alternatives/{alt['_id']}", json={"name": "penpot"}, headers=headers)
    assert response.status_code == 409
    assert mongo_db["alternative"].find_one({"_id": alt["_id"]})["slug"] == alt["slug"]
