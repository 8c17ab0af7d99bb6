import pytest

from database import create_document


@pytest.fixture
def admin_headers(make_user):
    _, headers = make_user(email="admin@example.com", role="admin")
    return headers


def test_admin_routes_require_admin(client, make_user):
    _, headers = make_user(email="user@example.com")
    assert client.get("/admin/stats").status_code == 401
    response = client.get("/admin/stats", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


def test_list_submissions_by_status(client, admin_headers, make_alternative):
    make_alternative(approved=False, status="pending", submitter_email="maker@example.com")
    make_alternative(approved=False, status="rejected")
    make_alternative()

    pending = client.get("/admin/submissions", headers=admin_headers).json()
    assert pending["total"] == 1
    assert pending["items"][0]["submitter_email"] == "maker@example.com"
    assert client.get("/admin/submissions", params={"status": "all"}, headers=admin_headers).json()["total"] == 3
    assert client.get("/admin/submissions", params={"status": "bogus"}, headers=admin_headers).status_code == 400


def test_approve_and_reject(client, mongo_db, admin_headers, make_alternative):
    alt = make_alternative(approved=False, status="pending")
    url = f"/admin/submissions/{alt['_id']}"

    rejected = client.put(url, json={"action": "reject"}, headers=admin_headers).json()
    assert rejected["status"] == "rejected"
    assert rejected["rejection_reason"] == "No reason provided"
    assert rejected["rejected_at"]

    approved = client.put(url, json={"action": "approve", "featured": True}, headers=admin_headers).json()
    assert approved["approved"] is True
    assert approved["featured"] is True
    assert approved["rejection_reason"] is None
    assert client.put(f"/admin/submissions/{'0' * 24}", json={"action": "approve"}, headers=admin_headers).status_code == 404


def test_delete_submission_cascades(client, mongo_db, admin_headers, make_alternative):
    alt_id = str(make_alternative()["_id"])
    mongo_db["vote"].insert_one({"user_id": "u", "alternative_id": alt_id, "vote_type": 1})
    mongo_db["discussion"].insert_one({"user_id": "u", "alternative_id": alt_id, "content": "hi"})
    mongo_db["creatornotification"].insert_one({"creator_id": "c", "alternative_id": alt_id, "is_read": False})

    assert client.delete(f"/admin/submissions/{alt_id}", headers=admin_headers).json() == {"success": True}
    for name in ("alternative", "vote", "discussion", "creatornotification"):
        assert mongo_db[name].count_documents({}) == 0
    assert client.delete(f"/admin/submissions/{alt_id}", headers=admin_headers).status_code == 404


def test_review_advertisement(client, mongo_db, admin_headers):
    ad = create_document(mongo_db, "advertisement", {"name": "Acme", "status": "pending", "is_active": False})
    url = f"/admin/advertisements/{ad['_id']}"

    approved = client.put(url, json={"action": "approve", "priority": 3}, headers=admin_headers).json()
    assert approved["status"] == "approved"
    assert approved["is_active"] is True
    assert approved["priority"] == 3

    rejected = client.put(url, json={"action": "reject", "rejection_reason": "Off topic"}, headers=admin_headers).json()
    assert rejected["is_active"] is False
    assert rejected["rejection_reason"] == "Off topic"


def test_stats(client, mongo_db, admin_headers, make_alternative):
    make_alternative()
    make_alternative(approved=False, status="pending")
    mongo_db["newslettersubscription"].insert_one({"email": "a@example.com"})
    stats = client.get("/admin/stats", headers=admin_headers).json()
    assert stats["total_alternatives"] == 2
    assert stats["approved_alternatives"] == 1
    assert stats["pending_submissions"] == 1
    assert stats["total_users"] == 1
    assert stats["newsletter_subscribers"] == 1


def test_profile_update_and_alternatives(client, make_user, make_alternative):
    user, headers = make_user(email="maker@example.com", name="Maker")
    make_alternative(user_id=str(user["_id"]))
    make_alternative(approved=False, status="pending", submitter_email="maker@example.com")
    make_alternative()

    updated = client.put("/profile", json={"bio": "Builds things", "github_username": "maker"}, headers=headers).json()
    assert updated["user"]["bio"] == "Builds things"
    assert updated["user"]["name"] == "Maker"
    assert client.get("/profile", headers=headers).json()["user"]["github_username"] == "maker"
    assert len(client.get("/profile/alternatives", headers=headers).json()) == 2
    assert client.put("/profile", json={"twitter_username": "x" * 16}, headers=headers).status_code == 400


def test_newsletter_subscribe_is_idempotent(client, mongo_db):
    assert client.post("/newsletter", json={"email": "Reader@Example.com"}).json() == {"success": True, "already_subscribed": False}
    assert client.post("/newsletter", json={"email": "reader@example.com"}).json() == {"success": True, "already_subscribed": True}
    assert mongo_db["newslettersubscription"].count_documents({}) == 1
    assert client.post("/newsletter", json={"email": "nope"}).status_code == 400


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Open Source Alternatives API running"}
    assert client.get("/test").status_code == 200


def test_profile_alternatives_match_email_ignoring_case(client, make_user, make_alternative):
    _, headers = make_user(email="maker@example.com")
    make_alternative(approved=False, status="pending", submitter_email="Maker@Example.COM")
    make_alternative(submitter_email="maker@example.com.evil")
    assert len(client.get("/profile/alternatives", headers=headers).json()) == 1


def test_admin_update_rejects_nulls_and_bad_slugs(client, mongo_db, admin_headers, make_alternative):
    alt = make_alternative(approved=False, status="pending")
    url = f"/admin/submissions/{alt['_id']}"
    for field in ("name", "description", "website", "github"):
        response = client.put(url, json={"action": "approve", field: None}, headers=admin_headers)
        assert response.status_code == 400
    assert client.put(url, json={"github": "not a repo"}, headers=admin_headers).status_code == 400
    reserved = client.put(url, json={"slug": "admin"}, headers=admin_headers)
    assert reserved.status_code == 400
    assert reserved.json() == {"error": "slug: Value error, Slug is a reserved word"}
    assert mongo_db["alternative"].find_one({"_id": alt["_id"]})["approved"] is False


def test_admin_rename_and_slug_change(client, admin_headers, make_alternative):
    make_alternative(name="Taken", slug="taken")
    alt = make_alternative(approved=False, status="pending")
    url = f"/admin/submissions/{alt['_id']}"

    assert client.put(url, json={"name": "Fresh Name"}, headers=admin_headers).json()["slug"] == "fresh-name"
    assert client.put(url, json={"slug": "taken"}, headers=admin_headers).status_code == 409
    assert client.put(url, json={"slug": "fresh"}, headers=admin_headers).json()["slug"] == "fresh"
    assert client.put(url, json={"name": "TAKEN"}, headers=admin_headers).status_code == 409


def test_category_crud(client, mongo_db, admin_headers, make_alternative):
    parent = client.post("/admin/categories", json={"name": "Design"}, headers=admin_headers)
    assert parent.status_code == 201
    assert parent.json()["slug"] == "design"
    parent_id = parent.json()["id"]

    child = client.post("/admin/categories", json={"slug": "ui-design", "parent_id": parent_id}, headers=admin_headers).json()
    assert child["name"] == "Ui Design"
    assert child["parent_id"] == parent_id

    assert client.post("/admin/categories", json={"name": "Design"}, headers=admin_headers).status_code == 409
    assert client.post("/admin/categories", json={"slug": "Bad Slug"}, headers=admin_headers).status_code == 400
    assert client.post("/admin/categories", json={}, headers=admin_headers).status_code == 400
    assert client.post("/admin/categories", json={"name": "Orphan", "parent_id": "0" * 24}, headers=admin_headers).status_code == 404

    renamed = client.put(f"/admin/categories/{child['id']}", json={"name": "UI Design"}, headers=admin_headers).json()
    assert renamed["name"] == "UI Design"
    assert client.put(f"/admin/categories/{child['id']}", json={"slug": "design"}, headers=admin_headers).status_code == 409
    assert client.put(f"/admin/categories/{child['id']}", json={"parent_id": child["id"]}, headers=admin_headers).status_code == 400
    assert client.put(f"/admin/categories/{child['id']}", json={"name": None}, headers=admin_headers).status_code == 400

    alt = make_alternative(categories=[parent_id, child["id"]])
    assert client.delete(f"/admin/categories/{parent_id}", headers=admin_headers).json() == {"success": True}
    assert mongo_db["alternative"].find_one({"_id": alt["_id"]})["categories"] == [child["id"]]
    assert mongo_db["category"].find_one({"slug": "ui-design"})["parent_id"] is None
    assert client.delete(f"/admin/categories/{parent_id}", headers=admin_headers).status_code == 404


def test_tech_stack_crud(client, mongo_db, admin_headers, make_alternative):
    created = client.post("/admin/tech-stacks", json={"name": "Python", "type": "Language"}, headers=admin_headers)
    assert created.status_code == 201
    stack_id = created.json()["id"]
    assert created.json()["slug"] == "python"

    updated = client.put(f"/admin/tech-stacks/{stack_id}", json={"type": "Runtime"}, headers=admin_headers).json()
    assert updated["type"] == "Runtime"
    assert client.put(f"/admin/tech-stacks/{'0' * 24}", json={"type": "Tool"}, headers=admin_headers).status_code == 404

    alt = make_alternative(tech_stacks=[stack_id])
    assert client.delete(f"/admin/tech-stacks/{stack_id}", headers=admin_headers).json() == {"success": True}
    assert mongo_db["alternative"].find_one({"_id": alt["_id"]})["tech_stacks"] == []
    assert mongo_db["techstack"].count_documents({}) == 0


def test_user_management(client, mongo_db, make_user, make_alternative):
    admin, headers = make_user(email="admin@example.com", role="admin")
    member, member_headers = make_user(email="member@example.com")
    alt_id = str(make_alternative()["_id"])
    client.post("/votes", json={"alternative_id": alt_id, "vote_type": 1}, headers=member_headers)

    listed = client.get("/admin/users", headers=headers).json()
    assert listed["total"] == 2
    assert {u["email"] for u in listed["items"]} == {"admin@example.com", "member@example.com"}
    assert "password_hash" not in listed["items"][0]
    assert client.get("/admin/users", params={"role": "admin"}, headers=headers).json()["total"] == 1

    promoted = client.put(f"/admin/users/{member['_id']}", json={"role": "moderator"}, headers=headers).json()
    assert promoted["user"]["role"] == "moderator"
    assert client.put(f"/admin/users/{admin['_id']}", json={"role": "user"}, headers=headers).status_code == 400
    assert client.put(f"/admin/users/{member['_id']}", json={"role": "owner"}, headers=headers).status_code == 400

    assert client.delete(f"/admin/users/{admin['_id']}", headers=headers).status_code == 400
    assert client.delete(f"/admin/users/{member['_id']}", headers=headers).json() == {"success": True}
    assert mongo_db["vote"].count_documents({}) == 0
    assert mongo_db["session"].count_documents({"user_id": str(member["_id"])}) == 0
    assert client.get("/votes", params={"alternative_id": alt_id}).json()["vote_score"] == 0
    assert client.delete(f"/admin/users/{member['_id']}", headers=headers).status_code == 404


def test_newsletter_subscribers(client, admin_headers):
    client.post("/newsletter", json={"email": "one@example.com"})
    client.post("/newsletter", json={"email": "two@example.com"})
    body = client.get("/admin/newsletter", headers=admin_headers).json()
    assert body["total"] == 2
    assert {s["email"] for s in body["items"]} == {"one@example.com", "two@example.com"}
