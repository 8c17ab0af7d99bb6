import pytest

from voting import apply_vote, resolve_vote


@pytest.mark.parametrize(
    "current, requested, expected",
    [
        (None, 1, 1),
        (None, -1, -1),
        (1, 1, 0),
        (-1, -1, 0),
        (1, -1, -1),
        (-1, 1, 1),
        (1, 0, 0),
        (None, 0, 0),
    ],
)
def test_resolve_vote(current, requested, expected):
    assert resolve_vote(current, requested) == expected


def test_resolve_vote_rejects_other_values():
    with pytest.raises(ValueError):
        resolve_vote(None, 2)


def test_apply_vote_aggregates_across_users(mongo_db, make_alternative):
    alt_id = str(make_alternative()["_id"])
    assert apply_vote(mongo_db, "u1", alt_id, 1) == (1, 1)
    assert apply_vote(mongo_db, "u2", alt_id, 1) == (2, 1)
    assert apply_vote(mongo_db, "u3", alt_id, -1) == (1, -1)
    assert apply_vote(mongo_db, "u1", alt_id, -1) == (-1, -1)
    assert mongo_db["alternative"].find_one({"slug": "project-1"})["vote_score"] == -1
    assert mongo_db["vote"].count_documents({"alternative_id": alt_id}) == 3


def test_vote_toggle_twice_returns_to_zero(client, make_user, make_alternative):
    _, headers = make_user()
    alt_id = str(make_alternative()["_id"])

    first = client.post("/votes", json={"alternative_id": alt_id, "vote_type": 1}, headers=headers)
    assert first.status_code == 200
    assert first.json() == {"vote_score": 1, "user_vote": 1}

    second = client.post("/votes", json={"alternative_id": alt_id, "vote_type": 1}, headers=headers)
    assert second.json() == {"vote_score": 0, "user_vote": 0}

    state = client.get("/votes", params={"alternative_id": alt_id}, headers=headers)
    assert state.json() == {"vote_score": 0, "user_vote": 0}


def test_vote_requires_auth(client, make_alternative):
    alt_id = str(make_alternative()["_id"])
    response = client.post("/votes", json={"alternative_id": alt_id, "vote_type": 1})
    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


def test_vote_validation(client, make_user, make_alternative):
    _, headers = make_user()
    alt_id = str(make_alternative()["_id"])
    assert client.post("/votes", json={"alternative_id": alt_id, "vote_type": 5}, headers=headers).status_code == 400
    assert client.post("/votes", json={"alternative_id": "nope", "vote_type": 1}, headers=headers).status_code == 400
    missing = client.post("/votes", json={"alternative_id": "0" * 24, "vote_type": 1}, headers=headers)
    assert missing.status_code == 404


def test_vote_ids_are_canonical_regardless_of_case(client, mongo_db, make_user, make_alternative):
    alt_id = str(make_alternative()["_id"])
    _, first = make_user(email="first@example.com")
    _, second = make_user(email="second@example.com")

    assert client.post("/votes", json={"alternative_id": alt_id, "vote_type": 1}, headers=first).json()["vote_score"] == 1
    upper = client.post("/votes", json={"alternative_id": alt_id.upper(), "vote_type": 1}, headers=second)
    assert upper.json() == {"vote_score": 2, "user_vote": 1}
    assert set(mongo_db["vote"].distinct("alternative_id")) == {alt_id}

    current = client.get("/votes", params={"alternative_id": alt_id.upper()}, headers=second).json()
    assert current == {"vote_score": 2, "user_vote": 1}
