import pytest
from sqlalchemy.exc import OperationalError

from movie_reviews import create_app
from movie_reviews.errors import StorageUnavailable, translate_storage_errors


def test_sign_up(client):
    res = client.post("/users", json={
        "username": "malachi", "email": "m.spencer@makers.com", "password": "2020",
    })

    assert res.status_code == 201
    assert isinstance(res.get_json()["user_id"], int)


def test_sign_up_rejects_bad_email(client):
    res = client.post("/users", json={"username": "malachi", "email": "nope", "password": "2020"})

    assert res.status_code == 400
    assert res.get_json()["details"][0]["field"] == "email"


def test_sign_up_rejects_missing_body(client):
    res = client.post("/users", data="not json", content_type="text/plain")

    assert res.status_code == 400


def test_sign_up_duplicate_is_conflict(client):
    body = {"username": "malachi", "email": "m.spencer@makers.com", "password": "2020"}
    client.post("/users", json=body)

    assert client.post("/users", json=body).status_code == 409


def test_review_lifecycle(client, user_id):
    res = client.post("/reviews", json={
        "user_id": user_id, "movie_id": 1, "title": "Loved it",
        "body": "One of the best", "time": "10:40",
    })
    assert res.status_code == 201
    review = res.get_json()
    assert review["username"] == "malachi"
    assert review["movie_id"] == "1"

    assert [r["review_id"] for r in client.get(f"/users/{user_id}/reviews").get_json()] == [review["review_id"]]
    assert len(client.get("/movies/1/reviews").get_json()) == 1

    res = client.patch(f"/reviews/{review['review_id']}", json={"title": "Loved the film", "body": "Favourite"})
    assert res.status_code == 200
    assert res.get_json()["title"] == "Loved the film"
    assert res.get_json()["time"] == "10:40"

    res = client.delete(f"/reviews/{review['review_id']}")
    assert res.get_json() == {"status": "deleted"}
    assert client.delete(f"/reviews/{review['review_id']}").status_code == 404
    assert client.patch(f"/reviews/{review['review_id']}", json={"title": "x", "body": "y"}).status_code == 404


def test_review_rejects_bad_time(client, user_id):
    res = client.post("/reviews", json={
        "user_id": user_id, "movie_id": 1, "title": "t", "body": "b", "time": "25:99",
    })

    assert res.status_code == 400


def test_review_for_unknown_user_is_conflict(client):
    res = client.post("/reviews", json={
        "user_id": 999, "movie_id": 1, "title": "t", "body": "b", "time": "10:00",
    })

    assert res.status_code == 409


def test_watchlist_routes(client, user_id):
    assert client.post("/watchlist", json={"user_id": user_id, "movie_id": 1}).status_code == 201
    assert client.post("/watchlist", json={"movie_id": 2}).status_code == 201

    res = client.get(f"/users/{user_id}/watchlist")
    assert res.get_json() == {"user_id": user_id, "movie_ids": ["1"]}

    assert client.delete(f"/users/{user_id}/watchlist/1").get_json() == {"status": "deleted"}
    assert client.delete(f"/users/{user_id}/watchlist/1").status_code == 404


def test_storage_unavailable_is_503(app, client, stores, monkeypatch):
    def broken(*args, **kwargs):
        with translate_storage_errors("list reviews"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(stores["reviews"], "all_for_movie", broken)

    res = client.get("/movies/1/reviews")
    assert res.status_code == 503


def test_translate_chains_original_error():
    original = OperationalError("SELECT 1", {}, Exception("gone"))

    with pytest.raises(StorageUnavailable) as info:
        with translate_storage_errors("ping"):
            raise original

    assert info.value.__cause__ is original


def test_create_app_needs_a_database(monkeypatch):
    monkeypatch.setattr("movie_reviews.config.Config.SQLALCHEMY_DATABASE_URI", None)

    with pytest.raises(ValueError):
        create_app()
