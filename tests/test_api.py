import asyncio
from datetime import timedelta

from bson import ObjectId
from fastapi.testclient import TestClient

from app.api.deps import get_cache
from app.core.security import create_access_token
from app.server import app
from app.services import movie_service as movie_service_module
from tests.factories import make_movie


def insert_movie(db, **overrides):
    result = asyncio.run(db["movies"].insert_one(make_movie(**overrides)))
    return str(result.inserted_id)


def movie_body(**overrides):
    body = {k: v for k, v in make_movie(**overrides).items() if k != "reviews"}
    return body


# --- Auth ---

def test_admin_route_requires_token(client):
    response = client.post("/api/categories", json={"title": "Action"})

    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, no token"}


def test_admin_route_rejects_regular_user(client, user_headers):
    response = client.post("/api/categories", json={"title": "Action"}, headers=user_headers)

    assert response.status_code == 403
    assert "message" in response.json()


def test_expired_token_is_rejected(client, admin_user):
    token = create_access_token(str(admin_user["_id"]), expires_delta=timedelta(minutes=-5))

    response = client.delete("/api/movies", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_unknown_user_is_rejected(client):
    token = create_access_token(str(ObjectId()))

    response = client.post(f"/api/movies/{ObjectId()}/reviews", json={"rating": 3, "comment": "x"},
                           headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


# --- Categories ---

def test_category_crud(client, admin_headers):
    created = client.post("/api/categories", json={"title": "Action"}, headers=admin_headers)
    assert created.status_code == 201
    category_id = created.json()["id"]

    listed = client.get("/api/categories")
    assert [c["title"] for c in listed.json()] == ["Action"]

    updated = client.put(f"/api/categories/{category_id}", json={"title": ""}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["title"] == "Action"

    deleted = client.delete(f"/api/categories/{category_id}", headers=admin_headers)
    assert deleted.json() == {"message": "Category removed"}
    assert client.get("/api/categories").json() == []


def test_missing_category_is_404(client, admin_headers):
    response = client.delete(f"/api/categories/{ObjectId()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Category not found"}


# --- Movies: public ---

def test_list_movies_response_shape(client, db):
    for i in range(12):
        insert_movie(db, name=f"Movie {i}", language="English" if i % 2 else "French")

    response = client.get("/api/movies", params={"language": "English", "pageNumber": "2"})

    body = response.json()
    assert response.status_code == 200
    assert set(body) == {"movies", "page", "pages", "totalMovies"}
    assert body["page"] == 2
    assert body["totalMovies"] == 6
    assert body["pages"] == 1
    assert body["movies"] == []


def test_non_numeric_page_defaults_to_first(client, db):
    insert_movie(db)

    body = client.get("/api/movies", params={"pageNumber": "abc"}).json()

    assert body["page"] == 1
    assert len(body["movies"]) == 1


def test_bad_numeric_filter_is_400(client):
    response = client.get("/api/movies", params={"year": "soon"})

    assert response.status_code == 400
    assert "message" in response.json()


def test_get_movie_and_404(client, db):
    movie_id = insert_movie(db, name="Ledger")

    assert client.get(f"/api/movies/{movie_id}").json()["name"] == "Ledger"

    missing = client.get(f"/api/movies/{ObjectId()}")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Movie not found"}


def test_top_rated_and_random_are_not_captured_by_id_route(client, db):
    insert_movie(db, name="Low", rate=1)
    insert_movie(db, name="High", rate=5)

    top = client.get("/api/movies/rated/top")
    random = client.get("/api/movies/random/all")

    assert [m["name"] for m in top.json()] == ["High", "Low"]
    assert random.status_code == 200
    assert len(random.json()) == 2


def test_import_replaces_catalog(client, db, monkeypatch):
    for i in range(3):
        insert_movie(db, name=f"Old {i}")
    monkeypatch.setattr(movie_service_module, "MOVIES_DATA", [movie_body(name="S1"), movie_body(name="S2")])

    response = client.post("/api/movies/import")

    assert response.status_code == 201
    assert sorted(m["name"] for m in response.json()) == ["S1", "S2"]
    assert client.get("/api/movies").json()["totalMovies"] == 2


# --- Reviews ---

def test_review_flow(client, db, user_headers, regular_user):
    movie_id = insert_movie(db)

    first = client.post(f"/api/movies/{movie_id}/reviews", json={"rating": 4, "comment": "Good"}, headers=user_headers)
    again = client.post(f"/api/movies/{movie_id}/reviews", json={"rating": 1, "comment": "Bad"}, headers=user_headers)

    assert first.status_code == 201
    assert first.json() == {"message": "Review added"}
    assert again.status_code == 400
    assert again.json() == {"message": "You already reviewed this movie"}

    movie = client.get(f"/api/movies/{movie_id}").json()
    assert movie["numberOfReviews"] == 1
    assert movie["rate"] == 4
    assert movie["reviews"][0]["userName"] == regular_user["fullName"]
    assert movie["reviews"][0]["userId"] == str(regular_user["_id"])


def test_non_finite_rating_is_rejected(client, db, user_headers):
    movie_id = insert_movie(db, rate=3, numberOfReviews=0)
    headers = {**user_headers, "Content-Type": "application/json"}

    for literal in ("NaN", "Infinity", "-Infinity"):
        response = client.post(
            f"/api/movies/{movie_id}/reviews",
            content=f'{{"rating": {literal}, "comment": "x"}}',
            headers=headers,
        )
        assert response.status_code == 400

    movie = client.get(f"/api/movies/{movie_id}").json()
    assert movie["reviews"] == []
    assert movie["rate"] == 3
    assert movie["numberOfReviews"] == 0


def test_review_requires_authentication(client, db):
    movie_id = insert_movie(db)

    response = client.post(f"/api/movies/{movie_id}/reviews", json={"rating": 4, "comment": "Good"})

    assert response.status_code == 401


def test_review_on_missing_movie_is_404(client, user_headers):
    response = client.post(f"/api/movies/{ObjectId()}/reviews", json={"rating": 4, "comment": "x"}, headers=user_headers)

    assert response.status_code == 404


# --- Movies: admin ---

def test_create_movie(client, admin_headers, admin_user):
    response = client.post("/api/movies", json=movie_body(name="Iron Tide"), headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Iron Tide"
    assert body["userId"] == str(admin_user["_id"])
    assert body["reviews"] == []


def test_create_movie_with_missing_fields_is_400(client, admin_headers):
    response = client.post("/api/movies", json={"name": "Half a movie"}, headers=admin_headers)

    assert response.status_code == 400
    assert "desc" in response.json()["message"]


def test_update_movie_is_sparse(client, db, admin_headers):
    movie_id = insert_movie(db, name="Old", desc="Keep")

    response = client.put(f"/api/movies/{movie_id}", json={"name": "New", "desc": ""}, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["name"] == "New"
    assert response.json()["desc"] == "Keep"


def test_update_with_non_finite_rate_is_400(client, db, admin_headers):
    movie_id = insert_movie(db, rate=2)

    response = client.put(
        f"/api/movies/{movie_id}",
        content='{"rate": Infinity}',
        headers={**admin_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert client.get(f"/api/movies/{movie_id}").json()["rate"] == 2


def test_update_missing_movie_is_404(client, admin_headers):
    response = client.put(f"/api/movies/{ObjectId()}", json={"name": "x"}, headers=admin_headers)

    assert response.status_code == 404


def test_delete_movie_and_delete_all(client, db, admin_headers):
    movie_id = insert_movie(db)
    insert_movie(db)
    insert_movie(db)

    single = client.delete(f"/api/movies/{movie_id}", headers=admin_headers)
    assert single.json() == {"message": "Movie removed"}
    assert client.delete(f"/api/movies/{movie_id}", headers=admin_headers).status_code == 404

    everything = client.delete("/api/movies", headers=admin_headers)
    assert everything.json() == {"message": "All movies removed"}
    assert client.get("/api/movies").json()["totalMovies"] == 0


def test_health(client):
    assert client.get("/api/health/health").json() == {"status": "ok"}


def test_unavailable_database_is_503():
    app.dependency_overrides[get_cache] = lambda: None
    try:
        response = TestClient(app).get("/api/movies")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json() == {"message": "Database service not available."}
