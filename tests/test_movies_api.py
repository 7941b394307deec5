import pytest
from bson import ObjectId

from movie_cms.crud.movie_crud import MovieCRUD
from movie_cms.database import MOVIES_COLLECTION
from movie_cms.model.movie import Movie
from movie_cms.utils.exceptions import ConflictError
from tests.fixtures.factories import movie_payload

pytestmark = pytest.mark.anyio


# ---------------- create ----------------

async def test_create_movie_returns_stored_record(client, admin_headers):
    resp = await client.post(
        "/api/movie/create",
        json=movie_payload(slug="  the-long-night  ", rating="8", duration="128"),
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Movie created successfully"

    movie = body["movie"]
    assert ObjectId.is_valid(movie["_id"])
    assert movie["slug"] == "the-long-night"
    assert movie["rating"] == 8
    assert movie["duration"] == 128
    assert movie["language"] == ["Hindi", "English"]
    assert movie["redirectUrl"] == "https://example.com/go/the-long-night"
    assert movie["isTrending"] is False
    assert movie["createdAt"] is not None


async def test_create_movie_defaults(client, admin_headers):
    payload = movie_payload()
    for key in ("status", "rating", "isTrending", "language", "quality", "duration"):
        payload.pop(key)
    resp = await client.post("/api/movie/create", json=payload, headers=admin_headers)
    assert resp.status_code == 201, resp.text

    movie = resp.json()["movie"]
    assert movie["status"] == "draft"
    assert movie["rating"] == 0
    assert movie["isTrending"] is False
    assert movie["language"] == []
    assert movie["quality"] == []
    assert movie["duration"] is None


async def test_create_movie_coerces_single_language_string(create_movie):
    movie = await create_movie(language=" Tamil ", quality="4K")
    assert movie["language"] == ["Tamil"]
    assert movie["quality"] == ["4K"]


async def test_create_movie_missing_fields(client, admin_headers):
    resp = await client.post(
        "/api/movie/create",
        json={"title": "Only a title"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Required fields missing"
    assert body["required"] == ["title", "slug", "description", "poster", "redirectUrl"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"slug": "The Long Night"},
        {"rating": 11},
        {"rating": "great"},
        {"quality": ["8K"]},
        {"status": "archived"},
        {"duration": "two hours"},
    ],
)
async def test_create_movie_rejects_invalid_fields(client, admin_headers, overrides):
    resp = await client.post("/api/movie/create", json=movie_payload(**overrides), headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


async def test_create_movie_duplicate_slug_is_409(client, admin_headers, create_movie):
    await create_movie()
    resp = await client.post(
        "/api/movie/create",
        json=movie_payload(title="Another title"),
        headers=admin_headers,
    )
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "Movie with this slug already exists"}


async def test_create_movie_requires_admin(client):
    resp = await client.post("/api/movie/create", json=movie_payload())
    assert resp.status_code == 401


# ---------------- list ----------------

async def test_list_is_newest_first_with_defaults(client, create_movie):
    for i in range(3):
        await create_movie(title=f"Movie {i}", slug=f"movie-{i}")

    resp = await client.get("/api/movie")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["page"] == 1
    assert body["limit"] == 10
    assert body["count"] == 3
    assert body["hasMore"] is False
    assert [m["slug"] for m in body["movies"]] == ["movie-2", "movie-1", "movie-0"]


async def test_list_clamps_limit_and_page(client, create_movie):
    await create_movie()
    resp = await client.get("/api/movie", params={"limit": "1000", "page": "0"})
    body = resp.json()
    assert body["limit"] == 50
    assert body["page"] == 1


async def test_list_paginates_and_reports_full_page_as_has_more(client, create_movie):
    for i in range(4):
        await create_movie(title=f"Movie {i}", slug=f"movie-{i}")

    first = (await client.get("/api/movie", params={"limit": 2})).json()
    assert [m["slug"] for m in first["movies"]] == ["movie-3", "movie-2"]
    assert first["hasMore"] is True

    # exact multiple: the last full page still claims more
    second = (await client.get("/api/movie", params={"limit": 2, "page": 2})).json()
    assert [m["slug"] for m in second["movies"]] == ["movie-1", "movie-0"]
    assert second["hasMore"] is True

    third = (await client.get("/api/movie", params={"limit": 2, "page": 3})).json()
    assert third["movies"] == []
    assert third["hasMore"] is False


async def test_list_filters(client, create_movie):
    await create_movie(title="Night Shift", slug="night-shift", quality=["720p"], language=["Tamil"], rating=5)
    await create_movie(title="Day Break", slug="day-break", quality=["1080p"], status="draft", rating=9)
    await create_movie(title="Night Owl", slug="night-owl", quality=["4K", "720p"], releaseYear=2020)

    async def slugs(**params):
        resp = await client.get("/api/movie", params=params)
        assert resp.status_code == 200
        return sorted(m["slug"] for m in resp.json()["movies"])

    assert await slugs(quality="720p") == ["night-owl", "night-shift"]
    assert await slugs(status="draft") == ["day-break"]
    assert await slugs(language="Tamil") == ["night-shift"]
    assert await slugs(minRating="7") == ["day-break", "night-owl"]
    assert await slugs(year="2020") == ["night-owl"]
    assert await slugs(search="NIGHT") == ["night-owl", "night-shift"]
    assert await slugs(search="night", quality="4K") == ["night-owl"]
    # unknown status is ignored rather than rejected
    assert len(await slugs(status="archived")) == 3


async def test_list_search_is_literal(client, create_movie):
    await create_movie(title="K.G.F (2)", slug="kgf-2")
    await create_movie(title="KxGxF", slug="kxgxf")

    resp = await client.get("/api/movie", params={"search": "k.g.f (2"})
    assert [m["slug"] for m in resp.json()["movies"]] == ["kgf-2"]


async def test_list_trending_filter(client, create_movie):
    await create_movie(title="Hot", slug="hot", isTrending=True)
    await create_movie(title="Cold", slug="cold", isTrending="false")

    trending = (await client.get("/api/movie", params={"isTrending": "true"})).json()
    assert [m["slug"] for m in trending["movies"]] == ["hot"]

    not_trending = (await client.get("/api/movie", params={"isTrending": "false"})).json()
    assert [m["slug"] for m in not_trending["movies"]] == ["cold"]


# ---------------- get one ----------------

async def test_get_movie_by_id(client, create_movie):
    created = await create_movie(status="draft")
    resp = await client.get(f"/api/movie/{created['_id']}")
    assert resp.status_code == 200
    assert resp.json()["movie"]["slug"] == "the-long-night"


async def test_get_movie_invalid_and_unknown_id(client):
    resp = await client.get("/api/movie/not-an-id")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid movie id"}

    resp = await client.get(f"/api/movie/{ObjectId()}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Movie not found"}


# ---------------- update ----------------

async def test_update_applies_only_present_fields(client, admin_headers, create_movie):
    created = await create_movie()
    resp = await client.patch(
        f"/api/movie/update/{created['_id']}",
        json={"rating": 0, "isTrending": "true", "title": "  The Longer Night "},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Movie updated successfully"

    movie = body["movie"]
    assert movie["rating"] == 0
    assert movie["isTrending"] is True
    assert movie["title"] == "The Longer Night"
    # untouched
    assert movie["slug"] == created["slug"]
    assert movie["language"] == created["language"]
    assert movie["duration"] == created["duration"]


async def test_update_slug_uniqueness_excludes_self(client, admin_headers, create_movie):
    first = await create_movie()
    await create_movie(title="Other", slug="other")

    resp = await client.patch(
        f"/api/movie/update/{first['_id']}",
        json={"slug": "the-long-night"},
        headers=admin_headers,
    )
    assert resp.status_code == 200

    resp = await client.patch(
        f"/api/movie/update/{first['_id']}",
        json={"slug": "other"},
        headers=admin_headers,
    )
    assert resp.status_code == 409


@pytest.mark.parametrize("body", [{"title": "  "}, {"slug": "Bad Slug"}, {"rating": -1}, {"status": "gone"}])
async def test_update_rejects_invalid_values(client, admin_headers, create_movie, body):
    created = await create_movie()
    resp = await client.patch(f"/api/movie/update/{created['_id']}", json=body, headers=admin_headers)
    assert resp.status_code == 400


async def test_update_unknown_movie_is_404(client, admin_headers):
    resp = await client.patch(f"/api/movie/update/{ObjectId()}", json={"rating": 5}, headers=admin_headers)
    assert resp.status_code == 404


# ---------------- delete ----------------

async def test_delete_movie_by_body_id(client, admin_headers, create_movie):
    created = await create_movie()
    resp = await client.request("DELETE", "/api/movie/delete", json={"id": created["_id"]}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json() == {
        "success": True,
        "message": "The Long Night deleted successfully",
        "movieId": created["_id"],
    }

    resp = await client.get(f"/api/movie/{created['_id']}")
    assert resp.status_code == 404


async def test_delete_movie_errors(client, admin_headers):
    resp = await client.request("DELETE", "/api/movie/delete", json={}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Movie id is required in body"

    resp = await client.request("DELETE", "/api/movie/delete", json={"id": str(ObjectId())}, headers=admin_headers)
    assert resp.status_code == 404

    resp = await client.request("DELETE", "/api/movie/delete", json={"id": str(ObjectId())})
    assert resp.status_code == 401


# ---------------- dashboard ----------------

async def test_dashboard_counts_and_recent(client, admin_headers, create_movie):
    for i in range(4):
        await create_movie(title=f"Pub {i}", slug=f"pub-{i}")
    await create_movie(title="Draft", slug="draft-one", status="draft")
    await create_movie(title="Blocked", slug="blocked-one", status="blocked", isTrending=True)

    resp = await client.get("/api/movie/dashboard", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["stats"] == {
        "totalMovies": 6,
        "publishedMovies": 4,
        "draftMovies": 1,
        "blockedMovies": 1,
    }

    recent = body["recentMovies"]
    assert [m["slug"] for m in recent] == ["blocked-one", "draft-one", "pub-3", "pub-2", "pub-1"]
    assert set(recent[0]) == {"_id", "title", "slug", "poster", "status", "rating", "isTrending", "createdAt"}
    assert recent[0]["isTrending"] is True


async def test_dashboard_empty_collection(client, admin_headers):
    resp = await client.get("/api/movie/dashboard", headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["stats"]["totalMovies"] == 0
    assert body["recentMovies"] == []


async def test_dashboard_requires_admin(client):
    resp = await client.get("/api/movie/dashboard")
    assert resp.status_code == 401


# ---------------- notifications ----------------

async def test_notification_feed(client, create_movie):
    await create_movie(title="Hidden", slug="hidden", status="draft")
    created = await create_movie(isTrending=True)
    await create_movie(title="No Quality", slug="no-quality", quality=[], language=[])

    resp = await client.get("/api/movie/notification")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert body["unreadCount"] == 2

    bare, trending = body["data"]
    year = created["createdAt"][:4]
    assert trending["id"] == created["_id"]
    assert trending["title"] == f"The Long Night ({year}) Hindi + English"
    assert trending["subtitle"] == "Download now available in 1080p / 720p"
    assert trending["link"] == "https://example.com/go/the-long-night"
    assert trending["time"] == "Just now"
    assert trending["isSeen"] is False
    assert trending["type"] == "trending"

    assert bare["title"] == f"No Quality ({year})"
    assert bare["subtitle"] == "Now available for download"
    assert bare["type"] == "movie"


async def test_notification_feed_is_capped(client, create_movie):
    for i in range(12):
        await create_movie(title=f"Movie {i}", slug=f"movie-{i}")

    body = (await client.get("/api/movie/notification")).json()
    assert body["total"] == 10
    assert body["data"][0]["title"].startswith("Movie 11 ")


# ---------------- numeric bounds ----------------

@pytest.mark.parametrize(
    "params",
    [{"year": "1e23"}, {"minRating": "99999999999999999999999"}, {"year": "1e19", "minRating": "-1e40"}],
)
async def test_list_with_oversized_numeric_filters_is_not_an_error(client, create_movie, params):
    await create_movie()
    resp = await client.get("/api/movie", params=params)
    assert resp.status_code == 200, resp.text
    assert resp.json()["success"] is True


@pytest.mark.parametrize(
    "overrides",
    [{"releaseYear": 1e30}, {"duration": 10 ** 30}, {"releaseDate": "1e25"}],
)
async def test_create_movie_rejects_numbers_beyond_int64(client, admin_headers, overrides):
    resp = await client.post("/api/movie/create", json=movie_payload(**overrides), headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    listing = (await client.get("/api/movie")).json()
    assert listing["count"] == 0


async def test_update_movie_rejects_numbers_beyond_int64(client, admin_headers, create_movie):
    created = await create_movie()
    resp = await client.patch(
        f"/api/movie/update/{created['_id']}",
        json={"duration": 2 ** 64},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert (await client.get(f"/api/movie/{created['_id']}")).json()["movie"]["duration"] == 128


# ---------------- store-level uniqueness ----------------

async def test_slug_index_rejects_duplicates_below_the_api(mongo_db):
    crud = MovieCRUD(mongo_db[MOVIES_COLLECTION])
    movie = Movie(
        title="Twice",
        slug="twice",
        description="d",
        poster="/p.jpg",
        redirect_url="https://example.com/twice",
    )
    await crud.create(movie)
    with pytest.raises(ConflictError) as exc:
        await crud.create(movie.model_copy())
    assert exc.value.message == "Movie with this slug already exists"
    assert len(await crud.get_all()) == 1


async def test_slug_index_maps_update_collisions_to_conflict(mongo_db):
    crud = MovieCRUD(mongo_db[MOVIES_COLLECTION])
    base = dict(description="d", poster="/p.jpg", redirect_url="https://example.com/x")
    await crud.create(Movie(title="A", slug="a", **base))
    second = await crud.create(Movie(title="B", slug="b", **base))

    with pytest.raises(ConflictError):
        await crud.update(second.id, {"slug": "a"})
    assert (await crud.get(second.id)).slug == "b"
