"""Game CRUD, listings and play count."""
from sqlalchemy import func, select

from gameportal.database import async_session_maker
from gameportal.models import Game, GameCategory


def _game_payload(**overrides):
    payload = {
        "title": "Space Runner",
        "description": "Endless runner in space",
        "rating": 4.5,
        "publish_status": True,
    }
    payload.update(overrides)
    return payload


async def _create(client, auth_headers, **overrides):
    res = await client.post("/api/v1/games/", json=_game_payload(**overrides), headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()


# ===========================================================================
# Create
# ===========================================================================

async def test_create_game_with_categories(client, auth_headers, category_ids):
    game = await _create(client, auth_headers, category_ids=category_ids[:2])

    assert game["title"] == "Space Runner"
    assert game["rating"] == "4.5"
    assert game["play_count"] == 0
    assert game["published_at"] is not None
    assert sorted(c["name"] for c in game["categories"]) == ["Action", "Puzzle"]


async def test_create_unpublished_game_has_no_publish_date(client, auth_headers):
    game = await _create(client, auth_headers, publish_status=False)
    assert game["published_at"] is None


async def test_create_with_unknown_category_writes_nothing(client, auth_headers, category_ids):
    res = await client.post(
        "/api/v1/games/",
        json=_game_payload(category_ids=[category_ids[0], "nope"]),
        headers=auth_headers,
    )

    assert res.status_code == 400
    assert "nope" in res.json()["detail"]
    async with async_session_maker() as s:
        assert await s.scalar(select(func.count(Game.id))) == 0
        assert await s.scalar(select(func.count(GameCategory.id))) == 0


async def test_create_requires_admin(client):
    res = await client.post("/api/v1/games/", json=_game_payload())
    assert res.status_code == 401


async def test_create_validates_payload(client, auth_headers):
    res = await client.post("/api/v1/games/", json={"title": ""}, headers=auth_headers)
    assert res.status_code == 422


# ===========================================================================
# Read
# ===========================================================================

async def test_public_listing_hides_unpublished(client, auth_headers):
    await _create(client, auth_headers, title="Visible")
    await _create(client, auth_headers, title="Hidden", publish_status=False)

    res = await client.get("/api/v1/games/")

    assert [g["title"] for g in res.json()] == ["Visible"]


async def test_public_listing_search(client, auth_headers):
    await _create(client, auth_headers, title="Space Runner")
    await _create(client, auth_headers, title="Farm Life", description="Grow SPACE potatoes")
    await _create(client, auth_headers, title="Chess", description="Classic")

    res = await client.get("/api/v1/games/", params={"search": "space"})

    assert sorted(g["title"] for g in res.json()) == ["Farm Life", "Space Runner"]


async def test_get_game_and_missing_game(client, auth_headers):
    game = await _create(client, auth_headers)

    res = await client.get(f"/api/v1/games/{game['id']}")
    assert res.status_code == 200
    assert res.json()["id"] == game["id"]

    res = await client.get("/api/v1/games/does-not-exist")
    assert res.status_code == 404


async def test_trending_lists_only_published_trending(client, auth_headers):
    await _create(client, auth_headers, title="Hot", is_trending=True)
    await _create(client, auth_headers, title="Hot but hidden", is_trending=True, publish_status=False)
    await _create(client, auth_headers, title="Cold")

    res = await client.get("/api/v1/games/trending")

    assert [g["title"] for g in res.json()] == ["Hot"]


async def test_new_lists_published_games(client, auth_headers):
    await _create(client, auth_headers, title="One")
    await _create(client, auth_headers, title="Draft", publish_status=False)

    res = await client.get("/api/v1/games/new")

    assert [g["title"] for g in res.json()] == ["One"]


async def test_admin_list_paginates_and_sorts(client, auth_headers):
    for title in ("Charlie", "alpha", "Bravo"):
        await _create(client, auth_headers, title=title, publish_status=False)

    res = await client.get(
        "/api/v1/games/admin/list",
        params={"sort_by": "title", "sort_order": "ASC", "page": 1, "limit": 2},
        headers=auth_headers,
    )

    body = res.json()
    assert res.status_code == 200
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert len(body["data"]) == 2

    res = await client.get(
        "/api/v1/games/admin/list",
        params={"sort_by": "title", "sort_order": "ASC", "page": 2, "limit": 2},
        headers=auth_headers,
    )
    assert len(res.json()["data"]) == 1


async def test_admin_list_rejects_unknown_sort_field(client, auth_headers):
    res = await client.get("/api/v1/games/admin/list", params={"sort_by": "password"}, headers=auth_headers)
    assert res.status_code == 422


async def test_admin_list_requires_admin(client):
    res = await client.get("/api/v1/games/admin/list")
    assert res.status_code == 401


# ===========================================================================
# Update / delete
# ===========================================================================

async def test_update_replaces_categories(client, auth_headers, category_ids):
    game = await _create(client, auth_headers, category_ids=category_ids[:2])

    res = await client.patch(
        f"/api/v1/games/{game['id']}",
        json={"category_ids": [category_ids[1], category_ids[2]], "title": "Renamed"},
        headers=auth_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Renamed"
    assert body["description"] == "Endless runner in space"
    assert sorted(c["name"] for c in body["categories"]) == ["Action", "Arcade"]


async def test_update_without_categories_keeps_links(client, auth_headers, category_ids):
    game = await _create(client, auth_headers, category_ids=category_ids[:1])

    res = await client.patch(f"/api/v1/games/{game['id']}", json={"rating": 3.0}, headers=auth_headers)

    assert res.json()["rating"] == "3.0"
    assert [c["name"] for c in res.json()["categories"]] == ["Puzzle"]


async def test_update_publishing_stamps_published_at(client, auth_headers):
    game = await _create(client, auth_headers, publish_status=False)

    res = await client.patch(f"/api/v1/games/{game['id']}", json={"publish_status": True}, headers=auth_headers)

    assert res.json()["published_at"] is not None


async def test_update_missing_game(client, auth_headers):
    res = await client.patch("/api/v1/games/missing", json={"title": "x"}, headers=auth_headers)
    assert res.status_code == 404


async def test_delete_game(client, auth_headers, category_ids):
    game = await _create(client, auth_headers, category_ids=category_ids)

    res = await client.delete(f"/api/v1/games/{game['id']}", headers=auth_headers)
    assert res.status_code == 204

    res = await client.delete(f"/api/v1/games/{game['id']}", headers=auth_headers)
    assert res.status_code == 404
    async with async_session_maker() as s:
        assert await s.scalar(select(func.count(GameCategory.id))) == 0


# ===========================================================================
# Play count
# ===========================================================================

async def test_increment_play_count(client, game_id):
    for expected in (1, 2, 3):
        res = await client.post(f"/api/v1/games/{game_id}/increment-play-count")
        assert res.status_code == 200
        assert res.json() == {"id": game_id, "play_count": expected}

    res = await client.get(f"/api/v1/games/{game_id}")
    assert res.json()["play_count"] == 3


async def test_increment_play_count_missing_game(client):
    res = await client.post("/api/v1/games/missing/increment-play-count")
    assert res.status_code == 404
