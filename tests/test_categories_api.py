"""Categories."""


async def test_category_crud(client, auth_headers):
    res = await client.post("/api/v1/categories/", json={"name": "Racing", "icon": "car.png"}, headers=auth_headers)
    assert res.status_code == 201
    category_id = res.json()["id"]

    res = await client.patch(f"/api/v1/categories/{category_id}", json={"name": "Driving"}, headers=auth_headers)
    assert res.json()["name"] == "Driving"
    assert res.json()["icon"] == "car.png"

    res = await client.get("/api/v1/categories/")
    assert [c["name"] for c in res.json()] == ["Driving"]

    res = await client.delete(f"/api/v1/categories/{category_id}", headers=auth_headers)
    assert res.status_code == 204
    assert (await client.get(f"/api/v1/categories/{category_id}")).status_code == 404


async def test_deleting_category_unlinks_games(client, auth_headers, category_ids):
    res = await client.post(
        "/api/v1/games/",
        json={"title": "G", "description": "d", "publish_status": True, "category_ids": category_ids[:2]},
        headers=auth_headers,
    )
    game_id = res.json()["id"]

    await client.delete(f"/api/v1/categories/{category_ids[0]}", headers=auth_headers)

    res = await client.get(f"/api/v1/games/{game_id}")
    assert [c["id"] for c in res.json()["categories"]] == [category_ids[1]]


async def test_category_mutations_require_admin(client):
    assert (await client.post("/api/v1/categories/", json={"name": "x"})).status_code == 401
