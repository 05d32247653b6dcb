"""Tests for film likes via the API."""

from __future__ import annotations

from tests.helpers import create_film, create_user


async def likes_of(client, film_id: int) -> list:
    r = await client.get(f"/films/{film_id}")
    assert r.status_code == 200
    return r.json()["likesByUsers"]


async def test_put_like_returns_204_and_is_visible_on_film(client):
    film, user = await create_film(client), await create_user(client)

    r = await client.put(f"/films/{film['id']}/like/{user['id']}")
    assert r.status_code == 204
    assert await likes_of(client, film["id"]) == [user["id"]]


async def test_put_like_twice_keeps_single_like(client):
    film, user = await create_film(client), await create_user(client)

    await client.put(f"/films/{film['id']}/like/{user['id']}")
    r = await client.put(f"/films/{film['id']}/like/{user['id']}")
    assert r.status_code == 204
    assert await likes_of(client, film["id"]) == [user["id"]]


async def test_delete_like_removes_it(client):
    film, user = await create_film(client), await create_user(client)

    await client.put(f"/films/{film['id']}/like/{user['id']}")
    r = await client.delete(f"/films/{film['id']}/like/{user['id']}")
    assert r.status_code == 204
    assert await likes_of(client, film["id"]) == []


async def test_delete_like_without_existing_like_returns_204(client):
    film, user = await create_film(client), await create_user(client)

    r = await client.delete(f"/films/{film['id']}/like/{user['id']}")
    assert r.status_code == 204


async def test_like_unknown_film_returns_404(client):
    user = await create_user(client)
    r = await client.put(f"/films/77/like/{user['id']}")
    assert r.status_code == 404
    assert r.json()["detail"] == "film_not_found"


async def test_like_from_unknown_user_returns_404(client):
    film = await create_film(client)
    r = await client.put(f"/films/{film['id']}/like/77")
    assert r.status_code == 404
    assert r.json()["detail"] == "user_not_found"

    r = await client.delete(f"/films/{film['id']}/like/77")
    assert r.status_code == 404


async def test_deleting_user_drops_their_likes(client):
    film, user = await create_film(client), await create_user(client)
    await client.put(f"/films/{film['id']}/like/{user['id']}")

    r = await client.delete(f"/users/{user['id']}")
    assert r.status_code == 204
    assert await likes_of(client, film["id"]) == []
