"""Tests for /users CRUD and friendship endpoints."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from tests.helpers import create_user, user_payload

BASE = "/users"


async def test_create_user_returns_201_with_generated_id(client):
    r = await client.post(BASE, json=user_payload(email="user@mail.ru"))
    assert r.status_code == 201
    body = r.json()
    assert body["id"] == 1
    assert body["email"] == "user@mail.ru"
    assert body["friends"] == []


@pytest.mark.parametrize("name", [None, "", "   "])
async def test_blank_name_defaults_to_login(client, name):
    body = await create_user(client, login="user_login", name=name)
    assert body["name"] == "user_login"


@pytest.mark.parametrize("overrides", [
    {"email": ""},
    {"email": None},
    {"email": "invalid-email"},
    {"login": ""},
    {"login": "login with spaces"},
    {"login": "tab\tlogin"},
    {"birthday": None},
    {"birthday": (date.today() + timedelta(days=1)).isoformat()},
])
async def test_create_invalid_user_returns_400(client, overrides):
    r = await client.post(BASE, json=user_payload(**overrides))
    assert r.status_code == 400


async def test_birthday_today_is_accepted(client):
    r = await client.post(
        BASE, json=user_payload(birthday=date.today().isoformat()))
    assert r.status_code == 201


async def test_duplicate_email_returns_409_case_insensitive(client):
    await create_user(client, email="user@mail.ru")
    r = await client.post(BASE, json=user_payload(email="USER@Mail.ru"))
    assert r.status_code == 409
    assert r.json()["detail"] == "email_taken"


async def test_update_email_frees_old_one(client):
    user = await create_user(client, email="old@mail.ru")

    r = await client.put(BASE, json={"id": user["id"],
                                     "email": "new@mail.ru"})
    assert r.status_code == 200
    assert r.json()["email"] == "new@mail.ru"
    assert r.json()["login"] == user["login"]

    # старый email снова свободен
    await create_user(client, email="old@mail.ru")


async def test_update_to_taken_email_returns_409(client):
    await create_user(client, email="a@mail.ru")
    b = await create_user(client, email="b@mail.ru")
    r = await client.put(BASE, json={"id": b["id"], "email": "A@mail.ru"})
    assert r.status_code == 409


async def test_update_unknown_user_returns_404(client):
    r = await client.put(BASE, json=user_payload(id=999))
    assert r.status_code == 404


async def test_get_unknown_user_returns_404(client):
    r = await client.get(f"{BASE}/3")
    assert r.status_code == 404


async def test_delete_user(client):
    user = await create_user(client)
    assert (await client.delete(f"{BASE}/{user['id']}")).status_code == 204
    assert (await client.get(f"{BASE}/{user['id']}")).status_code == 404
    assert (await client.delete(f"{BASE}/{user['id']}")).status_code == 404


async def test_add_friend_is_mutual(client):
    a, b = await create_user(client), await create_user(client)

    r = await client.put(f"{BASE}/{a['id']}/friends/{b['id']}")
    assert r.status_code == 204

    r = await client.get(f"{BASE}/{a['id']}/friends")
    assert [u["id"] for u in r.json()] == [b["id"]]
    r = await client.get(f"{BASE}/{b['id']}/friends")
    assert [u["id"] for u in r.json()] == [a["id"]]
    r = await client.get(f"{BASE}/{a['id']}")
    assert r.json()["friends"] == [b["id"]]


async def test_add_friend_twice_is_idempotent(client):
    a, b = await create_user(client), await create_user(client)
    await client.put(f"{BASE}/{a['id']}/friends/{b['id']}")
    r = await client.put(f"{BASE}/{b['id']}/friends/{a['id']}")
    assert r.status_code == 204
    r = await client.get(f"{BASE}/{a['id']}/friends")
    assert len(r.json()) == 1


async def test_remove_friend_undoes_both_directions(client):
    a, b = await create_user(client), await create_user(client)
    await client.put(f"{BASE}/{a['id']}/friends/{b['id']}")

    r = await client.delete(f"{BASE}/{a['id']}/friends/{b['id']}")
    assert r.status_code == 204
    assert (await client.get(f"{BASE}/{a['id']}/friends")).json() == []
    assert (await client.get(f"{BASE}/{b['id']}/friends")).json() == []


async def test_remove_absent_friend_is_noop(client):
    a, b = await create_user(client), await create_user(client)
    r = await client.delete(f"{BASE}/{a['id']}/friends/{b['id']}")
    assert r.status_code == 204


async def test_self_friendship_returns_409(client):
    a = await create_user(client)
    r = await client.put(f"{BASE}/{a['id']}/friends/{a['id']}")
    assert r.status_code == 409
    r = await client.delete(f"{BASE}/{a['id']}/friends/{a['id']}")
    assert r.status_code == 409


async def test_friend_with_unknown_user_returns_404(client):
    a = await create_user(client)
    r = await client.put(f"{BASE}/{a['id']}/friends/50")
    assert r.status_code == 404
    r = await client.get(f"{BASE}/50/friends")
    assert r.status_code == 404


async def test_common_friends(client):
    a, b, x, y, z = [await create_user(client) for _ in range(5)]
    for friend in (x, y):
        await client.put(f"{BASE}/{a['id']}/friends/{friend['id']}")
    for friend in (y, z):
        await client.put(f"{BASE}/{b['id']}/friends/{friend['id']}")

    r = await client.get(f"{BASE}/{a['id']}/friends/common/{b['id']}")
    assert r.status_code == 200
    assert [u["id"] for u in r.json()] == [y["id"]]


async def test_common_friends_with_unknown_user_returns_404(client):
    a = await create_user(client)
    r = await client.get(f"{BASE}/{a['id']}/friends/common/99")
    assert r.status_code == 404


async def test_deleting_user_removes_them_from_friend_lists(client):
    a, b = await create_user(client), await create_user(client)
    await client.put(f"{BASE}/{a['id']}/friends/{b['id']}")
    await client.delete(f"{BASE}/{b['id']}")
    assert (await client.get(f"{BASE}/{a['id']}/friends")).json() == []
