"""Service-level behaviour on isolated in-memory storages."""

from __future__ import annotations

import asyncio

import pytest

from filmorate_api.core.exceptions import (
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from filmorate_api.models.films import UpdateFilmRequest
from filmorate_api.models.genres import Genre, Mpa
from filmorate_api.models.users import UpdateUserRequest
from tests.helpers import new_film, new_user


async def test_create_film_resolves_references(films_service):
    film = await films_service.create(
        new_film(mpa=Mpa(id=4), genres=[Genre(id=5)]))
    assert film.id == 1
    assert film.mpa == Mpa(id=4, name="R")
    assert film.genres == [Genre(id=5, name="Документальный")]


async def test_create_film_unknown_genre_leaves_store_empty(films_service):
    with pytest.raises(NotFoundError):
        await films_service.create(new_film(genres=[Genre(id=42)]))
    assert await films_service.find_all() == []


async def test_update_round_trip_preserves_untouched_fields(films_service):
    created = await films_service.create(
        new_film(description="keep me", genres=[Genre(id=2)]))
    updated = await films_service.update(
        UpdateFilmRequest(id=created.id, name="New name"))

    assert updated.name == "New name"
    for field in ("description", "release_date", "duration", "mpa",
                  "genres", "likes_by_users"):
        assert getattr(updated, field) == getattr(created, field)


async def test_like_is_idempotent(films_service, users_service):
    film = await films_service.create(new_film())
    user = await users_service.create(new_user())

    await films_service.add_like(film.id, user.id)
    await films_service.add_like(film.id, user.id)
    assert (await films_service.get(film.id)).likes_by_users == [user.id]

    await films_service.remove_like(film.id, user.id)
    await films_service.remove_like(film.id, user.id)
    assert (await films_service.get(film.id)).likes_by_users == []


async def test_like_requires_existing_user(films_service):
    film = await films_service.create(new_film())
    with pytest.raises(NotFoundError):
        await films_service.add_like(film.id, 3)


async def test_popular_count_must_be_positive(films_service):
    for count in (0, -1, None):
        with pytest.raises(ValidationError):
            await films_service.find_popular(count)


async def test_popular_ranking(films_service, users_service):
    films = [await films_service.create(new_film()) for _ in range(3)]
    users = [await users_service.create(new_user()) for _ in range(2)]
    # лайки [2, 1, 0]
    for user in users:
        await films_service.add_like(films[0].id, user.id)
    await films_service.add_like(films[1].id, users[0].id)

    popular = await films_service.find_popular(2)
    assert [f.id for f in popular] == [films[0].id, films[1].id]


async def test_concurrent_likes_are_all_recorded(films_service,
                                                 users_service):
    film = await films_service.create(new_film())
    users = [await users_service.create(new_user()) for _ in range(10)]

    await asyncio.gather(*(films_service.add_like(film.id, u.id)
                           for u in users for _ in range(2)))
    likes = (await films_service.get(film.id)).likes_by_users
    assert likes == sorted(u.id for u in users)


async def test_user_update_merges_fields(users_service):
    user = await users_service.create(new_user(name="Name"))
    updated = await users_service.update(
        UpdateUserRequest(id=user.id, login="new_login"))
    assert updated.login == "new_login"
    assert updated.name == "Name"
    assert updated.email == user.email


async def test_friendship_is_symmetric(users_service):
    a = await users_service.create(new_user())
    b = await users_service.create(new_user())

    await users_service.add_friend(a.id, b.id)
    assert [u.id for u in await users_service.find_friends(b.id)] == [a.id]

    await users_service.remove_friend(b.id, a.id)
    assert await users_service.find_friends(a.id) == []
    assert await users_service.find_friends(b.id) == []


async def test_self_friendship_is_duplicate(users_service):
    a = await users_service.create(new_user())
    with pytest.raises(DuplicateError):
        await users_service.add_friend(a.id, a.id)
    with pytest.raises(DuplicateError):
        await users_service.remove_friend(a.id, a.id)


async def test_missing_user_checked_before_self_friendship(users_service):
    with pytest.raises(NotFoundError):
        await users_service.add_friend(9, 9)


async def test_common_friends_intersection(users_service):
    a, b, x, y, z = [await users_service.create(new_user())
                     for _ in range(5)]
    await users_service.add_friend(a.id, x.id)
    await users_service.add_friend(a.id, y.id)
    await users_service.add_friend(b.id, y.id)
    await users_service.add_friend(b.id, z.id)

    common = await users_service.find_common_friends(a.id, b.id)
    assert [u.id for u in common] == [y.id]
