import itertools
from datetime import date
from typing import Any, Dict

from httpx import AsyncClient

from filmorate_api.models.films import NewFilmRequest
from filmorate_api.models.genres import Mpa
from filmorate_api.models.users import NewUserRequest

_seq = itertools.count(1)


def film_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "name": f"Film {next(_seq)}",
        "description": "Some description",
        "releaseDate": "2000-01-01",
        "duration": 120,
        "mpa": {"id": 1},
        "genres": [],
    }
    payload.update(overrides)
    return payload


def user_payload(**overrides: Any) -> Dict[str, Any]:
    n = next(_seq)
    payload = {
        "email": f"user{n}@mail.ru",
        "login": f"login{n}",
        "name": f"User {n}",
        "birthday": "1995-02-13",
    }
    payload.update(overrides)
    return payload


def new_film(**overrides: Any) -> NewFilmRequest:
    data = {
        "name": f"Film {next(_seq)}",
        "description": "Some description",
        "release_date": date(2000, 1, 1),
        "duration": 120,
        "mpa": Mpa(id=1),
    }
    data.update(overrides)
    return NewFilmRequest(**data)


def new_user(**overrides: Any) -> NewUserRequest:
    n = next(_seq)
    data = {
        "email": f"user{n}@mail.ru",
        "login": f"login{n}",
        "name": f"User {n}",
        "birthday": date(1995, 2, 13),
    }
    data.update(overrides)
    return NewUserRequest(**data)


async def create_film(client: AsyncClient, **overrides: Any) -> dict:
    r = await client.post("/films", json=film_payload(**overrides))
    assert r.status_code == 201, r.text
    return r.json()


async def create_user(client: AsyncClient, **overrides: Any) -> dict:
    r = await client.post("/users", json=user_payload(**overrides))
    assert r.status_code == 201, r.text
    return r.json()
