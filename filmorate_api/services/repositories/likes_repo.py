"""Film <-> user like associations."""

from __future__ import annotations

from typing import Dict, Set

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from filmorate_api.db.mongo import current_session
from .base import LikesRepo


class InMemoryLikesRepo(LikesRepo):
    def __init__(self) -> None:
        self._by_film: Dict[int, Set[int]] = {}

    async def add(self, film_id: int, user_id: int) -> bool:
        users = self._by_film.setdefault(film_id, set())
        if user_id in users:
            return False
        users.add(user_id)
        return True

    async def remove(self, film_id: int, user_id: int) -> bool:
        users = self._by_film.get(film_id)
        if not users or user_id not in users:
            return False
        users.discard(user_id)
        return True

    async def user_ids(self, film_id: int) -> Set[int]:
        return set(self._by_film.get(film_id, ()))

    async def delete_by_film(self, film_id: int) -> int:
        return len(self._by_film.pop(film_id, ()))

    async def delete_by_user(self, user_id: int) -> int:
        removed = 0
        for users in self._by_film.values():
            if user_id in users:
                users.discard(user_id)
                removed += 1
        return removed


class MongoLikesRepo(LikesRepo):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._col = db['likes']

    async def ensure_indexes(self) -> None:
        """Create indexes: unique (film_id, user_id) and user_id filter."""
        await self._col.create_index(
            [('film_id', ASCENDING), ('user_id', ASCENDING)],
            unique=True,
        )
        await self._col.create_index([('user_id', ASCENDING)])

    async def add(self, film_id: int, user_id: int) -> bool:
        try:
            await self._col.insert_one(
                {'film_id': film_id, 'user_id': user_id},
                session=current_session(),
            )
        except DuplicateKeyError:
            return False
        return True

    async def remove(self, film_id: int, user_id: int) -> bool:
        res = await self._col.delete_one(
            {'film_id': film_id, 'user_id': user_id},
            session=current_session(),
        )
        return res.deleted_count == 1

    async def user_ids(self, film_id: int) -> Set[int]:
        ids = await self._col.distinct(
            'user_id', {'film_id': film_id}, session=current_session())
        return set(ids)

    async def delete_by_film(self, film_id: int) -> int:
        res = await self._col.delete_many(
            {'film_id': film_id}, session=current_session())
        return res.deleted_count

    async def delete_by_user(self, user_id: int) -> int:
        res = await self._col.delete_many(
            {'user_id': user_id}, session=current_session())
        return res.deleted_count
