"""Directed user -> friend edges."""

from __future__ import annotations

from typing import Dict, Set

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from filmorate_api.db.mongo import current_session
from .base import FriendshipRepo


class InMemoryFriendshipRepo(FriendshipRepo):
    def __init__(self) -> None:
        self._edges: Dict[int, Set[int]] = {}

    async def add(self, user_id: int, friend_id: int) -> bool:
        friends = self._edges.setdefault(user_id, set())
        if friend_id in friends:
            return False
        friends.add(friend_id)
        return True

    async def remove(self, user_id: int, friend_id: int) -> bool:
        friends = self._edges.get(user_id)
        if not friends or friend_id not in friends:
            return False
        friends.discard(friend_id)
        return True

    async def friend_ids(self, user_id: int) -> Set[int]:
        return set(self._edges.get(user_id, ()))

    async def delete_for_user(self, user_id: int) -> int:
        removed = len(self._edges.pop(user_id, ()))
        for friends in self._edges.values():
            if user_id in friends:
                friends.discard(user_id)
                removed += 1
        return removed


class MongoFriendshipRepo(FriendshipRepo):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._col = db['friendship']

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [('user_id', ASCENDING), ('friend_id', ASCENDING)],
            unique=True,
        )
        await self._col.create_index([('friend_id', ASCENDING)])

    async def add(self, user_id: int, friend_id: int) -> bool:
        try:
            await self._col.insert_one(
                {'user_id': user_id, 'friend_id': friend_id},
                session=current_session(),
            )
        except DuplicateKeyError:
            return False
        return True

    async def remove(self, user_id: int, friend_id: int) -> bool:
        res = await self._col.delete_one(
            {'user_id': user_id, 'friend_id': friend_id},
            session=current_session(),
        )
        return res.deleted_count == 1

    async def friend_ids(self, user_id: int) -> Set[int]:
        ids = await self._col.distinct(
            'friend_id', {'user_id': user_id}, session=current_session())
        return set(ids)

    async def delete_for_user(self, user_id: int) -> int:
        res = await self._col.delete_many(
            {'$or': [{'user_id': user_id}, {'friend_id': user_id}]},
            session=current_session(),
        )
        return res.deleted_count
