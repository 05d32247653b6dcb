"""MPA rating reference data."""

from __future__ import annotations

from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, UpdateOne

from filmorate_api.db.mongo import current_session
from filmorate_api.models.genres import Mpa
from .base import MpaRepo, check_id

MPA_RATINGS: Dict[int, str] = {
    1: 'G',
    2: 'PG',
    3: 'PG-13',
    4: 'R',
    5: 'NC-17',
}


class InMemoryMpaRepo(MpaRepo):
    def __init__(self) -> None:
        self._ratings = {
            mpa_id: Mpa(id=mpa_id, name=name)
            for mpa_id, name in MPA_RATINGS.items()
        }

    async def find_all(self) -> List[Mpa]:
        return list(self._ratings.values())

    async def get(self, mpa_id: int) -> Optional[Mpa]:
        return self._ratings.get(check_id(mpa_id, 'mpa'))


class MongoMpaRepo(MpaRepo):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._col = db['mpa']

    async def ensure_indexes(self) -> None:
        await self._col.create_index([('mpa_id', ASCENDING)], unique=True)

    async def seed(self) -> None:
        await self._col.bulk_write([
            UpdateOne(
                {'mpa_id': mpa_id},
                {'$setOnInsert': {'mpa_id': mpa_id, 'name': name}},
                upsert=True,
            )
            for mpa_id, name in MPA_RATINGS.items()
        ])

    async def find_all(self) -> List[Mpa]:
        cur = self._col.find({}, {'_id': 0}, session=current_session())
        return [Mpa(id=d['mpa_id'], name=d['name'])
                async for d in cur.sort('mpa_id', ASCENDING)]

    async def get(self, mpa_id: int) -> Optional[Mpa]:
        doc = await self._col.find_one(
            {'mpa_id': check_id(mpa_id, 'mpa')}, {'_id': 0},
            session=current_session())
        return None if doc is None else Mpa(id=doc['mpa_id'], name=doc['name'])
