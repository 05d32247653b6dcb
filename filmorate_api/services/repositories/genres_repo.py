"""Genre reference data and film <-> genre links."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, UpdateOne

from filmorate_api.db.mongo import current_session
from filmorate_api.models.genres import Genre
from .base import GenresRepo, check_id

GENRES: Dict[int, str] = {
    1: 'Комедия',
    2: 'Драма',
    3: 'Мультфильм',
    4: 'Триллер',
    5: 'Документальный',
    6: 'Боевик',
}


class InMemoryGenresRepo(GenresRepo):
    def __init__(self) -> None:
        self._genres = {
            genre_id: Genre(id=genre_id, name=name)
            for genre_id, name in GENRES.items()
        }
        self._film_genres: Dict[int, Set[int]] = {}

    async def find_all(self) -> List[Genre]:
        return list(self._genres.values())

    async def get(self, genre_id: int) -> Optional[Genre]:
        return self._genres.get(check_id(genre_id, 'genre'))

    async def find_for_film(self, film_id: int) -> List[Genre]:
        ids = self._film_genres.get(film_id, set())
        return [self._genres[gid] for gid in sorted(ids) if gid in self._genres]

    async def set_for_film(self, film_id: int, genre_ids: Iterable[int]) -> None:
        self._film_genres[film_id] = set(genre_ids)

    async def delete_for_film(self, film_id: int) -> None:
        self._film_genres.pop(film_id, None)


class MongoGenresRepo(GenresRepo):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._col = db['genres']
        self._links = db['film_genres']

    async def ensure_indexes(self) -> None:
        await self._col.create_index([('genre_id', ASCENDING)], unique=True)
        await self._links.create_index(
            [('film_id', ASCENDING), ('genre_id', ASCENDING)],
            unique=True,
        )

    async def seed(self) -> None:
        """Upsert the fixed genre set; existing rows are left as they are."""
        await self._col.bulk_write([
            UpdateOne(
                {'genre_id': genre_id},
                {'$setOnInsert': {'genre_id': genre_id, 'name': name}},
                upsert=True,
            )
            for genre_id, name in GENRES.items()
        ])

    @staticmethod
    def _to_model(doc: dict) -> Genre:
        return Genre(id=doc['genre_id'], name=doc['name'])

    async def find_all(self) -> List[Genre]:
        cur = self._col.find({}, {'_id': 0}, session=current_session())
        return [self._to_model(d) async for d in cur.sort('genre_id', ASCENDING)]

    async def get(self, genre_id: int) -> Optional[Genre]:
        doc = await self._col.find_one(
            {'genre_id': check_id(genre_id, 'genre')}, {'_id': 0},
            session=current_session())
        return None if doc is None else self._to_model(doc)

    async def find_for_film(self, film_id: int) -> List[Genre]:
        session = current_session()
        ids = await self._links.distinct(
            'genre_id', {'film_id': film_id}, session=session)
        if not ids:
            return []
        cur = self._col.find(
            {'genre_id': {'$in': ids}}, {'_id': 0}, session=session)
        return [self._to_model(d) async for d in cur.sort('genre_id', ASCENDING)]

    async def set_for_film(self, film_id: int, genre_ids: Iterable[int]) -> None:
        session = current_session()
        await self._links.delete_many({'film_id': film_id}, session=session)
        docs = [{'film_id': film_id, 'genre_id': gid}
                for gid in sorted(set(genre_ids))]
        if docs:
            await self._links.insert_many(docs, session=session)

    async def delete_for_film(self, film_id: int) -> None:
        await self._links.delete_many(
            {'film_id': film_id}, session=current_session())
