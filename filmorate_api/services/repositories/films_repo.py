"""Film records for the in-memory and Mongo backends."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from filmorate_api.core.exceptions import DuplicateError, NotFoundError
from filmorate_api.db.mongo import current_session
from filmorate_api.models.films import Film
from filmorate_api.models.genres import Mpa
from .base import FilmsRepo, check_id, next_id

logger = logging.getLogger(__name__)


def _genre_ids(film: Film) -> List[int]:
    return sorted({genre.id for genre in film.genres})


class InMemoryFilmsRepo(FilmsRepo):
    """Films kept in a dict; genre links and likes live in their repos."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._films: Dict[int, Film] = {}
        self._names: Dict[str, int] = {}

    def _check_name_free(self, name: str, film_id: Optional[int] = None) -> None:
        if not self.unique_names:
            return
        owner = self._names.get(name.lower())
        if owner is not None and owner != film_id:
            logger.warning('film_name_taken', extra={'film_name': name})
            raise DuplicateError('film_name_taken')

    def _require(self, film_id: Optional[int]) -> Film:
        check_id(film_id, 'film')
        stored = self._films.get(film_id)
        if stored is None:
            raise NotFoundError('film_not_found')
        return stored

    async def create(self, film: Film) -> Film:
        self._check_name_free(film.name)
        film_id = next_id(self._films)
        stored = film.model_copy(
            update={'id': film_id, 'genres': [], 'likes_by_users': []},
            deep=True,
        )
        self._films[film_id] = stored
        self._names[film.name.lower()] = film_id
        await self.genres.set_for_film(film_id, _genre_ids(film))
        return await self._load_film_data(stored)

    async def update(self, film: Film) -> Film:
        old = self._require(film.id)
        self._check_name_free(film.name, film.id)
        stored = film.model_copy(
            update={'genres': [], 'likes_by_users': []}, deep=True)
        self._names.pop(old.name.lower(), None)
        self._names[film.name.lower()] = film.id
        self._films[film.id] = stored
        await self.genres.set_for_film(film.id, _genre_ids(film))
        return await self._load_film_data(stored)

    async def delete(self, film_id: int) -> None:
        old = self._require(film_id)
        del self._films[film_id]
        self._names.pop(old.name.lower(), None)
        await self.genres.delete_for_film(film_id)
        await self.likes.delete_by_film(film_id)

    async def get(self, film_id: int) -> Optional[Film]:
        check_id(film_id, 'film')
        stored = self._films.get(film_id)
        if stored is None:
            return None
        return await self._load_film_data(stored)

    async def find_all(self) -> List[Film]:
        return [await self._load_film_data(f) for f in self._films.values()]

    async def find_popular(self, count: int) -> List[Film]:
        films = await self.find_all()
        # sorted() стабилен: при равенстве остаётся порядок добавления
        films = sorted(films, key=lambda f: len(f.likes_by_users), reverse=True)
        return films[:count]


class MongoFilmsRepo(FilmsRepo):
    def __init__(self, db: AsyncIOMotorDatabase, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._col = db['films']

    async def ensure_indexes(self) -> None:
        await self._col.create_index([('film_id', ASCENDING)], unique=True)
        await self._col.create_index([('name_lower', ASCENDING)])

    @staticmethod
    def _to_doc(film: Film) -> dict:
        return {
            'film_id': film.id,
            'name': film.name,
            'name_lower': film.name.lower(),
            'description': film.description,
            'release_date': film.release_date.isoformat(),
            'duration': film.duration,
            'mpa_id': film.mpa.id,
        }

    @staticmethod
    def _to_model(doc: dict) -> Film:
        return Film(
            id=doc['film_id'],
            name=doc['name'],
            description=doc.get('description'),
            release_date=date.fromisoformat(doc['release_date']),
            duration=doc['duration'],
            mpa=Mpa(id=doc['mpa_id']),
        )

    async def _check_name_free(self, name: str,
                               film_id: Optional[int] = None) -> None:
        if not self.unique_names:
            return
        doc = await self._col.find_one(
            {'name_lower': name.lower()},
            {'_id': 0, 'film_id': 1},
            session=current_session(),
        )
        if doc is not None and doc['film_id'] != film_id:
            logger.warning('film_name_taken', extra={'film_name': name})
            raise DuplicateError('film_name_taken')

    async def _next_id(self) -> int:
        last = await self._col.find_one(
            {}, {'_id': 0, 'film_id': 1},
            sort=[('film_id', DESCENDING)],
            session=current_session(),
        )
        return next_id([] if last is None else [last['film_id']])

    async def create(self, film: Film) -> Film:
        await self._check_name_free(film.name)
        film = film.model_copy(update={'id': await self._next_id()})
        await self._col.insert_one(self._to_doc(film),
                                   session=current_session())
        await self.genres.set_for_film(film.id, _genre_ids(film))
        return await self._load_film_data(film)

    async def update(self, film: Film) -> Film:
        check_id(film.id, 'film')
        await self._check_name_free(film.name, film.id)
        res = await self._col.replace_one(
            {'film_id': film.id}, self._to_doc(film),
            session=current_session(),
        )
        if res.matched_count == 0:
            raise NotFoundError('film_not_found')
        await self.genres.set_for_film(film.id, _genre_ids(film))
        return await self.get(film.id)

    async def delete(self, film_id: int) -> None:
        check_id(film_id, 'film')
        res = await self._col.delete_one({'film_id': film_id},
                                         session=current_session())
        if res.deleted_count == 0:
            raise NotFoundError('film_not_found')
        await self.genres.delete_for_film(film_id)
        await self.likes.delete_by_film(film_id)

    async def get(self, film_id: int) -> Optional[Film]:
        check_id(film_id, 'film')
        doc = await self._col.find_one({'film_id': film_id}, {'_id': 0},
                                       session=current_session())
        if doc is None:
            return None
        return await self._load_film_data(self._to_model(doc))

    async def find_all(self) -> List[Film]:
        cur = self._col.find({}, {'_id': 0}, session=current_session())
        return [await self._load_film_data(self._to_model(d))
                async for d in cur.sort('film_id', ASCENDING)]

    async def find_popular(self, count: int) -> List[Film]:
        pipeline = [
            {'$lookup': {
                'from': 'likes',
                'localField': 'film_id',
                'foreignField': 'film_id',
                'as': 'likes',
            }},
            {'$addFields': {'likes_count': {'$size': '$likes'}}},
            {'$sort': {'likes_count': -1, 'film_id': 1}},
            {'$limit': count},
            {'$project': {'_id': 0, 'likes': 0, 'likes_count': 0}},
        ]
        cur = self._col.aggregate(pipeline, session=current_session())
        return [await self._load_film_data(self._to_model(d)) async for d in cur]
