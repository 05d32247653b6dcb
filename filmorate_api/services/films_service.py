"""Service layer for films: CRUD, likes and popularity."""

from __future__ import annotations

import logging
from typing import List, Optional

from filmorate_api.core.exceptions import NotFoundError, ValidationError
from filmorate_api.models.films import Film, NewFilmRequest, UpdateFilmRequest
from filmorate_api.models.genres import Genre
from filmorate_api.services.repositories.base import check_id
from filmorate_api.services.repositories.storage import Storage
from filmorate_api.services.validation import validate_film

logger = logging.getLogger(__name__)

# поля, которые можно менять через PUT /films
FILM_FIELDS = {
    'name', 'description', 'release_date', 'duration', 'mpa', 'genres',
}


class FilmsService:
    """Films CRUD, like/unlike and the like-count ranking."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.films = storage.films
        self.users = storage.users

    # ---------- helpers ----------

    async def _require_film(self, film_id: Optional[int]) -> Film:
        film = await self.films.get(check_id(film_id, 'film'))
        if film is None:
            logger.warning('film_not_found', extra={'film_id': film_id})
            raise NotFoundError('film_not_found')
        return film

    async def _require_user(self, user_id: Optional[int]) -> None:
        if await self.users.get(check_id(user_id, 'user')) is None:
            logger.warning('user_not_found', extra={'user_id': user_id})
            raise NotFoundError('user_not_found')

    async def _check_references(self, data: NewFilmRequest) -> None:
        """Mpa and every genre must exist in the reference sets."""
        if await self.storage.mpa.get(data.mpa.id) is None:
            logger.warning('mpa_not_found', extra={'mpa_id': data.mpa.id})
            raise NotFoundError('mpa_not_found')
        for genre in data.genres or ():
            if await self.storage.genres.get(genre.id) is None:
                logger.warning('genre_not_found',
                               extra={'genre_id': genre.id})
                raise NotFoundError('genre_not_found')

    @staticmethod
    def _to_film(data: NewFilmRequest, film_id: Optional[int] = None) -> Film:
        genre_ids = sorted({g.id for g in data.genres or ()})
        return Film(
            id=film_id,
            name=data.name,
            description=data.description,
            release_date=data.release_date,
            duration=data.duration,
            mpa=data.mpa,
            genres=[Genre(id=gid) for gid in genre_ids],
        )

    @staticmethod
    def _merge(old: Film, request: UpdateFilmRequest) -> NewFilmRequest:
        """Fields left as None in the request keep their stored values."""
        return NewFilmRequest.model_validate({
            **old.model_dump(include=FILM_FIELDS),
            **request.model_dump(include=FILM_FIELDS, exclude_none=True),
        })

    # ---------- READ ----------

    async def find_all(self) -> List[Film]:
        return await self.films.find_all()

    async def get(self, film_id: int) -> Film:
        return await self._require_film(film_id)

    async def find_popular(self, count: Optional[int]) -> List[Film]:
        if count is None or count <= 0:
            logger.warning('invalid_count', extra={'count': count})
            raise ValidationError('invalid_count')
        return await self.films.find_popular(count)

    # ---------- WRITE ----------

    async def create(self, request: NewFilmRequest) -> Film:
        validate_film(request)
        async with self.storage.transaction():
            await self._check_references(request)
            film = await self.films.create(self._to_film(request))
        logger.info('film_created', extra={'film_id': film.id})
        return film

    async def update(self, request: UpdateFilmRequest) -> Film:
        async with self.storage.transaction():
            old = await self._require_film(request.id)
            merged = self._merge(old, request)
            validate_film(merged)
            await self._check_references(merged)
            # лайки хранятся отдельно и переживают обновление
            film = await self.films.update(self._to_film(merged, old.id))
        logger.info('film_updated', extra={'film_id': film.id})
        return film

    async def delete(self, film_id: int) -> None:
        async with self.storage.transaction():
            await self.films.delete(check_id(film_id, 'film'))
        logger.info('film_deleted', extra={'film_id': film_id})

    # ---------- LIKES ----------

    async def add_like(self, film_id: int, user_id: int) -> None:
        """Idempotent: a repeated like is a no-op."""
        async with self.storage.transaction():
            film = await self._require_film(film_id)
            await self._require_user(user_id)
            if user_id in film.likes_by_users:
                logger.debug('like_exists',
                             extra={'film_id': film_id, 'user_id': user_id})
                return
            await self.storage.likes.add(film_id, user_id)
        logger.info('like_added',
                    extra={'film_id': film_id, 'user_id': user_id})

    async def remove_like(self, film_id: int, user_id: int) -> None:
        async with self.storage.transaction():
            film = await self._require_film(film_id)
            await self._require_user(user_id)
            if user_id not in film.likes_by_users:
                logger.debug('like_absent',
                             extra={'film_id': film_id, 'user_id': user_id})
                return
            await self.storage.likes.remove(film_id, user_id)
        logger.info('like_removed',
                    extra={'film_id': film_id, 'user_id': user_id})
