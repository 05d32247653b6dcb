"""Read-only access to genres and MPA ratings."""

from __future__ import annotations

import logging
from typing import List

from filmorate_api.core.exceptions import NotFoundError
from filmorate_api.models.genres import Genre, Mpa
from filmorate_api.services.repositories.base import GenresRepo, MpaRepo

logger = logging.getLogger(__name__)


class GenresService:
    def __init__(self, repo: GenresRepo) -> None:
        self.repo = repo

    async def find_all(self) -> List[Genre]:
        return await self.repo.find_all()

    async def get(self, genre_id: int) -> Genre:
        genre = await self.repo.get(genre_id)
        if genre is None:
            logger.warning('genre_not_found', extra={'genre_id': genre_id})
            raise NotFoundError('genre_not_found')
        return genre


class MpaService:
    def __init__(self, repo: MpaRepo) -> None:
        self.repo = repo

    async def find_all(self) -> List[Mpa]:
        return await self.repo.find_all()

    async def get(self, mpa_id: int) -> Mpa:
        mpa = await self.repo.get(mpa_id)
        if mpa is None:
            logger.warning('mpa_not_found', extra={'mpa_id': mpa_id})
            raise NotFoundError('mpa_not_found')
        return mpa
