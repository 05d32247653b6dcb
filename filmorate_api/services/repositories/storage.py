"""Composition of repositories into one swappable storage backend."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from filmorate_api.core.config import Settings
from filmorate_api.core.exceptions import StorageError
from filmorate_api.db.mongo import bind_session, create_client, unbind_session
from .base import (
    FilmsRepo,
    FriendshipRepo,
    GenresRepo,
    LikesRepo,
    MpaRepo,
    UsersRepo,
)
from .films_repo import InMemoryFilmsRepo, MongoFilmsRepo
from .friendship_repo import InMemoryFriendshipRepo, MongoFriendshipRepo
from .genres_repo import InMemoryGenresRepo, MongoGenresRepo
from .likes_repo import InMemoryLikesRepo, MongoLikesRepo
from .mpa_repo import InMemoryMpaRepo, MongoMpaRepo
from .users_repo import InMemoryUsersRepo, MongoUsersRepo

logger = logging.getLogger(__name__)


@dataclass
class Storage:
    films: FilmsRepo
    users: UsersRepo
    genres: GenresRepo
    mpa: MpaRepo
    likes: LikesRepo
    friendship: FriendshipRepo
    client: Optional[AsyncIOMotorClient] = None
    use_transactions: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Serialize a mutating operation; in Mongo also make it atomic."""
        async with self.lock:
            if self.client is None or not self.use_transactions:
                yield
                return
            try:
                async with await self.client.start_session() as session:
                    async with session.start_transaction():
                        token = bind_session(session)
                        try:
                            yield
                        finally:
                            unbind_session(token)
            except PyMongoError as error:
                raise StorageError(
                    'mongo_transaction_error', str(error)) from error

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


def build_memory_storage(unique_film_names: bool = False) -> Storage:
    genres = InMemoryGenresRepo()
    mpa = InMemoryMpaRepo()
    likes = InMemoryLikesRepo()
    friendship = InMemoryFriendshipRepo()
    return Storage(
        films=InMemoryFilmsRepo(genres, mpa, likes,
                                unique_names=unique_film_names),
        users=InMemoryUsersRepo(friendship, likes),
        genres=genres,
        mpa=mpa,
        likes=likes,
        friendship=friendship,
    )


async def build_mongo_storage(
    client: AsyncIOMotorClient,
    db_name: str,
    unique_film_names: bool = False,
    use_transactions: bool = True,
) -> Storage:
    """Wire Mongo repositories, ensure indexes and seed reference data."""
    db = client[db_name]
    genres = MongoGenresRepo(db)
    mpa = MongoMpaRepo(db)
    likes = MongoLikesRepo(db)
    friendship = MongoFriendshipRepo(db)
    films = MongoFilmsRepo(db, genres, mpa, likes,
                           unique_names=unique_film_names)
    users = MongoUsersRepo(db, friendship, likes)

    for repo in (genres, mpa, likes, friendship, films, users):
        await repo.ensure_indexes()
    await genres.seed()
    await mpa.seed()

    return Storage(
        films=films,
        users=users,
        genres=genres,
        mpa=mpa,
        likes=likes,
        friendship=friendship,
        client=client,
        use_transactions=use_transactions,
    )


async def build_storage(settings: Settings) -> Storage:
    if settings.storage_backend == 'mongo':
        client = await create_client(settings.mongo_dsn)
        storage = await build_mongo_storage(
            client,
            settings.mongo_db,
            unique_film_names=settings.unique_film_names,
            use_transactions=settings.mongo_transactions,
        )
    else:
        storage = build_memory_storage(
            unique_film_names=settings.unique_film_names)
    logger.info('storage_ready',
                extra={'backend': settings.storage_backend})
    return storage
