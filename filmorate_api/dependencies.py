from fastapi import Depends, Request
from filmorate_api.services.repositories.storage import Storage
from filmorate_api.services.films_service import FilmsService
from filmorate_api.services.users_service import UsersService
from filmorate_api.services.genres_service import GenresService, MpaService


def get_storage(request: Request) -> Storage:
    # хранилище собирается один раз в lifespan и живёт в app.state
    return request.app.state.storage


async def get_films_service(
        storage: Storage = Depends(get_storage)) -> FilmsService:
    return FilmsService(storage)


async def get_users_service(
        storage: Storage = Depends(get_storage)) -> UsersService:
    return UsersService(storage)


async def get_genres_service(
        storage: Storage = Depends(get_storage)) -> GenresService:
    return GenresService(storage.genres)


async def get_mpa_service(
        storage: Storage = Depends(get_storage)) -> MpaService:
    return MpaService(storage.mpa)
