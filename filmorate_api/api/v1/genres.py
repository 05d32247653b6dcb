from typing import List
from http import HTTPStatus
from fastapi import APIRouter, Depends

from filmorate_api.dependencies import get_genres_service, get_mpa_service
from filmorate_api.services.genres_service import GenresService, MpaService
from filmorate_api.models.genres import Genre, Mpa
from filmorate_api.api.http_utils import ERRMAP, handle_domain_errors

genres_router = APIRouter(prefix="/genres", tags=["genres"])
mpa_router = APIRouter(prefix="/mpa", tags=["mpa"])


@genres_router.get("", response_model=List[Genre], status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_genres(
    svc: GenresService = Depends(get_genres_service),
):
    return await svc.find_all()


@genres_router.get("/{genre_id}", response_model=Genre,
                   status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def get_genre(
    genre_id: int,
    svc: GenresService = Depends(get_genres_service),
):
    return await svc.get(genre_id)


@mpa_router.get("", response_model=List[Mpa], status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_mpa(
    svc: MpaService = Depends(get_mpa_service),
):
    return await svc.find_all()


@mpa_router.get("/{mpa_id}", response_model=Mpa, status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def get_mpa(
    mpa_id: int,
    svc: MpaService = Depends(get_mpa_service),
):
    return await svc.get(mpa_id)
