from typing import List
from http import HTTPStatus
from fastapi import APIRouter, Depends, Query, Response

from filmorate_api.dependencies import get_films_service
from filmorate_api.services.films_service import FilmsService
from filmorate_api.models.films import Film, NewFilmRequest, UpdateFilmRequest
from filmorate_api.api.http_utils import ERRMAP, handle_domain_errors

router = APIRouter(prefix="/films", tags=["films"])


@router.get("", response_model=List[Film], status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_films(
    svc: FilmsService = Depends(get_films_service),
):
    return await svc.find_all()


# объявлен до /{film_id}, иначе "popular" уйдёт в параметр пути
@router.get("/popular", response_model=List[Film], status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def popular_films(
    count: int = Query(10, description="How many films to return"),
    svc: FilmsService = Depends(get_films_service),
):
    return await svc.find_popular(count)


@router.get("/{film_id}", response_model=Film, status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def get_film(
    film_id: int,
    svc: FilmsService = Depends(get_films_service),
):
    return await svc.get(film_id)


@router.post("", response_model=Film, status_code=HTTPStatus.CREATED)
@handle_domain_errors(ERRMAP)
async def create_film(
    body: NewFilmRequest,
    svc: FilmsService = Depends(get_films_service),
):
    return await svc.create(body)


@router.put("", response_model=Film, status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def update_film(
    body: UpdateFilmRequest,
    svc: FilmsService = Depends(get_films_service),
):
    return await svc.update(body)


@router.delete("/{film_id}", status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def delete_film(
    film_id: int,
    svc: FilmsService = Depends(get_films_service),
) -> Response:
    await svc.delete(film_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.put("/{film_id}/like/{user_id}", status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def put_like(
    film_id: int,
    user_id: int,
    svc: FilmsService = Depends(get_films_service),
) -> Response:
    await svc.add_like(film_id, user_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.delete("/{film_id}/like/{user_id}",
               status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def delete_like(
    film_id: int,
    user_id: int,
    svc: FilmsService = Depends(get_films_service),
) -> Response:
    await svc.remove_like(film_id, user_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)
