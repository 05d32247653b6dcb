from typing import List
from http import HTTPStatus
from fastapi import APIRouter, Depends, Response

from filmorate_api.dependencies import get_users_service
from filmorate_api.services.users_service import UsersService
from filmorate_api.models.users import NewUserRequest, UpdateUserRequest, User
from filmorate_api.api.http_utils import ERRMAP, handle_domain_errors

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[User], status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_users(
    svc: UsersService = Depends(get_users_service),
):
    return await svc.find_all()


@router.get("/{user_id}", response_model=User, status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def get_user(
    user_id: int,
    svc: UsersService = Depends(get_users_service),
):
    return await svc.get(user_id)


@router.post("", response_model=User, status_code=HTTPStatus.CREATED)
@handle_domain_errors(ERRMAP)
async def create_user(
    body: NewUserRequest,
    svc: UsersService = Depends(get_users_service),
):
    return await svc.create(body)


@router.put("", response_model=User, status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def update_user(
    body: UpdateUserRequest,
    svc: UsersService = Depends(get_users_service),
):
    return await svc.update(body)


@router.delete("/{user_id}", status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def delete_user(
    user_id: int,
    svc: UsersService = Depends(get_users_service),
) -> Response:
    await svc.delete(user_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.put("/{user_id}/friends/{friend_id}",
            status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def add_friend(
    user_id: int,
    friend_id: int,
    svc: UsersService = Depends(get_users_service),
) -> Response:
    await svc.add_friend(user_id, friend_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.delete("/{user_id}/friends/{friend_id}",
               status_code=HTTPStatus.NO_CONTENT)
@handle_domain_errors(ERRMAP)
async def remove_friend(
    user_id: int,
    friend_id: int,
    svc: UsersService = Depends(get_users_service),
) -> Response:
    await svc.remove_friend(user_id, friend_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.get("/{user_id}/friends",
            response_model=List[User],
            status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_friends(
    user_id: int,
    svc: UsersService = Depends(get_users_service),
):
    return await svc.find_friends(user_id)


@router.get("/{user_id}/friends/common/{other_id}",
            response_model=List[User],
            status_code=HTTPStatus.OK)
@handle_domain_errors(ERRMAP)
async def list_common_friends(
    user_id: int,
    other_id: int,
    svc: UsersService = Depends(get_users_service),
):
    return await svc.find_common_friends(user_id, other_id)
