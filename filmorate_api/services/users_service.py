"""Service layer for users and the symmetric friendship graph."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from filmorate_api.core.exceptions import DuplicateError, NotFoundError
from filmorate_api.models.users import NewUserRequest, UpdateUserRequest, User
from filmorate_api.services.repositories.base import check_id
from filmorate_api.services.repositories.storage import Storage
from filmorate_api.services.validation import validate_user

logger = logging.getLogger(__name__)

USER_FIELDS = {'email', 'login', 'name', 'birthday'}


class UsersService:
    """Users CRUD plus friends.

    Friendship is mutual: adding B as A's friend also makes A a friend
    of B, and removing it drops both directions.
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.users = storage.users
        self.friendship = storage.friendship

    # ---------- helpers ----------

    async def _require_user(self, user_id: Optional[int]) -> User:
        user = await self.users.get(check_id(user_id, 'user'))
        if user is None:
            logger.warning('user_not_found', extra={'user_id': user_id})
            raise NotFoundError('user_not_found')
        return user

    async def _resolve(self, user_ids: Iterable[int]) -> List[User]:
        users = [await self.users.get(uid) for uid in sorted(user_ids)]
        return [u for u in users if u is not None]

    @staticmethod
    def _to_user(data: NewUserRequest, user_id: Optional[int] = None) -> User:
        return User(
            id=user_id,
            email=data.email,
            login=data.login,
            name=data.name,
            birthday=data.birthday,
        )

    # ---------- CRUD ----------

    async def find_all(self) -> List[User]:
        return await self.users.find_all()

    async def get(self, user_id: int) -> User:
        return await self._require_user(user_id)

    async def create(self, request: NewUserRequest) -> User:
        validate_user(request)
        async with self.storage.transaction():
            user = await self.users.create(self._to_user(request))
        logger.info('user_created', extra={'user_id': user.id})
        return user

    async def update(self, request: UpdateUserRequest) -> User:
        async with self.storage.transaction():
            old = await self._require_user(request.id)
            merged = NewUserRequest.model_validate({
                **old.model_dump(include=USER_FIELDS),
                **request.model_dump(include=USER_FIELDS, exclude_none=True),
            })
            validate_user(merged)
            user = await self.users.update(self._to_user(merged, old.id))
        logger.info('user_updated', extra={'user_id': user.id})
        return user

    async def delete(self, user_id: int) -> None:
        async with self.storage.transaction():
            await self.users.delete(check_id(user_id, 'user'))
        logger.info('user_deleted', extra={'user_id': user_id})

    # ---------- FRIENDS ----------

    async def add_friend(self, user_id: int, friend_id: int) -> None:
        """Idempotent; both directions are written."""
        async with self.storage.transaction():
            user = await self._require_user(user_id)
            friend = await self._require_user(friend_id)
            if user == friend:
                logger.warning('self_friendship', extra={'user_id': user_id})
                raise DuplicateError('self_friendship')
            if friend_id in user.friends and user_id in friend.friends:
                logger.debug('already_friends', extra={
                    'user_id': user_id, 'friend_id': friend_id})
                return
            if friend_id not in user.friends:
                await self.friendship.add(user_id, friend_id)
            if user_id not in friend.friends:
                await self.friendship.add(friend_id, user_id)
        logger.info('friend_added',
                    extra={'user_id': user_id, 'friend_id': friend_id})

    async def remove_friend(self, user_id: int, friend_id: int) -> None:
        async with self.storage.transaction():
            user = await self._require_user(user_id)
            friend = await self._require_user(friend_id)
            if user == friend:
                logger.warning('self_unfriending', extra={'user_id': user_id})
                raise DuplicateError('self_unfriending')
            if friend_id not in user.friends and user_id not in friend.friends:
                logger.debug('not_friends', extra={
                    'user_id': user_id, 'friend_id': friend_id})
                return
            await self.friendship.remove(user_id, friend_id)
            await self.friendship.remove(friend_id, user_id)
        logger.info('friend_removed',
                    extra={'user_id': user_id, 'friend_id': friend_id})

    async def find_friends(self, user_id: int) -> List[User]:
        user = await self._require_user(user_id)
        if not user.friends:
            logger.debug('no_friends', extra={'user_id': user_id})
            return []
        return await self._resolve(user.friends)

    async def find_common_friends(self, user_id: int,
                                  other_id: int) -> List[User]:
        user = await self._require_user(user_id)
        other = await self._require_user(other_id)
        common = set(user.friends) & set(other.friends)
        if not common:
            logger.debug('no_common_friends', extra={
                'user_id': user_id, 'other_id': other_id})
        return await self._resolve(common)
