"""User records for the in-memory and Mongo backends."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from filmorate_api.core.exceptions import DuplicateError, NotFoundError
from filmorate_api.db.mongo import current_session
from filmorate_api.models.users import User
from .base import UsersRepo, check_id, next_id

logger = logging.getLogger(__name__)


def _email_taken(email: str) -> DuplicateError:
    logger.warning('email_taken', extra={'email': email})
    return DuplicateError('email_taken')


def _email_clash(exc: DuplicateKeyError) -> bool:
    """Unique email index tripped by a concurrent writer."""
    return 'email_lower' in (exc.details or {}).get('keyPattern', {})


class InMemoryUsersRepo(UsersRepo):
    """Users in a dict plus an index of lower-cased emails."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._users: Dict[int, User] = {}
        self._emails: Dict[str, int] = {}

    def _require(self, user_id: Optional[int]) -> User:
        check_id(user_id, 'user')
        stored = self._users.get(user_id)
        if stored is None:
            raise NotFoundError('user_not_found')
        return stored

    async def create(self, user: User) -> User:
        key = user.email.lower()
        if key in self._emails:
            raise _email_taken(user.email)
        user_id = next_id(self._users)
        stored = self._with_display_name(user).model_copy(
            update={'id': user_id, 'friends': []})
        self._users[user_id] = stored
        self._emails[key] = user_id
        return await self._load_friends(stored)

    async def update(self, user: User) -> User:
        old = self._require(user.id)
        key = user.email.lower()
        owner = self._emails.get(key)
        if owner is not None and owner != user.id:
            raise _email_taken(user.email)
        # старый email освобождается для новых пользователей
        self._emails.pop(old.email.lower(), None)
        self._emails[key] = user.id
        stored = self._with_display_name(user).model_copy(
            update={'friends': []})
        self._users[user.id] = stored
        return await self._load_friends(stored)

    async def delete(self, user_id: int) -> None:
        old = self._require(user_id)
        del self._users[user_id]
        self._emails.pop(old.email.lower(), None)
        await self.friendship.delete_for_user(user_id)
        await self.likes.delete_by_user(user_id)

    async def get(self, user_id: int) -> Optional[User]:
        check_id(user_id, 'user')
        stored = self._users.get(user_id)
        if stored is None:
            return None
        return await self._load_friends(stored)

    async def find_all(self) -> List[User]:
        return [await self._load_friends(u) for u in self._users.values()]


class MongoUsersRepo(UsersRepo):
    def __init__(self, db: AsyncIOMotorDatabase, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._col = db['users']

    async def ensure_indexes(self) -> None:
        await self._col.create_index([('user_id', ASCENDING)], unique=True)
        await self._col.create_index([('email_lower', ASCENDING)],
                                     unique=True)

    @staticmethod
    def _to_doc(user: User) -> dict:
        return {
            'user_id': user.id,
            'email': user.email,
            'email_lower': user.email.lower(),
            'login': user.login,
            'name': user.name,
            'birthday': user.birthday.isoformat(),
        }

    @staticmethod
    def _to_model(doc: dict) -> User:
        return User(
            id=doc['user_id'],
            email=doc['email'],
            login=doc['login'],
            name=doc.get('name'),
            birthday=date.fromisoformat(doc['birthday']),
        )

    async def _email_owner(self, email: str) -> Optional[int]:
        doc = await self._col.find_one(
            {'email_lower': email.lower()},
            {'_id': 0, 'user_id': 1},
            session=current_session(),
        )
        return None if doc is None else doc['user_id']

    async def create(self, user: User) -> User:
        if await self._email_owner(user.email) is not None:
            raise _email_taken(user.email)
        last = await self._col.find_one(
            {}, {'_id': 0, 'user_id': 1},
            sort=[('user_id', DESCENDING)],
            session=current_session(),
        )
        user_id = next_id([] if last is None else [last['user_id']])
        user = self._with_display_name(user).model_copy(
            update={'id': user_id, 'friends': []})
        try:
            await self._col.insert_one(self._to_doc(user),
                                       session=current_session())
        except DuplicateKeyError as exc:
            if not _email_clash(exc):
                raise
            raise _email_taken(user.email) from exc
        return user

    async def update(self, user: User) -> User:
        check_id(user.id, 'user')
        owner = await self._email_owner(user.email)
        if owner is not None and owner != user.id:
            raise _email_taken(user.email)
        user = self._with_display_name(user)
        try:
            res = await self._col.replace_one(
                {'user_id': user.id}, self._to_doc(user),
                session=current_session(),
            )
        except DuplicateKeyError as exc:
            if not _email_clash(exc):
                raise
            raise _email_taken(user.email) from exc
        if res.matched_count == 0:
            raise NotFoundError('user_not_found')
        return await self._load_friends(user)

    async def delete(self, user_id: int) -> None:
        check_id(user_id, 'user')
        res = await self._col.delete_one({'user_id': user_id},
                                         session=current_session())
        if res.deleted_count == 0:
            raise NotFoundError('user_not_found')
        await self.friendship.delete_for_user(user_id)
        await self.likes.delete_by_user(user_id)

    async def get(self, user_id: int) -> Optional[User]:
        check_id(user_id, 'user')
        doc = await self._col.find_one({'user_id': user_id}, {'_id': 0},
                                       session=current_session())
        if doc is None:
            return None
        return await self._load_friends(self._to_model(doc))

    async def find_all(self) -> List[User]:
        cur = self._col.find({}, {'_id': 0}, session=current_session())
        return [await self._load_friends(self._to_model(d))
                async for d in cur.sort('user_id', ASCENDING)]
