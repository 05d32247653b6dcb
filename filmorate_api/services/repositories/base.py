"""Storage contracts shared by the in-memory and Mongo backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set

from filmorate_api.core.exceptions import ValidationError
from filmorate_api.models.films import Film
from filmorate_api.models.genres import Genre, Mpa
from filmorate_api.models.users import User


def check_id(value: Optional[int], entity: str) -> int:
    """Reject ids that can never exist: None, zero or negative."""
    if value is None or value <= 0:
        raise ValidationError(f'invalid_{entity}_id')
    return value


def next_id(ids: Iterable[int]) -> int:
    """Next id is max(existing) + 1, starting at 1 for an empty store."""
    return max(ids, default=0) + 1


class GenresRepo(ABC):
    """Fixed genre reference set plus film <-> genre links."""

    @abstractmethod
    async def find_all(self) -> List[Genre]: ...

    @abstractmethod
    async def get(self, genre_id: int) -> Optional[Genre]: ...

    @abstractmethod
    async def find_for_film(self, film_id: int) -> List[Genre]:
        """Genres of a film ordered by genre id."""

    @abstractmethod
    async def set_for_film(self, film_id: int, genre_ids: Iterable[int]) -> None:
        """Replace the film's genre links."""

    @abstractmethod
    async def delete_for_film(self, film_id: int) -> None: ...


class MpaRepo(ABC):
    @abstractmethod
    async def find_all(self) -> List[Mpa]: ...

    @abstractmethod
    async def get(self, mpa_id: int) -> Optional[Mpa]: ...


class LikesRepo(ABC):
    """(film_id, user_id) pairs; a user likes a film at most once."""

    @abstractmethod
    async def add(self, film_id: int, user_id: int) -> bool:
        """Return True if the like was new."""

    @abstractmethod
    async def remove(self, film_id: int, user_id: int) -> bool:
        """Return True if a like was removed."""

    @abstractmethod
    async def user_ids(self, film_id: int) -> Set[int]: ...

    @abstractmethod
    async def delete_by_film(self, film_id: int) -> int: ...

    @abstractmethod
    async def delete_by_user(self, user_id: int) -> int: ...


class FriendshipRepo(ABC):
    """Directed user -> friend edges."""

    @abstractmethod
    async def add(self, user_id: int, friend_id: int) -> bool: ...

    @abstractmethod
    async def remove(self, user_id: int, friend_id: int) -> bool: ...

    @abstractmethod
    async def friend_ids(self, user_id: int) -> Set[int]: ...

    @abstractmethod
    async def delete_for_user(self, user_id: int) -> int:
        """Drop every edge where the user is on either side."""


class FilmsRepo(ABC):
    """Film records; genres, mpa and likes are joined in on read."""

    def __init__(
        self,
        genres: GenresRepo,
        mpa: MpaRepo,
        likes: LikesRepo,
        unique_names: bool = False,
    ) -> None:
        self.genres = genres
        self.mpa = mpa
        self.likes = likes
        self.unique_names = unique_names

    @abstractmethod
    async def create(self, film: Film) -> Film: ...

    @abstractmethod
    async def update(self, film: Film) -> Film: ...

    @abstractmethod
    async def delete(self, film_id: int) -> None: ...

    @abstractmethod
    async def get(self, film_id: int) -> Optional[Film]: ...

    @abstractmethod
    async def find_all(self) -> List[Film]: ...

    @abstractmethod
    async def find_popular(self, count: int) -> List[Film]:
        """Top `count` films by like count, ties in insertion order."""

    async def _load_film_data(self, film: Film) -> Film:
        """Resolve likes, genres and the full mpa object for a stored film."""
        likes = await self.likes.user_ids(film.id)
        genres = await self.genres.find_for_film(film.id)
        mpa = await self.mpa.get(film.mpa.id) or film.mpa
        return film.model_copy(update={
            'likes_by_users': sorted(likes),
            'genres': genres,
            'mpa': mpa,
        })


class UsersRepo(ABC):
    """User records; email is unique case-insensitively."""

    def __init__(self, friendship: FriendshipRepo, likes: LikesRepo) -> None:
        self.friendship = friendship
        self.likes = likes

    @abstractmethod
    async def create(self, user: User) -> User: ...

    @abstractmethod
    async def update(self, user: User) -> User: ...

    @abstractmethod
    async def delete(self, user_id: int) -> None: ...

    @abstractmethod
    async def get(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    async def find_all(self) -> List[User]: ...

    async def _load_friends(self, user: User) -> User:
        friends = await self.friendship.friend_ids(user.id)
        return user.model_copy(update={'friends': sorted(friends)})

    @staticmethod
    def _with_display_name(user: User) -> User:
        if user.name is None or not user.name.strip():
            return user.model_copy(update={'name': user.login})
        return user
