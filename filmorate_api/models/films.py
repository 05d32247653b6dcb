from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from filmorate_api.models.genres import Genre, Mpa


class Film(BaseModel):
    """Фильм в том виде, в каком его отдаёт API."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    release_date: date = Field(alias="releaseDate")
    duration: int
    mpa: Mpa
    genres: List[Genre] = Field(default_factory=list)
    likes_by_users: List[int] = Field(default_factory=list,
                                      alias="likesByUsers")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Film):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class NewFilmRequest(BaseModel):
    # id/likesByUsers на входе игнорируются (extra="ignore")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    duration: Optional[int] = None
    mpa: Optional[Mpa] = None
    genres: Optional[List[Genre]] = None


class UpdateFilmRequest(NewFilmRequest):
    """PUT /films: поля None остаются без изменений."""

    id: Optional[int] = None
