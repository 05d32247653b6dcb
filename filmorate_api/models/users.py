from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    id: Optional[int] = None
    email: str
    login: str
    name: Optional[str] = None
    birthday: date
    friends: List[int] = Field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class NewUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    login: Optional[str] = None
    name: Optional[str] = None
    birthday: Optional[date] = None


class UpdateUserRequest(NewUserRequest):
    id: Optional[int] = None
