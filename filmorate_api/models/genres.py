from pydantic import BaseModel


class Genre(BaseModel):
    id: int
    name: str | None = None  # на входе достаточно id


class Mpa(BaseModel):
    id: int
    name: str | None = None
