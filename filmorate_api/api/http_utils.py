from functools import wraps
from http import HTTPStatus
from typing import Type

from fastapi import HTTPException

from filmorate_api.core.exceptions import (
    DuplicateError,
    FilmorateError,
    NotFoundError,
    StorageError,
    ValidationError,
)

ERRMAP: dict[Type[FilmorateError], HTTPStatus] = {
    ValidationError: HTTPStatus.BAD_REQUEST,
    NotFoundError: HTTPStatus.NOT_FOUND,
    DuplicateError: HTTPStatus.CONFLICT,
    StorageError: HTTPStatus.SERVICE_UNAVAILABLE,
}


def handle_domain_errors(mapping: dict[Type[FilmorateError], HTTPStatus]):
    """
    Переводит доменные ошибки в HTTPException, detail = код ошибки.
    Пример mapping: {NotFoundError: 404, DuplicateError: 409}
    """
    def decorator(fn):
        @wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except FilmorateError as e:
                for exc_type, status in mapping.items():
                    if isinstance(e, exc_type):
                        raise HTTPException(status_code=status,
                                            detail=e.code)
                # нераспознанное: 500
                raise HTTPException(
                    status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                    detail="internal_error")
        return wrapper
    return decorator

