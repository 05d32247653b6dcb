from http import HTTPStatus
import pytest
from fastapi import HTTPException

from filmorate_api.api.http_utils import ERRMAP, handle_domain_errors
from filmorate_api.core.exceptions import (
    DuplicateError,
    FilmorateError,
    NotFoundError,
    StorageError,
    ValidationError,
)


@pytest.mark.parametrize("error, status", [
    (ValidationError("bad"), HTTPStatus.BAD_REQUEST),
    (NotFoundError("film_not_found"), HTTPStatus.NOT_FOUND),
    (DuplicateError("email_taken"), HTTPStatus.CONFLICT),
    (StorageError("mongo_transaction_error"), HTTPStatus.SERVICE_UNAVAILABLE),
])
async def test_handle_domain_errors_maps_known_types(error, status):
    @handle_domain_errors(ERRMAP)
    async def fn():
        raise error
    with pytest.raises(HTTPException) as e:
        await fn()
    assert e.value.status_code == status
    assert e.value.detail == error.code


async def test_handle_domain_errors_maps_unknown_to_500():
    @handle_domain_errors({NotFoundError: HTTPStatus.NOT_FOUND})
    async def fn():
        raise DuplicateError("something_else")
    with pytest.raises(HTTPException) as e:
        await fn()
    assert e.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert e.value.detail == "internal_error"


async def test_handle_domain_errors_happy_path_returns_value():
    @handle_domain_errors(ERRMAP)
    async def ok():
        return "ok"
    assert await ok() == "ok"


def test_error_message_defaults_to_code():
    err = FilmorateError("code_only")
    assert str(err) == "code_only" and err.code == "code_only"
    assert isinstance(err, RuntimeError)
