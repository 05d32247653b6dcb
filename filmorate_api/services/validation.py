"""Field-level rules for films and users."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from filmorate_api.core.exceptions import ValidationError
from filmorate_api.models.films import NewFilmRequest
from filmorate_api.models.users import NewUserRequest

logger = logging.getLogger(__name__)

FIRST_FILM_DATE = date(1895, 12, 28)
MAX_DESCRIPTION_LENGTH = 200


def _reject(code: str, **extra) -> ValidationError:
    logger.warning(code, extra=extra)
    return ValidationError(code)


# Request models leave every field optional: these rules run on the record
# after a PUT merge, and each failure carries its own error code.
def validate_film(data: NewFilmRequest) -> None:
    if data.name is None or not data.name.strip():
        raise _reject('film_name_empty')
    if (data.description is not None
            and len(data.description) > MAX_DESCRIPTION_LENGTH):
        raise _reject('film_description_too_long',
                      length=len(data.description))
    if data.release_date is None:
        raise _reject('film_release_date_missing')
    if data.release_date < FIRST_FILM_DATE:
        raise _reject('film_release_date_too_early',
                      release_date=data.release_date.isoformat())
    if data.duration is None or data.duration <= 0:
        raise _reject('film_duration_not_positive', duration=data.duration)
    if data.mpa is None:
        raise _reject('film_mpa_missing')


def validate_user(data: NewUserRequest, today: Optional[date] = None) -> None:
    """Birthday equal to today is allowed, tomorrow is not."""
    today = today or date.today()
    if data.email is None or not data.email.strip():
        raise _reject('user_email_empty')
    if '@' not in data.email:
        raise _reject('user_email_invalid', email=data.email)
    if not data.login or any(ch.isspace() for ch in data.login):
        raise _reject('user_login_invalid', login=data.login)
    if data.birthday is None:
        raise _reject('user_birthday_missing')
    if data.birthday > today:
        raise _reject('user_birthday_in_future',
                      birthday=data.birthday.isoformat())
