import pytest
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from filmorate_api.main import create_app
from filmorate_api.core.config import Settings
from filmorate_api.services.repositories.storage import build_memory_storage
from filmorate_api.services.films_service import FilmsService
from filmorate_api.services.users_service import UsersService


@pytest.fixture
def test_settings() -> Settings:
    # in-memory хранилище и без Sentry
    return Settings(storage_backend="memory", sentry_dsn="",
                    sentry_test_enabled=False)


@pytest.fixture
async def client(test_settings):
    """Свежее приложение на каждый тест: хранилища не пересекаются."""
    app = create_app(test_settings)
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport,
                               base_url="http://test") as ac:
            yield ac


@pytest.fixture
def storage():
    return build_memory_storage()


@pytest.fixture
def films_service(storage) -> FilmsService:
    return FilmsService(storage)


@pytest.fixture
def users_service(storage) -> UsersService:
    return UsersService(storage)
