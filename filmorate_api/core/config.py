# filmorate_api/core/config.py
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "filmorate"
    env: str = Field(default="local")
    host: str = "0.0.0.0"
    port: int = 8080

    # memory для dev и тестов, mongo для постоянного хранения
    storage_backend: Literal["memory", "mongo"] = Field(
        default="memory", alias="FILMORATE_STORAGE"
    )
    unique_film_names: bool = Field(
        default=False, alias="FILMORATE_UNIQUE_FILM_NAMES"
    )

    mongo_dsn: str = Field(
        default="mongodb://mongo:27017/filmorate?replicaSet=rs0",
        alias="MONGO_DSN"
    )
    mongo_db: str = "filmorate"
    # транзакции требуют replica set
    mongo_transactions: bool = Field(default=True,
                                     alias="MONGO_TRANSACTIONS")

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")
    sentry_test_enabled: bool = Field(default=False,
                                      alias="SENTRY_TEST_ENABLED")
    model_config = SettingsConfigDict(env_file="infra/.env",
                                      extra="ignore",
                                      populate_by_name=True)


settings = Settings()
