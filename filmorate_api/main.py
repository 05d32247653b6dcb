import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contextlib import asynccontextmanager

from filmorate_api.core.logger import setup_json_logging, shutdown_logging
from filmorate_api.core.sentry import init_sentry
from filmorate_api.core.config import Settings, settings as default_settings
from filmorate_api.core.middleware import RequestContextMiddleware
from filmorate_api.services.repositories.storage import build_storage

from filmorate_api.api.v1.films import router as films_router
from filmorate_api.api.v1.users import router as users_router
from filmorate_api.api.v1.genres import genres_router, mpa_router
from filmorate_api.api.v1.debug import include_debug_routes

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request,
                                     exc: RequestValidationError):
    # некорректное тело или параметры: такой же 400, как доменная валидация
    logger.warning("request_validation_failed",
                   extra={"path": request.url.path,
                          "errors": str(exc.errors())})
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST,
                        content={"detail": "validation_error",
                                 "errors": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg")}
            for err in exc.errors()]


def create_app(settings: Settings = default_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 1) логи до всего
        setup_json_logging(service=settings.app_name, env=settings.env)
        init_sentry(settings.sentry_dsn, environment=settings.env)

        # 2) хранилище: in-memory или Mongo, выбирается конфигом
        app.state.storage = await build_storage(settings)
        try:
            yield
        finally:
            app.state.storage.close()
            shutdown_logging()

    app = FastAPI(title="Filmorate", lifespan=lifespan)

    # trace_id + access JSON
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError,
                              request_validation_handler)

    include_debug_routes(app, settings.sentry_test_enabled)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(films_router)
    app.include_router(users_router)
    app.include_router(genres_router)
    app.include_router(mpa_router)
    return app


# приглушим штатный uvicorn-access, чтобы не было дублей
logging.getLogger("uvicorn.access").setLevel("WARNING")

app = create_app()
