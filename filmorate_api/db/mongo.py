from contextvars import ContextVar, Token
from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
)
import logging

logger = logging.getLogger(__name__)

# сессия текущей транзакции; репозитории подхватывают её сами
_session: ContextVar[Optional[AsyncIOMotorClientSession]] = ContextVar(
    "mongo_session", default=None)


async def create_client(dsn: str) -> AsyncIOMotorClient:
    """
    Motor-клиент с явными таймаутами и пулом.
    Живёт столько же, сколько приложение (создаётся в lifespan).
    """
    client = AsyncIOMotorClient(
        dsn,
        appname="filmorate-api",
        tz_aware=True,
        maxPoolSize=50,
        minPoolSize=0,
        serverSelectionTimeoutMS=3000,
        connectTimeoutMS=3000,
        socketTimeoutMS=5000,
        retryWrites=True,
    )
    # быстрая проверка коннекта (не блокируем запуск дольше таймаута)
    try:
        await client.admin.command("ping")
    except Exception as e:
        logger.warning("mongo_ping_failed", extra={"err": str(e)})
    return client


def current_session() -> Optional[AsyncIOMotorClientSession]:
    return _session.get()


def bind_session(session: AsyncIOMotorClientSession) -> Token:
    return _session.set(session)


def unbind_session(token: Token) -> None:
    _session.reset(token)
