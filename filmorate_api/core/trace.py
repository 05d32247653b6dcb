import uuid
from contextvars import ContextVar, Token

TRACE_HEADER = "X-Request-Id"

_trace_id: ContextVar[str] = ContextVar("trace_id", default="-")


def get_trace_id() -> str:
    return _trace_id.get()


def set_trace_id(value: str | None = None) -> Token:
    """Ставит trace_id текущего запроса (новый uuid4, если не передан)."""
    return _trace_id.set(value or str(uuid.uuid4()))


def reset_trace_id(token: Token) -> None:
    _trace_id.reset(token)
