import logging
import sys
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from pythonjsonlogger import jsonlogger
from filmorate_api.core.trace import get_trace_id
from filmorate_api.core.config import settings


class TraceContextFilter(logging.Filter):
    def __init__(self, service: str | None = None,
                 env: str | None = None) -> None:
        super().__init__()
        self.service = service or settings.app_name
        self.env = env or settings.env

    def filter(self, record: logging.LogRecord) -> bool:
        # проставляем поля ДО записи в поток
        record.trace_id = (getattr(record, "trace_id", None)
                           or get_trace_id() or "-")
        record.service = getattr(record, "service", None) or self.service
        record.env = getattr(record, "env", None) or self.env
        return True


_listener: QueueListener | None = None


def setup_json_logging(service: str = "filmorate",
                       env: str | None = None,
                       level: int = logging.INFO) -> None:
    global _listener
    if _listener is not None:
        # повторный старт (тесты поднимают приложение много раз)
        shutdown_logging()

    root = logging.getLogger()
    root.setLevel(level)

    fmt = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s"
        " %(message)s %(pathname)s %(lineno)d "
        "%(trace_id)s %(service)s %(env)s"
    )
    context_filter = TraceContextFilter(service=service, env=env)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(fmt)
    stream_handler.addFilter(context_filter)

    q: Queue = Queue(-1)
    queue_handler = QueueHandler(q)
    # обогащаем record ДО помещения в очередь
    queue_handler.addFilter(context_filter)

    _listener = QueueListener(q, stream_handler, respect_handler_level=True)
    _listener.start()

    root.handlers = [queue_handler]

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    logging.getLogger(__name__).info(
        "logger_initialized",
        extra={"service": service})


def shutdown_logging() -> None:
    """Аккуратно остановить listener при выключении приложения."""
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
