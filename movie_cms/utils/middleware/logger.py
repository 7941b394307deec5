import logging
import time
import uuid
import contextvars
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context var holding the current request id so any log line can carry it
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdFilter(logging.Filter):
    """Attach request_id to every LogRecord so the formatter can include it."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at app startup.
    Lines look like: 2026-01-01 10:00:00,000 INFO [<request id>] movie_cms.crud.movie_crud: movie.created ...
    """
    root = logging.getLogger()
    if root.handlers:
        # Reloads during development would otherwise stack handlers
        return

    handler = logging.StreamHandler()
    fmt = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(RequestIdFilter())

    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.addHandler(handler)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Per-request access log.

    - Reuses an incoming X-Request-ID or generates one, and stores it in a context var.
    - Logs request start (method, path, client) and end (status, duration_ms).
    - Echoes the request id back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(req_id)

        logger = logging.getLogger("movie_cms.middleware")
        start = time.perf_counter()

        try:
            client_host = request.client.host if request.client else None
            logger.info(
                "request.start %s %s client=%s",
                request.method,
                request.url.path,
                client_host,
            )

            response = await call_next(request)

            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "request.end %s %s status=%s duration_ms=%s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
            response.headers[REQUEST_ID_HEADER] = req_id
            return response

        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request.error %s %s duration_ms=%s",
                request.method,
                request.url.path,
                duration_ms,
            )
            raise
        finally:
            request_id_ctx.reset(token)
