import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_cms.utils.exceptions import AppException, InternalError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again later"


def _internal_error_response() -> JSONResponse:
    exc = InternalError(GENERIC_ERROR_MESSAGE)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request payload", "errors": errors},
    )


async def store_exception_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception("store.error %s %s", request.method, request.url.path)
    return _internal_error_response()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Internals stay in the log, never in the body.
    logger.exception("unhandled.error %s %s", request.method, request.url.path)
    return _internal_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PyMongoError, store_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
