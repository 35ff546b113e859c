"""
Error handling for the FastAPI application.
Maps known exceptions to status codes and a uniform JSON body.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import AppError

logger = logging.getLogger(__name__)


def _body(request: Request, error: str, message, details=None) -> dict:
    content = {"error": error, "message": message, "path": request.url.path}
    if details is not None:
        content["details"] = details
    return content


def integrity_message(exc: IntegrityError) -> str:
    """Translate a driver integrity message into something a user can act on."""

    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "unique" in text or "duplicate key" in text:
        return "Duplicate value: the record already exists"
    if "foreign key" in text:
        return "Operation not allowed: linked records exist"
    return "Data integrity error"


def add_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.__class__.__name__, exc.message, exc.details),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.error("Integrity violation on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_body(request, "IntegrityError", integrity_message(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_body(
                request,
                "RequestValidationError",
                "Request validation failed",
                jsonable_errors(exc),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, "HTTPException", exc.detail),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_body(request, "InternalServerError", "An unexpected error occurred"),
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry exception instances (e.g. ValueError from validators)
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        err.pop("input", None)
        errors.append(err)
    return errors
