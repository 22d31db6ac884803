# hobbylist/core/errors.py
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class AppError(HTTPException):
    pass


def bad_request(message: str):
    raise AppError(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

def unauthorized(message: str = "Unauthorized"):
    raise AppError(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


def register_error_handlers(app: FastAPI) -> None:
    """Render errors as ``{"error": ...}`` JSON bodies."""

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content={"error": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # drop the "body" / "query" prefix
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    msg = first.get("msg", "invalid value")
    return f"Invalid {field}: {msg}" if field else f"Invalid request: {msg}"
