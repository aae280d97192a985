"""
Exception handlers producing the JSON error envelope.
"""
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from eventora.core.config import settings
from eventora.core.logging import logger


def error_response(status_code: int, error: str, headers=None, **extra) -> JSONResponse:
    content = {"success": False, "error": error}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content), headers=headers)


def _validation_message(error: dict) -> str:
    message = error.get("msg", "Invalid request")
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if location and error.get("type") != "value_error":
        return f"{'.'.join(location)}: {message}"
    return message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _validation_message(errors[0]) if errors else "Invalid request"
    logger.debug(f"Validation failed on {request.url.path}: {message}")
    details = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
        for error in errors
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, message, details=details)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return error_response(status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests, please try again later.")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    extra = {"message": str(exc)} if settings.ENVIRONMENT == "development" else {}
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", **extra)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
