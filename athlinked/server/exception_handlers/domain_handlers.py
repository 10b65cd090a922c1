"""
Handlers for expected errors.

Domain exceptions, ``HTTPException`` and request validation failures all
answer with the ``{"success": false, "message": ...}`` envelope so clients
can read one shape for every error.
"""

from typing import Any, Dict, Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from athlinked.core.exceptions import AthLinkedError
from athlinked.core.logging_config import get_logger

logger = get_logger(__name__)

# Location prefixes FastAPI puts in front of the field name
_LOCATION_PARTS = {"body", "query", "path", "header", "cookie"}


def error_body(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def describe_validation_error(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Turn the first pydantic error into one readable sentence.

    Missing or null values read ``"<field> is required"``; other failures
    read ``"<field>: <reason>"``. Errors raised by model validators carry no
    field and keep their own message.
    """
    if not errors:
        return "Invalid request"
    error = errors[0]
    path = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PARTS]
    field = ".".join(path)
    reason = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")

    missing = error.get("type") == "missing" or ("input" in error and error["input"] is None)
    if missing:
        return f"{field} is required" if field else "Request body is required"
    return f"{field}: {reason}" if field else reason


async def domain_exception_handler(request: Request, exc: AthLinkedError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_error(exc.errors())
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=error_body(message))
