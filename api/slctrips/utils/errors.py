"""
API Error Taxonomy & Exception Handlers

Every error leaves the API as JSON shaped ``{"error": ..., "message": ...}``.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(
        self,
        message: str,
        *,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        **extra: Any,
    ):
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message, **self.extra}


class BadRequest(APIError):
    """Missing or invalid required input"""
    status_code = 400
    error = "Bad Request"


class NotFound(APIError):
    """Lookup exhausted every strategy"""
    status_code = 404
    error = "Not Found"


class MethodNotAllowed(APIError):
    status_code = 405
    error = "Method not allowed"


class UpstreamFailure(APIError):
    """Database or third-party API failure"""
    status_code = 500
    error = "Internal server error"


class ConfigurationError(APIError):
    """A required credential or setting is missing"""
    status_code = 503
    error = "Configuration Error"


async def api_error_handler(request: Request, exc: APIError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error}: {exc.message}")
    return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        content = {"error": MethodNotAllowed.error, "message": f"{request.method} is not supported on {request.url.path}"}
    elif exc.status_code == 404:
        content = {"error": NotFound.error, "message": str(exc.detail)}
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return ORJSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("query", "body"))
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return ORJSONResponse(
        status_code=400,
        content={"error": BadRequest.error, "message": "; ".join(problems) or "Invalid request"},
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}")
    failure = UpstreamFailure(str(getattr(exc, "orig", None) or exc))
    return ORJSONResponse(status_code=failure.status_code, content=failure.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return ORJSONResponse(
        status_code=500,
        content={"error": UpstreamFailure.error, "message": str(exc) or "Unknown error"},
    )


def register_exception_handlers(app: FastAPI):
    """Install the JSON error handlers on the application"""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
