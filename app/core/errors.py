"""
Structured failures raised by the daily engine, the importer and the stores.

Every error carries a ``kind`` (reported to clients) and the HTTP status the
API layer answers with. Nothing here is retried automatically.
"""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CoreError(Exception):
    kind = "CoreError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class InvalidArgument(CoreError):
    """Missing or malformed input. Raised before any store access."""
    kind = "InvalidArgument"
    status_code = 400


class UnsupportedFormat(CoreError):
    kind = "UnsupportedFormat"
    status_code = 400


class NoValidQuestions(CoreError):
    kind = "NoValidQuestions"
    status_code = 400


class StoreUnavailable(CoreError):
    """The persistence layer could not be reached or failed mid-operation."""
    kind = "StoreUnavailable"
    status_code = 503


async def core_error_handler(request: Request, exc: CoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters answer like any InvalidArgument."""
    message = "Invalid request data"
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{message}: {location}: {errors[0].get('msg', 'invalid value')}"

    logger.info("[API] rejected request path=%s reason=%s", request.url.path, message)
    error = InvalidArgument(message)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
