"""Domain errors and their JSON rendering.

Not-found failures render as ``{"error": message}`` and validation failures as
``{"errors": [messages]}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error with an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict:
        return {"error": self.message}


class RecordNotFoundError(AppError):
    """A table or row id did not resolve."""

    status_code = 404


class RecordInvalidError(AppError):
    """A record failed presence or uniqueness validation."""

    status_code = 422

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages

    def to_content(self) -> dict:
        return {"errors": self.messages}


def humanize_field(name: str) -> str:
    """Turn ``table_id`` into ``Table id``."""

    return name.replace("_", " ").strip().capitalize()


def format_request_errors(errors) -> list[str]:
    """Flatten pydantic error records into readable messages."""

    messages: list[str] = []
    for error in errors:
        loc = [part for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
        field = humanize_field(loc[-1]) if loc else "Request"
        text = str(error.get("msg", "is invalid"))
        message = f"{field} {text[:1].lower()}{text[1:]}"
        if message not in messages:
            messages.append(message)
    return messages or ["Request is invalid"]


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"errors": format_request_errors(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
