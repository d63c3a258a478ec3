"""Common API response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope returned by the client data-access layer."""

    data: T


class DeleteResult(BaseModel):
    """Generic delete response payload."""

    id: int
    deleted: bool = True


class ErrorResponse(BaseModel):
    """Not-found and other single-message failures."""

    error: str


class ValidationErrorResponse(BaseModel):
    """Validation failures as human-readable messages."""

    errors: list[str]
