"""Structured errors and the uniform result shape returned by domain operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    STAGE_NOT_EMPTY = "STAGE_NOT_EMPTY"
    STORE_FAILURE = "STORE_FAILURE"


HTTP_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.CONFLICT: 409,
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.STAGE_NOT_EMPTY: 409,
    ErrorCode.STORE_FAILURE: 500,
}


class DomainError(Exception):
    """Raised inside services; converted to an OperationResult at the boundary."""

    code: ErrorCode = ErrorCode.STORE_FAILURE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(DomainError):
    code = ErrorCode.VALIDATION_ERROR


class DuplicateMember(DomainError):
    code = ErrorCode.CONFLICT


class ConfigurationError(DomainError):
    code = ErrorCode.CONFIGURATION_ERROR


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND


class StageNotEmpty(DomainError):
    code = ErrorCode.STAGE_NOT_EMPTY


class StoreFailure(DomainError):
    code = ErrorCode.STORE_FAILURE


@dataclass
class OperationError:
    code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code.value, self.message, self.details)


@dataclass
class OperationResult(Generic[T]):
    """Success/error envelope returned by every domain operation."""

    success: bool
    data: Optional[T] = None
    error: Optional[OperationError] = field(default=None)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "OperationResult[T]":
        return cls(success=False, error=OperationError(code, message, details))

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def unwrap(self) -> T:
        """Return the data or raise the matching AppError (used by routers)."""
        if not self.success:
            assert self.error is not None
            raise AppError(
                HTTP_STATUS_BY_CODE[self.error.code],
                self.error.code.value,
                self.error.message,
                self.error.details,
            )
        return self.data  # type: ignore[return-value]


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = build_error_payload(code, message, details)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


def raise_app_error(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Raise an AppError with a standardized error shape."""
    raise AppError(status_code, code, message, details)
