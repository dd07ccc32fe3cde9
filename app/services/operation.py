"""Boundary decorator that turns service exceptions into OperationResult values."""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.errors import DomainError, ErrorCode, OperationResult

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def validation_details(exc: ValidationError) -> dict[str, Any]:
    """Map pydantic errors to {field: message} for form rendering."""
    fields: dict[str, str] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
        fields.setdefault(loc or "__all__", err.get("msg", "Invalid value"))
    return {"fields": fields}


def domain_operation(failure_message: str) -> Callable[[F], F]:
    """
    Wrap an async service method so it never raises.

    The wrapped method returns its value wrapped in OperationResult.ok(); the
    service instance must expose the request session as `self.db`, which is
    rolled back on any failure. `failure_message` is the generic text shown for
    unexpected store errors.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs) -> OperationResult:
            try:
                value = await func(self, *args, **kwargs)
                return OperationResult.ok(value)
            except DomainError as exc:
                await self.db.rollback()
                if exc.code is ErrorCode.STORE_FAILURE:
                    logger.error("%s: %s", func.__qualname__, exc.message)
                return OperationResult.fail(exc.code, exc.message, exc.details)
            except ValidationError as exc:
                await self.db.rollback()
                return OperationResult.fail(
                    ErrorCode.VALIDATION_ERROR,
                    "Invalid data",
                    validation_details(exc),
                )
            except SQLAlchemyError:
                logger.exception("Store failure in %s", func.__qualname__)
                await self.db.rollback()
                return OperationResult.fail(ErrorCode.STORE_FAILURE, failure_message)
            except Exception:
                logger.exception("Unexpected error in %s", func.__qualname__)
                await self.db.rollback()
                return OperationResult.fail(ErrorCode.STORE_FAILURE, failure_message)

        return wrapper  # type: ignore[return-value]

    return decorator
