from typing import Dict, Any, Optional
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError


class BaseCustomException(Exception):
    """Base class for custom exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


class ValidationError(BaseCustomException):
    """Exception for validation errors"""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code=error_code or "VALIDATION_ERROR"
        )


class NotFoundError(BaseCustomException):
    """Exception for resource not found errors"""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code=error_code or "NOT_FOUND_ERROR"
        )


class ConflictError(BaseCustomException):
    """Exception for conflict errors"""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code=error_code or "CONFLICT_ERROR"
        )


class StoreError(BaseCustomException):
    """Exception for storage connectivity or query failures"""

    def __init__(
        self,
        message: str = "Store operation failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code=error_code or "STORE_ERROR"
        )


class ConfigurationError(BaseCustomException):
    """Exception for configuration errors"""

    def __init__(
        self,
        message: str = "Configuration error",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code=error_code or "CONFIGURATION_ERROR"
        )


# Response model for errors
class ErrorResponse(BaseModel):
    """Standard error response envelope"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None


GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def create_error_response(exception: BaseCustomException) -> Dict[str, Any]:
    """Create standardized error response"""
    # 5xx responses carry no details
    if exception.status_code >= 500:
        return ErrorResponse(
            message=exception.message if isinstance(exception, StoreError) else GENERIC_ERROR_MESSAGE,
            error_code=exception.error_code,
            timestamp=datetime.now(timezone.utc).isoformat(),
        ).model_dump(exclude_none=True)

    return ErrorResponse(
        message=exception.message,
        error_code=exception.error_code,
        details=exception.details or None,
        timestamp=datetime.now(timezone.utc).isoformat(),
    ).model_dump(exclude_none=True)


def create_validation_error_response(exc: RequestValidationError) -> Dict[str, Any]:
    """Flatten FastAPI request validation errors into a 400 envelope"""
    validation_errors: Dict[str, list] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        validation_errors.setdefault(field or "body", []).append(error.get("msg", "invalid value"))

    missing = sorted(
        field for field, messages in validation_errors.items()
        if any("required" in message.lower() for message in messages)
    )
    message = f"Missing required fields: {', '.join(missing)}" if missing else "Validation failed"

    return ErrorResponse(
        message=message,
        error_code="VALIDATION_ERROR",
        details={"validation_errors": validation_errors},
        timestamp=datetime.now(timezone.utc).isoformat(),
    ).model_dump(exclude_none=True)


# Utility functions for common error scenarios
def handle_database_error(error: Exception, operation: str = "database operation") -> StoreError:
    """Handle database errors and convert to StoreError"""
    logger.error(f"Database error during {operation}: {error}")

    error_message = "Database operation failed"
    if isinstance(error, OperationalError) or "connection" in str(error).lower():
        error_message = "Database connection failed"
    elif "timeout" in str(error).lower():
        error_message = "Database operation timed out"
    elif isinstance(error, IntegrityError) or "constraint" in str(error).lower():
        error_message = "Database constraint violation"

    return StoreError(
        message=error_message,
        details={"operation": operation, "original_error": str(error)},
        error_code="DATABASE_OPERATION_ERROR"
    )


async def custom_exception_handler(request: Request, exc: BaseCustomException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=create_error_response(exc))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    content = create_validation_error_response(exc)
    logger.info(f"{request.method} {request.url.path} -> 400: {content['message']}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    store_error = handle_database_error(exc, operation=f"{request.method} {request.url.path}")
    return JSONResponse(status_code=store_error.status_code, content=create_error_response(store_error))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error in {request.method} {request.url.path}: {exc}")
    error = BaseCustomException(message=GENERIC_ERROR_MESSAGE, error_code="UNEXPECTED_ERROR")
    return JSONResponse(status_code=error.status_code, content=create_error_response(error))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
