"""
Custom exception hierarchy for brewdeck.

Provides structured error handling with proper HTTP status codes and error codes.
"""

from typing import Optional
from fastapi import Request
from fastapi.responses import JSONResponse


class BrewDeckException(Exception):
    """Base exception for all brewdeck errors"""
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ExecutionException(BrewDeckException):
    """Errors running the package manager executable"""
    status_code = 500
    error_code = "EXECUTION_ERROR"


class ExecutableNotFoundException(ExecutionException):
    """The executable is absent from every known location"""
    status_code = 503
    error_code = "EXECUTABLE_NOT_FOUND"


class SpawnException(ExecutionException):
    """The operating system refused to launch the executable"""
    error_code = "SPAWN_ERROR"

    def __init__(self, message: str, underlying: Optional[BaseException] = None,
                 details: Optional[dict] = None):
        super().__init__(message, details)
        self.underlying = underlying


class CommandFailedException(ExecutionException):
    """The executable ran and exited with a nonzero status"""
    status_code = 502
    error_code = "COMMAND_FAILED"

    def __init__(self, output: str, return_code: Optional[int] = None,
                 details: Optional[dict] = None):
        super().__init__(output or f"Command exited with status {return_code}", details)
        self.output = output
        self.return_code = return_code


class CatalogException(BrewDeckException):
    """Remote catalog retrieval errors"""
    status_code = 502
    error_code = "CATALOG_ERROR"


class TransportException(CatalogException):
    """Network failure or non-success HTTP status"""
    error_code = "TRANSPORT_ERROR"


class DecodeException(CatalogException):
    """Catalog payload is not valid JSON or does not match the schema"""
    error_code = "DECODE_ERROR"


class SyncException(BrewDeckException):
    """Persisted inventory could not be committed"""
    status_code = 500
    error_code = "SYNC_ERROR"


class ValidationException(BrewDeckException):
    """Input validation errors"""
    status_code = 400
    error_code = "VALIDATION_ERROR"


# Global exception handler
async def brewdeck_exception_handler(
    request: Request,
    exc: BrewDeckException
) -> JSONResponse:
    """
    Global exception handler for BrewDeckException and its subclasses.

    Returns a JSON response with error code, message, and details.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        }
    )
