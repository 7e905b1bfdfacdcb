"""
Tests for the exception hierarchy and the JSON exception handler.
"""

import json

import pytest

from brewdeck.exceptions import (
    BrewDeckException,
    CatalogException,
    CommandFailedException,
    DecodeException,
    ExecutableNotFoundException,
    ExecutionException,
    SpawnException,
    SyncException,
    TransportException,
    ValidationException,
    brewdeck_exception_handler,
)


class TestHierarchy:
    """Tests for status and error codes."""

    @pytest.mark.parametrize("exc_class,status_code,error_code", [
        (ExecutableNotFoundException, 503, "EXECUTABLE_NOT_FOUND"),
        (SpawnException, 500, "SPAWN_ERROR"),
        (TransportException, 502, "TRANSPORT_ERROR"),
        (DecodeException, 502, "DECODE_ERROR"),
        (SyncException, 500, "SYNC_ERROR"),
        (ValidationException, 400, "VALIDATION_ERROR"),
    ])
    def test_codes(self, exc_class, status_code, error_code):
        exc = exc_class("message")

        assert exc.status_code == status_code
        assert exc.error_code == error_code
        assert isinstance(exc, BrewDeckException)

    def test_execution_family(self):
        """Test that all runner failures share one base."""
        for exc_class in (ExecutableNotFoundException, SpawnException, CommandFailedException):
            assert issubclass(exc_class, ExecutionException)
        for exc_class in (TransportException, DecodeException):
            assert issubclass(exc_class, CatalogException)

    def test_command_failed(self):
        exc = CommandFailedException("Error: boom\n", return_code=2)

        assert exc.output == "Error: boom\n"
        assert exc.return_code == 2
        assert exc.status_code == 502
        assert str(exc) == "Error: boom\n"

    def test_spawn_keeps_underlying(self):
        cause = PermissionError("denied")
        exc = SpawnException("Failed to launch", underlying=cause)

        assert exc.underlying is cause
        assert exc.details == {}


class TestHandler:
    """Tests for brewdeck_exception_handler."""

    async def test_renders_json(self):
        exc = CommandFailedException("Error: boom", return_code=1, details={"command": "brew upgrade wget"})

        response = await brewdeck_exception_handler(None, exc)

        assert response.status_code == 502
        assert json.loads(response.body) == {
            "error": "COMMAND_FAILED",
            "message": "Error: boom",
            "details": {"command": "brew upgrade wget"},
        }
