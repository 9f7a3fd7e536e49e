"""
Domain errors raised by the booking core.

Each error carries the HTTP status it maps to; ``bookly.main`` renders them
as ``{"error": message}`` bodies.
"""

from typing import Dict, Optional


class BooklyError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BooklyError):
    """400 - missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundError(BooklyError):
    """404 - a referenced experience, slot or booking does not exist."""

    status_code = 404
    default_message = "Not found"


class CapacityError(BooklyError):
    """400 - the slot cannot seat the requested party."""

    status_code = 400
    default_message = "Not enough capacity available"


class ConflictError(BooklyError):
    """409 - the record is in a state that forbids the operation."""

    status_code = 409
    default_message = "Conflict"


class PersistenceError(BooklyError):
    """500 - storage failure. The message never includes driver text."""

    status_code = 500
    default_message = "A storage error occurred"
