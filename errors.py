"""
Domain errors raised by the repositories and services.

Each error carries the HTTP status it maps to; the request-handler boundary
in ``main`` turns them into ``{"success": false, "message": ...}`` responses.
"""

from typing import Any, Dict, Iterable


class AppError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """A required field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class UserNotFound(NotFound):
    default_message = "User not found"


class ArticleNotFound(NotFound):
    default_message = "Article not found"


class DuplicateEmail(AppError):
    status_code = 400
    default_message = "Email is already registered"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid email or password"


class PersistenceError(AppError):
    """The document store rejected or failed a read/write."""

    status_code = 500
    default_message = "Internal Server Error"


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """Render pydantic error dicts as one readable sentence."""
    missing = []
    problems = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        if err.get("type") == "missing":
            missing.append(field)
        else:
            problems.append(f"{field}: {err.get('msg')}")

    parts = []
    if missing:
        parts.append("Missing required fields: " + ", ".join(missing))
    parts.extend(problems)
    return "; ".join(parts) or ValidationError.default_message
