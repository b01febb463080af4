"""Error kinds raised by the service layer and mapped to HTTP responses in main."""

from typing import Dict, List, Optional


class TaskTrackerError(Exception):
    """Base error carrying an HTTP status and a message safe to show callers."""

    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(TaskTrackerError):
    """Missing or invalid task field."""

    status_code = 400
    message = "Invalid task data"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class Unauthenticated(TaskTrackerError):
    status_code = 401
    message = "Not authenticated"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(TaskTrackerError):
    # Same message whether the task is missing or owned by someone else
    status_code = 404
    message = "Task not found"


class StoreError(TaskTrackerError):
    """Persistence failure. The original exception is chained, never returned to callers."""

    status_code = 500
    message = "Server error"


def describe_errors(errors: List[Dict]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs for response bodies."""
    described = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        described.append({"field": ".".join(loc), "message": msg})
    return described


def summarize_errors(described: List[Dict[str, str]]) -> str:
    if not described:
        return ValidationError.message
    first = described[0]
    return f"{first['field']}: {first['message']}" if first["field"] else first["message"]
