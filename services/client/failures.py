"""Chat Client — failure taxonomy and response-body helpers."""

from typing import Any, Iterable, Optional

from client_config import REPLY_FIELDS


class ChatFailure(Exception):
    """A failed exchange with the relay; `message` is shown to the user."""

    default_message = "Unexpected error. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RequestTimedOut(ChatFailure):
    default_message = "Request timed out. Please try again."


class ServiceUnreachable(ChatFailure):
    default_message = "Unable to reach AI service."


class Offline(ChatFailure):
    default_message = "You appear to be offline. Check your connection and try again."


class HttpError(ChatFailure):
    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"Server error: {status_code}")


class ApplicationError(ChatFailure):
    pass


class EmptyReply(ChatFailure):
    default_message = "AI returned an empty response."


def _first_string(data: dict, fields: Iterable[str]) -> str:
    for field in fields:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def error_text(data: Any, fields: Iterable[str] = ("error", "message")) -> str:
    if isinstance(data, dict):
        return _first_string(data, fields)
    return ""


def extract_reply(data: Any, fields: Iterable[str] = REPLY_FIELDS) -> str:
    """Reply text from a relay body: a bare string or the first known field."""
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, dict):
        return _first_string(data, fields).strip()
    return ""
