"""
Domain exceptions for chat exchanges and session storage.
"""

from __future__ import annotations
from typing import Optional


class ChatError(Exception):
    """Base class for errors raised by the chat core."""


class EmptyMessageError(ChatError):
    """Raised when a message is empty after trimming whitespace."""

    def __init__(self, message: str = "Message must not be empty"):
        super().__init__(message)


class InvalidModelIdentifierError(ChatError, ValueError):
    """Raised when a model identifier is not a usable string."""


class BackendInvocationError(ChatError):
    """The inference call itself failed (unreachable, transport error, timeout)."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        model: Optional[str] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code
        self.model = model

    @property
    def details(self) -> str:
        if self.cause is None:
            return str(self)
        return f"{type(self.cause).__name__}: {self.cause}"


class ExchangeInProgressError(ChatError):
    """A second exchange was started for a session whose first is still pending."""

    def __init__(self, session_id: str):
        super().__init__(f"An exchange is already in progress for session {session_id}")
        self.session_id = session_id


class StorageError(ChatError):
    """Session persistence failed. Always non-fatal to the conversation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
