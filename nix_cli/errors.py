"""Error types for an install run.

Three kinds of failure reach the user:
- usage errors (bad arguments): printed, exit 1, no server started
- collaborator errors (server start, session create, prompt submit): fatal,
  raised after the server is released
- in-band session errors: arrive as events, shown, and end the stream loop
  normally
"""

from dataclasses import dataclass
from typing import Any


class NixCliError(Exception):
    """Base class for all nix-cli errors."""


class UsageError(NixCliError):
    """Bad or missing command-line arguments.

    The message is the exact text shown to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ServerStartError(NixCliError):
    """The agent server could not be started."""


class ApiError(NixCliError):
    """A request to the agent server failed.

    status is the HTTP status code, or None for transport failures.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"

    @classmethod
    def from_response(cls, status: int, body: Any) -> "ApiError":
        """Build from an error response body.

        The server returns either {"name": ..., "data": {"message": ...}},
        {"message": ...}, or plain text.
        """
        if isinstance(body, dict):
            info = SessionErrorInfo.from_payload(body)
            if info is not None:
                return cls(info.describe(), status=status)
            message = body.get("message")
            if isinstance(message, str) and message:
                return cls(message, status=status)
        text = str(body).strip() if body else ""
        return cls(text or "request failed", status=status)


@dataclass
class SessionErrorInfo:
    """Error carried by a session.error event."""

    name: str  # e.g. "ProviderAuthError", "UnknownError", "MessageAbortedError"
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> "SessionErrorInfo | None":
        """Extract name and data.message; None if the payload isn't an error object."""
        if not isinstance(payload, dict):
            return None
        name = payload.get("name")
        if not isinstance(name, str) or not name:
            return None
        data = payload.get("data")
        message = ""
        if isinstance(data, dict):
            raw = data.get("message")
            if isinstance(raw, str):
                message = raw
        return cls(name=name, message=message)

    def describe(self) -> str:
        if self.message:
            return f"{self.name}: {self.message}"
        return self.name
