"""Event types for the agent session stream.

Raw events are JSON objects of the form {"type": ..., "properties": {...}}.
decode_event() turns one into a tagged variant carrying only the fields the
reconciler needs. Anything unrecognised or malformed becomes UnknownEvent.
"""

from dataclasses import dataclass
from typing import Any, Union

from typing_extensions import Self

from .errors import SessionErrorInfo
from .logging_config import get_logger

logger = get_logger(__name__)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

TOOL_PENDING = "pending"
TOOL_RUNNING = "running"
TOOL_COMPLETED = "completed"
TOOL_ERROR = "error"
TOOL_STATUSES = (TOOL_PENDING, TOOL_RUNNING, TOOL_COMPLETED, TOOL_ERROR)
TERMINAL_TOOL_STATUSES = (TOOL_COMPLETED, TOOL_ERROR)


def _str(data: dict, key: str) -> str:
    """Required non-empty string field."""
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} must be a non-empty string")
    return value


def _opt_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _dict(data: dict, key: str) -> dict:
    value = data[key]
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be an object")
    return value


@dataclass
class Session:
    """A session created on the agent server."""

    id: str
    title: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        return cls(id=_str(data, "id"), title=_opt_str(data, "title") or "")


@dataclass
class TextPart:
    id: str
    session_id: str
    message_id: str
    text: str

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        return cls(
            id=_str(data, "id"),
            session_id=_str(data, "sessionID"),
            message_id=_str(data, "messageID"),
            text=_opt_str(data, "text") or "",
        )


@dataclass
class ToolState:
    """Tool invocation state. output is set when completed, error when failed."""

    status: str
    input: Any = None
    title: str | None = None
    output: str | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        status = _str(data, "status")
        if status not in TOOL_STATUSES:
            raise ValueError(f"unknown tool status: {status}")
        return cls(
            status=status,
            input=data.get("input"),
            title=_opt_str(data, "title"),
            output=_opt_str(data, "output") if status == TOOL_COMPLETED else None,
            error=_opt_str(data, "error") if status == TOOL_ERROR else None,
        )


@dataclass
class ToolPart:
    id: str
    session_id: str
    message_id: str
    tool: str
    state: ToolState

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        return cls(
            id=_str(data, "id"),
            session_id=_str(data, "sessionID"),
            message_id=_str(data, "messageID"),
            tool=_opt_str(data, "tool") or "",
            state=ToolState.from_dict(_dict(data, "state")),
        )


Part = Union[TextPart, ToolPart]


@dataclass
class MessageUpdated:
    message_id: str
    session_id: str
    role: str


@dataclass
class PartUpdated:
    part: Part
    delta: str | None = None


@dataclass
class SessionIdle:
    session_id: str


@dataclass
class SessionError:
    session_id: str | None = None  # None for errors not tied to a session
    error: SessionErrorInfo | None = None


@dataclass
class UnknownEvent:
    type: str


Event = Union[MessageUpdated, PartUpdated, SessionIdle, SessionError, UnknownEvent]


def _decode_message_updated(props: dict) -> MessageUpdated:
    info = _dict(props, "info")
    return MessageUpdated(
        message_id=_str(info, "id"),
        session_id=_str(info, "sessionID"),
        role=_str(info, "role"),
    )


def _decode_part_updated(props: dict) -> PartUpdated | UnknownEvent:
    raw = _dict(props, "part")
    part_type = raw.get("type")
    part: Part
    if part_type == "text":
        part = TextPart.from_dict(raw)
    elif part_type == "tool":
        part = ToolPart.from_dict(raw)
    else:
        # reasoning, step-start, file, patch, ... are not rendered
        return UnknownEvent(type=f"message.part.updated:{part_type}")
    delta = _opt_str(props, "delta")
    return PartUpdated(part=part, delta=delta or None)


def _decode_session_error(props: dict) -> SessionError:
    return SessionError(
        session_id=_opt_str(props, "sessionID"),
        error=SessionErrorInfo.from_payload(props.get("error")),
    )


_DECODERS = {
    "message.updated": _decode_message_updated,
    "message.part.updated": _decode_part_updated,
    "session.idle": lambda props: SessionIdle(session_id=_str(props, "sessionID")),
    "session.error": _decode_session_error,
}


def decode_event(raw: Any) -> Event:
    """Decode one raw event. Never raises."""
    if not isinstance(raw, dict):
        logger.debug("Ignoring non-object event: %r", raw)
        return UnknownEvent(type="")
    event_type = raw.get("type")
    if not isinstance(event_type, str):
        logger.debug("Ignoring event without type: %r", raw)
        return UnknownEvent(type="")
    decoder = _DECODERS.get(event_type)
    if decoder is None:
        return UnknownEvent(type=event_type)
    props = raw.get("properties")
    if not isinstance(props, dict):
        logger.debug("Ignoring %s without properties", event_type)
        return UnknownEvent(type=event_type)
    try:
        return decoder(props)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Ignoring malformed %s event: %s", event_type, e)
        return UnknownEvent(type=event_type)
