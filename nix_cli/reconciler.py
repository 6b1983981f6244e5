"""Stream reconciliation: session events in, ordered transcript out.

The server re-sends a part every time it changes. Text parts arrive either
as full snapshots (cumulative text) or with an incremental delta; tool parts
move through pending -> running -> completed/error and may be re-delivered
with the same status. The reconciler keeps a per-part record of what has
already been shown so every character and every tool result is written
exactly once.
"""

import json
from collections.abc import AsyncIterable
from dataclasses import dataclass
from typing import Any

from .logging_config import get_logger
from .render import TerminalWriter
from .types import (
    ROLE_ASSISTANT,
    TERMINAL_TOOL_STATUSES,
    TOOL_COMPLETED,
    TOOL_ERROR,
    TOOL_RUNNING,
    Event,
    MessageUpdated,
    PartUpdated,
    SessionError,
    SessionIdle,
    TextPart,
    ToolPart,
)

logger = get_logger(__name__)


@dataclass
class TextProgress:
    seen: int = 0  # characters already written; never decreases


@dataclass
class ToolProgress:
    last_status: str | None = None
    reported: bool = False  # a terminal status has been written


def _json(value: Any) -> str:
    if value is None:
        return ""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


class StreamReconciler:
    """Renders the events of one session. Create one per run."""

    def __init__(self, session_id: str, writer: TerminalWriter):
        self.session_id = session_id
        self._writer = writer
        self._roles: dict[str, str] = {}
        self._text: dict[str, TextProgress] = {}
        self._tools: dict[str, ToolProgress] = {}

    def process(self, event: Event) -> bool:
        """Handle one event. Returns True when the session has finished."""
        if isinstance(event, MessageUpdated):
            self._roles[event.message_id] = event.role
            return False

        if isinstance(event, PartUpdated):
            part = event.part
            if part.session_id != self.session_id:
                return False
            # Only assistant output; the user's own prompt is echoed back as parts too
            if self._roles.get(part.message_id) != ROLE_ASSISTANT:
                return False
            if isinstance(part, TextPart):
                self._on_text(part, event.delta)
            elif isinstance(part, ToolPart):
                self._on_tool(part)
            return False

        if isinstance(event, SessionIdle):
            return event.session_id == self.session_id

        if isinstance(event, SessionError):
            if event.session_id != self.session_id:
                return False
            if event.error is not None:
                self._writer.error(f"\n[session error] {event.error.describe()}")
            else:
                self._writer.error("\n[session error]")
            return True

        return False

    def _on_text(self, part: TextPart, delta: str | None) -> None:
        progress = self._text.setdefault(part.id, TextProgress())
        if delta:
            self._writer.text(delta)
            # Total length is authoritative when known; delta length is a fallback
            if part.text:
                progress.seen = max(progress.seen, len(part.text))
            else:
                progress.seen += len(delta)
            return
        if len(part.text) > progress.seen:
            self._writer.text(part.text[progress.seen :])
            progress.seen = len(part.text)

    def _on_tool(self, part: ToolPart) -> None:
        progress = self._tools.setdefault(part.id, ToolProgress())
        if progress.reported:
            return
        state = part.state
        if state.status == TOOL_RUNNING:
            if progress.last_status != TOOL_RUNNING:
                self._writer.status("running", state.title or _json(state.input))
        elif state.status == TOOL_COMPLETED:
            self._writer.status("completed", state.title or _json(state.input))
            if state.output:
                self._writer.output(state.output)
        elif state.status == TOOL_ERROR:
            self._writer.status("error", _json(state.input))
            if state.error:
                self._writer.output(state.error)
        progress.last_status = state.status
        progress.reported = state.status in TERMINAL_TOOL_STATUSES

    async def run(self, events: AsyncIterable[Event]) -> None:
        """Consume events until the session goes idle, errors, or the stream ends."""
        try:
            async for event in events:
                if self.process(event):
                    return
            logger.warning("Event stream ended before session %s finished", self.session_id)
        finally:
            self._roles.clear()
            self._text.clear()
            self._tools.clear()
