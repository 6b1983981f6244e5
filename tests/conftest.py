"""Shared fixtures for nix-cli tests."""

import io

import pytest

from nix_cli.render import TerminalWriter

SESSION = "ses_test"


class RecordingWriter(TerminalWriter):
    """TerminalWriter that also records each write as a separate fragment."""

    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(self.buffer, color=False)
        self.fragments: list[str] = []

    def _write(self, text: str) -> None:
        self.fragments.append(text)
        super()._write(text)

    @property
    def value(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture
def writer():
    return RecordingWriter()


# --- Raw event builders (server wire format) ---


def message_updated(message_id="msg_1", role="assistant", session_id=SESSION):
    return {
        "type": "message.updated",
        "properties": {"info": {"id": message_id, "sessionID": session_id, "role": role}},
    }


def text_part(part_id="prt_1", text="", delta=None, message_id="msg_1", session_id=SESSION):
    props = {
        "part": {
            "id": part_id,
            "sessionID": session_id,
            "messageID": message_id,
            "type": "text",
            "text": text,
        }
    }
    if delta is not None:
        props["delta"] = delta
    return {"type": "message.part.updated", "properties": props}


def tool_part(part_id="prt_t", message_id="msg_1", session_id=SESSION, tool="bash", **state):
    state.setdefault("input", {"command": "nix profile add nixpkgs#hello"})
    return {
        "type": "message.part.updated",
        "properties": {
            "part": {
                "id": part_id,
                "sessionID": session_id,
                "messageID": message_id,
                "type": "tool",
                "tool": tool,
                "state": state,
            }
        },
    }


def session_idle(session_id=SESSION):
    return {"type": "session.idle", "properties": {"sessionID": session_id}}


def session_error(session_id=SESSION, name="UnknownError", message="boom"):
    props = {"error": {"name": name, "data": {"message": message}}}
    if session_id is not None:
        props["sessionID"] = session_id
    return {"type": "session.error", "properties": props}
