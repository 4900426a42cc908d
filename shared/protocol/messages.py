from __future__ import annotations

import time
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import ENCODING
from .framing import decode_payload, encode_text


def _default_timestamp() -> float:
    return time.time()


class Role(str, Enum):
    INITIATOR = "initiator"
    RESPONDER = "responder"


class Phase(str, Enum):
    AWAIT_LOCAL_INPUT = "await_local_input"
    AWAIT_REMOTE_MESSAGE = "await_remote_message"


class Direction(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"


# Initiator speaks first; the Responder listens first.
_TURN_ORDER = {
    Role.INITIATOR: (Phase.AWAIT_LOCAL_INPUT, Phase.AWAIT_REMOTE_MESSAGE),
    Role.RESPONDER: (Phase.AWAIT_REMOTE_MESSAGE, Phase.AWAIT_LOCAL_INPUT),
}

_PROMPTS = {Role.INITIATOR: "Client: ", Role.RESPONDER: "Server: "}

# How a role labels what its peer said.
_DISPLAY_PREFIX = {Role.INITIATOR: "Server: ", Role.RESPONDER: "Client:"}


def turn_order(role: Role) -> Tuple[Phase, Phase]:
    """Phases of one loop iteration for ``role``."""
    return _TURN_ORDER[Role(role)]


def prompt_for(role: Role) -> str:
    """Prompt shown before reading a local line, named after the speaker."""
    return _PROMPTS[Role(role)]


def display_prefix(role: Role) -> str:
    """Label a role puts in front of its peer's message."""
    return _DISPLAY_PREFIX[Role(role)]


class ChatMessage(BaseModel):
    """One message as handled by a session: exactly one send or one read."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Role of the session that handled the message")
    direction: Direction = Field(..., description="outgoing (local input) / incoming (peer)")
    payload: bytes = Field(default=b"", description="Raw bytes as written to / read from the wire")
    timestamp: float = Field(default_factory=_default_timestamp, description="Unix timestamp (seconds)")

    @classmethod
    def outgoing(cls, role: Role, text: str, encoding: str = ENCODING) -> "ChatMessage":
        return cls(role=role, direction=Direction.OUTGOING, payload=encode_text(text, encoding))

    @classmethod
    def from_wire(cls, role: Role, data: bytes) -> "ChatMessage":
        return cls(role=role, direction=Direction.INCOMING, payload=bytes(data))

    @property
    def size(self) -> int:
        return len(self.payload)

    def text(self, encoding: str = ENCODING) -> str:
        return decode_payload(self.payload, encoding)

    def is_sentinel(self, sentinel: str, encoding: str = ENCODING) -> bool:
        return self.payload == encode_text(sentinel, encoding)


__all__ = [
    "Role",
    "Phase",
    "Direction",
    "ChatMessage",
    "turn_order",
    "prompt_for",
    "display_prefix",
]
