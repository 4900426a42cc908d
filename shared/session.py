from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from shared.protocol.framing import receive_message, send_message
from shared.protocol.messages import (
    ChatMessage,
    Direction,
    Phase,
    Role,
    display_prefix,
    prompt_for,
    turn_order,
)
from shared.settings import ChatSettings

logger = logging.getLogger(__name__)

LineReader = Callable[[str], str]
LineWriter = Callable[[str], None]


class EndReason(str, Enum):
    SENTINEL_SENT = "sentinel_sent"
    PEER_CLOSED = "peer_closed"
    INPUT_CLOSED = "input_closed"


@dataclass
class SessionOutcome:
    reason: EndReason
    transcript: List[ChatMessage] = field(default_factory=list)

    @property
    def sent(self) -> List[ChatMessage]:
        return [m for m in self.transcript if m.direction is Direction.OUTGOING]

    @property
    def received(self) -> List[ChatMessage]:
        return [m for m in self.transcript if m.direction is Direction.INCOMING]


def _print_line(text: str) -> None:
    print(text, flush=True)


class ChatSession:
    """Alternating send/receive loop over one established connection.

    Every call blocks: a local turn waits on ``read_line`` and a remote turn
    waits until the peer writes, closes, or the transport fails.
    """

    def __init__(
        self,
        connection: socket.socket,
        role: Role,
        settings: ChatSettings,
        read_line: Optional[LineReader] = None,
        write_line: Optional[LineWriter] = None,
    ) -> None:
        self.connection = connection
        self.role = Role(role)
        self.settings = settings
        self.read_line: LineReader = read_line or input
        self.write_line: LineWriter = write_line or _print_line
        self.transcript: List[ChatMessage] = []

    def run(self) -> SessionOutcome:
        phases = turn_order(self.role)
        logger.info("Session started as %s", self.role.value)
        while True:
            for phase in phases:
                if phase is Phase.AWAIT_LOCAL_INPUT:
                    reason = self._local_turn()
                else:
                    reason = self._remote_turn()
                if reason is not None:
                    logger.info("Session ended: %s", reason.value)
                    return SessionOutcome(reason=reason, transcript=list(self.transcript))

    def _local_turn(self) -> Optional[EndReason]:
        encoding = self.settings.encoding
        while True:
            try:
                text = self.read_line(prompt_for(self.role))
            except EOFError:
                return EndReason.INPUT_CLOSED
            text = text.rstrip("\r\n")
            try:
                message = ChatMessage.outgoing(self.role, text, encoding)
            except UnicodeEncodeError as exc:
                # Nothing was sent, so the turn is still ours.
                logger.warning("Line not sent, cannot encode as %s: %s", encoding, exc)
                self.write_line(f"Cannot send that line as {encoding}, try again.")
                continue
            break

        try:
            send_message(self.connection, message.payload)
        except OSError as exc:
            logger.info("Send failed, peer gone: %s", exc)
            return EndReason.PEER_CLOSED
        self.transcript.append(message)

        if message.is_sentinel(self.settings.sentinel, self.settings.encoding):
            return EndReason.SENTINEL_SENT
        return None

    def _remote_turn(self) -> Optional[EndReason]:
        data = receive_message(self.connection, self.settings.buffer_size)
        if data is None:
            return EndReason.PEER_CLOSED

        # A received sentinel is shown like any other text; the session then
        # ends on the zero-length read that follows the peer's close.
        message = ChatMessage.from_wire(self.role, data)
        self.transcript.append(message)
        self.write_line(f"{display_prefix(self.role)}{message.text(self.settings.encoding)}")
        return None


__all__ = ["ChatSession", "EndReason", "SessionOutcome", "LineReader", "LineWriter"]
