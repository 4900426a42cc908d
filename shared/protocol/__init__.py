"""
Shared protocol package: constants, message model, raw transport helpers and
the errors both roles raise.
"""

from .constants import (
    DEFAULT_BIND_HOST,
    DEFAULT_PORT,
    DEFAULT_SERVER_HOST,
    ENCODING,
    LISTEN_BACKLOG,
    RECV_BUFFER_SIZE,
    TERMINATION_SENTINEL,
)
from .errors import ConfigError, ExitStatus, SetupError, SetupStep
from .framing import decode_payload, encode_text, receive_message, send_message
from .messages import ChatMessage, Direction, Phase, Role, display_prefix, prompt_for, turn_order

__all__ = [
    "DEFAULT_BIND_HOST",
    "DEFAULT_PORT",
    "DEFAULT_SERVER_HOST",
    "ENCODING",
    "LISTEN_BACKLOG",
    "RECV_BUFFER_SIZE",
    "TERMINATION_SENTINEL",
    "ConfigError",
    "ExitStatus",
    "SetupError",
    "SetupStep",
    "decode_payload",
    "encode_text",
    "receive_message",
    "send_message",
    "ChatMessage",
    "Direction",
    "Phase",
    "Role",
    "display_prefix",
    "prompt_for",
    "turn_order",
]
