"""Raw, unframed message transport.

A message is exactly the payload of one ``sendall`` on the sending side and
whatever a single ``recv_into`` returns on the receiving side. No delimiter or
length prefix is written, so two quick sends may arrive coalesced in one read
and a send larger than the receive buffer is observed only up to the buffer
capacity by that read.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from .constants import ENCODING, RECV_BUFFER_SIZE

logger = logging.getLogger(__name__)


def encode_text(text: str, encoding: str = ENCODING) -> bytes:
    """Encode local input for the wire. Nothing is appended.

    Undecodable terminal bytes reach us as lone surrogates and are written
    back out unchanged.
    """
    return text.encode(encoding, errors="surrogateescape")


def decode_payload(data: bytes, encoding: str = ENCODING) -> str:
    """Decode received bytes for display, replacing invalid sequences."""
    return data.decode(encoding, errors="replace")


def send_message(sock: socket.socket, data: bytes) -> None:
    """Write one message. Blocks until the kernel has taken every byte."""
    sock.sendall(data)
    logger.debug("Sent %d bytes", len(data))


def receive_message(sock: socket.socket, capacity: int = RECV_BUFFER_SIZE) -> Optional[bytes]:
    """Perform one blocking read of at most ``capacity`` bytes.

    Returns ``None`` when the peer closed the connection or the read failed;
    callers treat both as the end of the session.
    """
    buffer = bytearray(capacity)  # zero-filled before every read
    try:
        received = sock.recv_into(buffer, capacity)
    except OSError as exc:
        logger.info("Receive failed: %s", exc)
        return None
    if received <= 0:
        logger.debug("Peer closed the connection")
        return None
    logger.debug("Received %d bytes", received)
    return bytes(buffer[:received])


__all__ = ["encode_text", "decode_payload", "send_message", "receive_message"]
