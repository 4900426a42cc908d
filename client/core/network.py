from __future__ import annotations

import logging
import socket
from typing import Tuple

from shared.protocol.errors import SetupError, SetupStep
from shared.settings import ChatSettings
from shared.utils import format_address

logger = logging.getLogger(__name__)


def resolve_address(host: str, port: int) -> Tuple[str, int]:
    """Resolve ``host`` to an IPv4 socket address."""
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise SetupError(SetupStep.RESOLVE, f"invalid address {host!r}: {exc}", exc) from exc
    if not infos:
        raise SetupError(SetupStep.RESOLVE, f"no IPv4 address for {host!r}")
    return infos[0][4][:2]


def open_connection(settings: ChatSettings) -> socket.socket:
    """Connect to the Responder once. Any failure is fatal; nothing is retried."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        raise SetupError(SetupStep.SOCKET, f"could not create socket: {exc}", exc) from exc

    try:
        address = resolve_address(settings.server_host, settings.server_port)
        sock.settimeout(settings.socket_timeout)
        logger.info("Connecting to %s", format_address(address))
        try:
            sock.connect(address)
        except OSError as exc:
            raise SetupError(SetupStep.CONNECT, f"{format_address(address)}: {exc}", exc) from exc
    except BaseException:
        sock.close()
        raise

    logger.info("Connected to %s", format_address(address))
    return sock


__all__ = ["open_connection", "resolve_address"]
