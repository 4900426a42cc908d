from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Optional, Tuple

from shared.protocol.errors import SetupError, SetupStep
from shared.settings import ChatSettings
from shared.utils import format_address

logger = logging.getLogger(__name__)

Announce = Callable[[str], None]


def _print_line(text: str) -> None:
    print(text, flush=True)


class ResponderListener:
    """Binds the known port and accepts exactly one connection.

    This is not a server loop: after ``accept_one`` succeeds, later connection
    attempts sit in the backlog and are never serviced by this run.
    """

    def __init__(self, settings: ChatSettings, announce: Optional[Announce] = None) -> None:
        self.settings = settings
        self.announce = announce or _print_line
        self._sock: Optional[socket.socket] = None
        self._accepted = False

    @property
    def listening_socket(self) -> Optional[socket.socket]:
        return self._sock

    @property
    def address(self) -> Tuple[Any, ...]:
        if self._sock is None:
            raise RuntimeError("Listener is not open")
        return self._sock.getsockname()

    def open(self) -> socket.socket:
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise SetupError(SetupStep.SOCKET, f"could not create socket: {exc}", exc) from exc

        bind_to = (self.settings.bind_host, self.settings.server_port)
        try:
            if self.settings.reuse_address:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            try:
                sock.bind(bind_to)
            except (OSError, OverflowError) as exc:
                raise SetupError(SetupStep.BIND, f"{format_address(bind_to)}: {exc}", exc) from exc
            try:
                sock.listen(self.settings.backlog)
            except (OSError, OverflowError) as exc:
                raise SetupError(SetupStep.LISTEN, str(exc), exc) from exc
        except BaseException:
            sock.close()
            raise

        self._sock = sock
        port = sock.getsockname()[1]
        logger.info("Listening on %s (backlog %d)", format_address(sock.getsockname()), self.settings.backlog)
        self.announce(f"Server listening on port {port}")
        return sock

    def accept_one(self) -> Tuple[socket.socket, Tuple[Any, ...]]:
        if self._sock is None:
            raise SetupError(SetupStep.ACCEPT, "listener is not open")
        if self._accepted:
            raise SetupError(SetupStep.ACCEPT, "a session was already accepted on this run")
        try:
            conn, peer = self._sock.accept()
        except OSError as exc:
            raise SetupError(SetupStep.ACCEPT, str(exc), exc) from exc
        self._accepted = True
        conn.settimeout(self.settings.socket_timeout)
        logger.info("Accepted connection from %s", format_address(peer))
        self.announce("Client connected!")
        return conn, peer


__all__ = ["ResponderListener"]
