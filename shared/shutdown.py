from __future__ import annotations

import logging
import socket
from types import TracebackType
from typing import List, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class ShutdownHandler:
    """Releases every socket registered during a run exactly once.

    Used as a context manager around establish + session so the sockets are
    closed whether the loop ended on the sentinel, on a peer disconnect, or
    because an exception escaped.
    """

    def __init__(self) -> None:
        self._resources: List[Tuple[str, socket.socket]] = []
        self._closed = False

    def register(self, sock: socket.socket, label: str) -> socket.socket:
        if self._closed:
            # Too late to track it; release immediately.
            _close_quietly(sock, label)
            raise RuntimeError(f"Cannot register {label}: shutdown already ran")
        self._resources.append((label, sock))
        logger.debug("Registered %s for shutdown", label)
        return sock

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def labels(self) -> List[str]:
        return [label for label, _ in self._resources]

    def close(self) -> None:
        """Close registered sockets in reverse registration order. Idempotent."""
        if self._closed:
            return
        self._closed = True
        while self._resources:
            label, sock = self._resources.pop()
            _close_quietly(sock, label)

    def __enter__(self) -> "ShutdownHandler":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


def _close_quietly(sock: socket.socket, label: str) -> None:
    try:
        sock.close()
    except OSError as exc:
        # The descriptor is gone either way; nothing left to release.
        logger.warning("Error closing %s: %s", label, exc)
    else:
        logger.debug("Closed %s", label)


__all__ = ["ShutdownHandler"]
