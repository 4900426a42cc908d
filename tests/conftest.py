from __future__ import annotations

import socket
from typing import Iterable, List

import pytest

from shared.settings import ChatSettings


class ScriptedInput:
    """Stands in for ``input``: returns queued lines, then raises EOFError."""

    def __init__(self, lines: Iterable[str]) -> None:
        self.lines: List[str] = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class Display:
    def __init__(self) -> None:
        self.lines: List[str] = []

    def __call__(self, text: str) -> None:
        self.lines.append(text)


@pytest.fixture
def settings() -> ChatSettings:
    return ChatSettings(log_level="DEBUG")


@pytest.fixture
def loopback_settings() -> ChatSettings:
    # Port 0 on the listening side; a timeout keeps a broken test from hanging.
    return ChatSettings(bind_host="127.0.0.1", server_port=0, socket_timeout=5.0)


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


@pytest.fixture
def scripted():
    """Factory for line readers: ``scripted(["hello", "exit"])``."""
    return ScriptedInput


@pytest.fixture
def make_display():
    return Display


@pytest.fixture
def display() -> Display:
    return Display()


@pytest.fixture
def tracked_sockets(monkeypatch):
    """Every socket created while the fixture is active, accepted ones included."""
    created: List[socket.socket] = []
    real_socket = socket.socket

    class TrackingSocket(real_socket):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    # accept() builds its socket through the module-level name as well.
    monkeypatch.setattr(socket, "socket", TrackingSocket)
    return created
