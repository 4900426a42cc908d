from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional


class ExitStatus(IntEnum):
    """Process exit statuses used by both entry points."""

    OK = 0
    SETUP_FAILED = 1
    BAD_CONFIG = 2
    INTERRUPTED = 130


class SetupStep(str, Enum):
    """Connection setup steps, in the order they run."""

    SOCKET = "socket"
    RESOLVE = "resolve"
    BIND = "bind"
    LISTEN = "listen"
    ACCEPT = "accept"
    CONNECT = "connect"


class SetupError(Exception):
    """Fatal failure while establishing the connection. Never retried."""

    exit_code = ExitStatus.SETUP_FAILED

    def __init__(self, step: SetupStep, message: str = "", cause: Optional[BaseException] = None) -> None:
        self.step = step
        self.message = message or (str(cause) if cause is not None else "")
        self.cause = cause
        super().__init__(self.diagnostic)

    @property
    def diagnostic(self) -> str:
        """One-line description naming the step that failed."""
        return f"{self.step.value} failed: {self.message}" if self.message else f"{self.step.value} failed"


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    exit_code = ExitStatus.BAD_CONFIG


__all__ = ["ExitStatus", "SetupStep", "SetupError", "ConfigError"]
