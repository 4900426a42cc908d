from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from shared.protocol.constants import (
    DEFAULT_BIND_HOST,
    DEFAULT_PORT,
    DEFAULT_SERVER_HOST,
    ENCODING,
    LISTEN_BACKLOG,
    RECV_BUFFER_SIZE,
    TERMINATION_SENTINEL,
)
from shared.protocol.errors import ConfigError

ENV_PREFIX = "TURNCHAT_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
MAX_BACKLOG = 65535


@dataclass(frozen=True)
class ChatSettings:
    """Settings for one run of either role. Passed explicitly, never global."""

    server_host: str = DEFAULT_SERVER_HOST
    bind_host: str = DEFAULT_BIND_HOST
    server_port: int = DEFAULT_PORT
    buffer_size: int = RECV_BUFFER_SIZE
    sentinel: str = TERMINATION_SENTINEL
    backlog: int = LISTEN_BACKLOG
    reuse_address: bool = False
    socket_timeout: Optional[float] = None  # None blocks forever
    encoding: str = ENCODING
    log_level: str = "WARNING"

    def with_overrides(self, **overrides: Any) -> "ChatSettings":
        updated = replace(self, **overrides)
        validate_settings(updated)
        return updated


def load_settings(env_path: str = ".env", environ: Optional[Mapping[str, str]] = None) -> ChatSettings:
    """Build settings from defaults, a .env file and ``TURNCHAT_*`` variables."""
    if environ is None:
        if Path(env_path).exists():
            load_dotenv(env_path)
        environ = os.environ

    values: Dict[str, Any] = {}
    for item in fields(ChatSettings):
        raw = environ.get(f"{ENV_PREFIX}{item.name.upper()}")
        if raw is None:
            continue
        values[item.name] = _coerce(item.name, raw, item.default)

    settings = ChatSettings(**values)
    validate_settings(settings)
    return settings


def _coerce(name: str, value: str, default: Any) -> Any:
    try:
        if name == "socket_timeout":
            if value.strip().lower() in ("", "none", "off"):
                return None
            return float(value)
        if isinstance(default, bool):
            return value.strip().lower() in ("1", "true", "yes", "on")
        if isinstance(default, int):
            return int(value)
        return value
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {ENV_PREFIX}{name.upper()}={value!r}") from exc


def validate_settings(settings: ChatSettings) -> None:
    # Port 0 lets the OS pick; only meaningful for the listening side.
    if not (0 <= settings.server_port <= 65535):
        raise ConfigError("server_port must be between 0 and 65535")
    if settings.buffer_size <= 0:
        raise ConfigError("buffer_size must be positive")
    if not (0 <= settings.backlog <= MAX_BACKLOG):
        raise ConfigError(f"backlog must be between 0 and {MAX_BACKLOG}")
    if not settings.sentinel:
        raise ConfigError("sentinel must not be empty")
    if settings.socket_timeout is not None and settings.socket_timeout <= 0:
        raise ConfigError("socket_timeout must be positive when set")
    if settings.log_level.upper() not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log_level {settings.log_level!r}")
    try:
        settings.sentinel.encode(settings.encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown encoding {settings.encoding!r}") from exc
    except UnicodeEncodeError as exc:
        raise ConfigError(f"sentinel {settings.sentinel!r} cannot be encoded as {settings.encoding}") from exc


def configure_logging(settings: ChatSettings) -> None:
    """Send log records to stderr at the configured level; stdout stays the chat."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["ChatSettings", "ENV_PREFIX", "configure_logging", "load_settings", "validate_settings"]
