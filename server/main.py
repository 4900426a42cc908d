from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Optional, Tuple

from server.core import ResponderListener
from shared.protocol.errors import ConfigError, ExitStatus, SetupError
from shared.protocol.messages import Role
from shared.session import ChatSession, LineReader, LineWriter
from shared.settings import ChatSettings, configure_logging, load_settings
from shared.shutdown import ShutdownHandler

logger = logging.getLogger(__name__)

ListeningCallback = Callable[[Tuple[Any, ...]], None]


def run_server(
    settings: ChatSettings,
    read_line: Optional[LineReader] = None,
    write_line: Optional[LineWriter] = None,
    on_listening: Optional[ListeningCallback] = None,
) -> int:
    """Run the Responder role for exactly one session and return the exit status."""
    listener = ResponderListener(settings, announce=write_line)
    with ShutdownHandler() as shutdown:
        try:
            shutdown.register(listener.open(), "listening socket")
            if on_listening is not None:
                on_listening(listener.address)
            connection, _peer = listener.accept_one()
            shutdown.register(connection, "connection")
        except SetupError as exc:
            logger.error("Server setup failed: %s", exc.diagnostic)
            print(exc.diagnostic, file=sys.stderr)
            return int(exc.exit_code)
        except KeyboardInterrupt:
            logger.info("Interrupted while waiting for a client")
            return int(ExitStatus.INTERRUPTED)

        try:
            ChatSession(connection, Role.RESPONDER, settings, read_line, write_line).run()
        except KeyboardInterrupt:
            logger.info("Interrupted, closing connection")
            return int(ExitStatus.INTERRUPTED)
    return int(ExitStatus.OK)


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return int(exc.exit_code)
    configure_logging(settings)
    return run_server(settings)


if __name__ == "__main__":
    sys.exit(main())
