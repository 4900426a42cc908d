from __future__ import annotations

import logging
import sys
from typing import Optional

from client.core import open_connection
from shared.protocol.errors import ConfigError, ExitStatus, SetupError
from shared.protocol.messages import Role
from shared.session import ChatSession, LineReader, LineWriter
from shared.settings import ChatSettings, configure_logging, load_settings
from shared.shutdown import ShutdownHandler

logger = logging.getLogger(__name__)


def run_client(
    settings: ChatSettings,
    read_line: Optional[LineReader] = None,
    write_line: Optional[LineWriter] = None,
) -> int:
    """Run the Initiator role once and return the process exit status."""
    with ShutdownHandler() as shutdown:
        try:
            connection = shutdown.register(open_connection(settings), "connection")
        except SetupError as exc:
            logger.error("Client setup failed: %s", exc.diagnostic)
            print(exc.diagnostic, file=sys.stderr)
            return int(exc.exit_code)
        except KeyboardInterrupt:
            logger.info("Interrupted while connecting")
            return int(ExitStatus.INTERRUPTED)

        try:
            ChatSession(connection, Role.INITIATOR, settings, read_line, write_line).run()
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
    return run_client(settings)


if __name__ == "__main__":
    sys.exit(main())
