"""Protocol-wide constants shared by client and server."""

ENCODING = "utf-8"
DEFAULT_PORT = 8080
DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_BIND_HOST = "0.0.0.0"  # all local interfaces
RECV_BUFFER_SIZE = 1024  # one read, one message
LISTEN_BACKLOG = 3
TERMINATION_SENTINEL = "exit"

__all__ = [
    "ENCODING",
    "DEFAULT_PORT",
    "DEFAULT_SERVER_HOST",
    "DEFAULT_BIND_HOST",
    "RECV_BUFFER_SIZE",
    "LISTEN_BACKLOG",
    "TERMINATION_SENTINEL",
]
