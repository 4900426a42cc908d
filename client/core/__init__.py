from .network import open_connection, resolve_address

__all__ = ["open_connection", "resolve_address"]
