from __future__ import annotations

from typing import Any, Tuple


def format_address(address: Tuple[Any, ...]) -> str:
    """Render a socket address tuple as host:port."""
    if not address:
        return "unknown"
    port = address[1] if len(address) > 1 else "?"
    return f"{address[0]}:{port}"


__all__ = ["format_address"]
