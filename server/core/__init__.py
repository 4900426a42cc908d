from .server import ResponderListener

__all__ = ["ResponderListener"]
