from .async_connection_manager import AsyncConnectionManager

__all__ = ("AsyncConnectionManager",)
