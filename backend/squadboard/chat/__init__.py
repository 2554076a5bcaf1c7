"""Squad chat transport and bot announcements."""

from squadboard.chat.announcer import ChatAnnouncer
from squadboard.chat.connection_manager import ConnectionManager, manager

__all__ = ["ChatAnnouncer", "ConnectionManager", "manager"]
