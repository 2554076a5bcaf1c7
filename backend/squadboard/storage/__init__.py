"""
Storage module initialization.
Exports database components for use throughout the application.
"""

from squadboard.storage.base import Base
from squadboard.storage.repositories import (
    MembershipRepository,
    ProfileRepository,
    WinnerRepository,
)
from squadboard.storage.session import (
    create_all,
    dispose_engine,
    get_engine,
    get_session,
    get_session_factory,
    init_engine,
)
from squadboard.storage.tables import Squad, SquadMember, SquadWinner, User

__all__ = [
    # Engine and sessions
    "init_engine",
    "get_engine",
    "get_session_factory",
    "get_session",
    "create_all",
    "dispose_engine",
    # Tables
    "Base",
    "User",
    "Squad",
    "SquadMember",
    "SquadWinner",
    # Repositories
    "MembershipRepository",
    "ProfileRepository",
    "WinnerRepository",
]
