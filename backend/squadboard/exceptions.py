"""Domain errors surfaced to squadboard callers."""


class SquadboardError(Exception):
    """Base exception for caller-visible failures."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AccessDeniedError(SquadboardError):
    """Caller is not a member of the squad (403)."""

    status_code = 403


class SquadNotFoundError(SquadboardError):
    """Squad does not exist (404)."""

    status_code = 404


class InvalidTimeframeError(SquadboardError):
    """Unknown timeframe selector (400)."""

    status_code = 400


class NoMembersError(SquadboardError):
    """Squad has no members to rank (400)."""

    status_code = 400


class NoLeaderboardDataError(SquadboardError):
    """Leaderboard could not be computed (400)."""

    status_code = 400


class PersistenceError(SquadboardError):
    """Winner record could not be written (500)."""

    status_code = 500
