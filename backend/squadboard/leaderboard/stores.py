"""Collaborator interfaces consumed by the leaderboard core."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from squadboard.leaderboard.models import MemberProfile, WinnerRecord


class MembershipStore(Protocol):
    async def squad_exists(self, squad_id: int) -> bool: ...

    async def list_members(self, squad_id: int) -> list[str]: ...

    async def is_member(self, squad_id: int, identity: str) -> bool: ...


class ProfileStore(Protocol):
    async def get_profiles(self, identities: Sequence[str]) -> list[MemberProfile]: ...


class WinnerStore(Protocol):
    async def find(self, squad_id: int, week: int) -> WinnerRecord | None: ...

    async def upsert(self, record: WinnerRecord) -> WinnerRecord: ...


class AnnouncementChannel(Protocol):
    async def publish(self, event: str, payload: dict[str, Any]) -> None: ...
