from typing import Iterable, Protocol

from app.models import Member


class MemberDirectory(Protocol):
    def lookup(self, member_id: str) -> Member | None: ...


class InMemoryDirectory:
    """Member directory backed by a list of members supplied by the caller."""

    def __init__(self, members: Iterable[Member]):
        self._members = {m.id: m for m in members}

    def lookup(self, member_id: str) -> Member | None:
        return self._members.get(member_id)
