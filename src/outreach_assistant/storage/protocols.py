"""Interfaces the generator needs from the surrounding application."""

from dataclasses import dataclass
from typing import Optional, Protocol

from outreach_assistant.models.contact import ContactProfile
from outreach_assistant.models.message import MessageRecord

# Resource kind counted against the quota for each generation
MESSAGES = "messages"


@dataclass(frozen=True)
class QuotaStatus:
    """Result of a quota check."""

    allowed: bool
    used: int = 0
    limit: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


class QuotaGate(Protocol):
    async def check_quota(self, user_id: str, resource_kind: str) -> QuotaStatus: ...

    async def increment_usage(self, user_id: str, resource_kind: str) -> None: ...


class MessageStore(Protocol):
    async def insert_message_variants(self, records: list[MessageRecord]) -> None: ...


class ContactStore(Protocol):
    async def get_contact(self, user_id: str, contact_id: str) -> Optional[ContactProfile]: ...

    async def get_communication_history(self, user_id: str, contact_id: str) -> str: ...
