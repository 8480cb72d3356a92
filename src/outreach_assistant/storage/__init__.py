"""Persistence adapters and collaborator interfaces."""

from outreach_assistant.storage.protocols import (
    MESSAGES,
    ContactStore,
    MessageStore,
    QuotaGate,
    QuotaStatus,
)
from outreach_assistant.storage.sqlite_store import SQLiteStore

__all__ = [
    "MESSAGES",
    "ContactStore",
    "MessageStore",
    "QuotaGate",
    "QuotaStatus",
    "SQLiteStore",
]
