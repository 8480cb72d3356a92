"""Best-effort persistence of generated variants."""

import logging
import uuid
from dataclasses import dataclass

from outreach_assistant.models.message import GenerationRequest, MessageRecord, MessageVariant
from outreach_assistant.storage.protocols import MessageStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    """Session id assigned to a batch and whether it reached the store."""

    session_id: str
    persisted: bool


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionRecorder:
    """Assigns a session id to each batch and writes its variants."""

    def __init__(self, store: MessageStore):
        self.store = store

    async def record(
        self,
        request: GenerationRequest,
        user_id: str,
        variants: list[MessageVariant],
    ) -> SessionRecord:
        """
        Persist one record per variant under a fresh session id.

        Store failures are logged and reported through ``persisted``; the
        caller already holds the generated content.
        """
        session_id = new_session_id()
        records = [
            MessageRecord.from_variant(variant, request, user_id, session_id)
            for variant in variants
        ]

        try:
            await self.store.insert_message_variants(records)
        except Exception as e:
            logger.warning(f"Failed to save {len(records)} messages for session {session_id}: {e}")
            return SessionRecord(session_id=session_id, persisted=False)

        logger.info(f"Saved {len(records)} messages for session {session_id}")
        return SessionRecord(session_id=session_id, persisted=True)
