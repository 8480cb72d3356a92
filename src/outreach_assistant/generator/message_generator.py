"""Main message generation orchestrator."""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from outreach_assistant.config import Settings, get_settings
from outreach_assistant.errors import (
    ContactNotFoundError,
    GenerationTimeoutError,
    QuotaExceededError,
)
from outreach_assistant.generator.client import GenerationClient
from outreach_assistant.generator.prompt_composer import PromptComposer
from outreach_assistant.generator.response_parser import ResponseParser
from outreach_assistant.generator.session_recorder import SessionRecorder
from outreach_assistant.models.contact import SellerProfile
from outreach_assistant.models.message import GenerationRequest, GenerationResult
from outreach_assistant.storage.protocols import (
    MESSAGES,
    ContactStore,
    MessageStore,
    QuotaGate,
)

if TYPE_CHECKING:
    from outreach_assistant.analyzer.context_analyzer import ContextEnricher

logger = logging.getLogger(__name__)


class MessageGenerator:
    """Orchestrates quota, enrichment, drafting, parsing and recording."""

    def __init__(
        self,
        client: GenerationClient,
        quota: QuotaGate,
        store: MessageStore,
        enricher: Optional["ContextEnricher"] = None,
        contacts: Optional[ContactStore] = None,
        composer: Optional[PromptComposer] = None,
        parser: Optional[ResponseParser] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize message generator.

        Args:
            client: Backend client used for drafting.
            quota: Usage gate consulted before and incremented after generation.
            store: Where generated variants are written.
            enricher: Website summarizer; when None, enrichment is skipped.
            contacts: Contact store, required only by generate_for_contact.
        """
        self.client = client
        self.quota = quota
        self.enricher = enricher
        self.contacts = contacts
        self.composer = composer or PromptComposer()
        self.parser = parser or ResponseParser()
        self.recorder = SessionRecorder(store)
        self.settings = settings or get_settings()

    async def generate_messages(
        self,
        request: GenerationRequest,
        user_id: str,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Generate, validate and record one batch of message variants.

        Args:
            request: What to write and for whom.
            user_id: The user whose quota is charged.
            timeout: Seconds allowed for enrichment plus generation.

        Raises:
            ValidationError, QuotaExceededError, BackendError, ParseError.
        """
        request.validate()

        status = await self.quota.check_quota(user_id, MESSAGES)
        if not status.allowed:
            logger.warning(f"Quota exceeded for {user_id}: {status.used}/{status.limit}")
            raise QuotaExceededError(user_id, MESSAGES, status.used, status.limit)

        logger.info(
            f"Generating messages for {request.contact.name or 'unknown contact'} "
            f"via {request.channel} (cold={request.is_cold_outreach})"
        )

        if timeout is None:
            raw = await self._draft(request)
        else:
            try:
                raw = await asyncio.wait_for(self._draft(request), timeout)
            except asyncio.TimeoutError as e:
                logger.error(f"Generation timed out after {timeout}s")
                raise GenerationTimeoutError(f"Generation timed out after {timeout}s") from e

        parsed = self.parser.parse(raw)
        if parsed.dropped_count:
            logger.warning(f"Dropped {parsed.dropped_count} malformed variants")

        session, _ = await asyncio.gather(
            self.recorder.record(request, user_id, parsed.variants),
            self._increment_usage(user_id),
        )

        logger.info(f"  ✓ {len(parsed.variants)} variants in session {session.session_id}")
        return GenerationResult(
            session_id=session.session_id,
            variants=parsed.variants,
            dropped_count=parsed.dropped_count,
            persisted=session.persisted,
        )

    async def generate_for_contact(
        self,
        user_id: str,
        contact_id: str,
        channel: str,
        objective: str,
        seller: Optional[SellerProfile] = None,
        tone: str = "professional",
        product: str = "",
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """Load a stored contact and its history, then generate."""
        if self.contacts is None:
            raise RuntimeError("A contact store is required to generate by contact id")

        contact = await self.contacts.get_contact(user_id, contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact not found: {contact_id}")
        communications = await self.contacts.get_communication_history(user_id, contact_id)

        request = GenerationRequest(
            contact=contact,
            seller=seller or SellerProfile(),
            communications=communications,
            channel=channel,
            objective=objective,
            tone=tone,
            product=product,
            contact_id=contact_id,
        )
        return await self.generate_messages(request, user_id, timeout=timeout)

    async def _draft(self, request: GenerationRequest) -> str:
        """Enrich, compose and run the drafting call."""
        contact_summary = None
        seller_summary = None
        if self.enricher is not None:
            contact_summary = await self.enricher.summarize_contact_business(request.contact)
            seller_summary = await self.enricher.summarize_seller_offerings(request.seller)

        system_prompt, user_prompt = self.composer.compose(
            request, contact_summary, seller_summary
        )
        return await self.client.complete(
            system_prompt,
            user_prompt,
            temperature=self.settings.draft_temperature,
            max_tokens=self.settings.draft_max_tokens,
        )

    async def _increment_usage(self, user_id: str):
        try:
            await self.quota.increment_usage(user_id, MESSAGES)
        except Exception as e:
            logger.warning(f"Failed to increment usage for {user_id}: {e}")
