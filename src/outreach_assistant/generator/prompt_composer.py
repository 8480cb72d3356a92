"""Render a generation request and its enrichment into one drafting prompt."""

import json
from typing import Optional

from outreach_assistant.generator.prompts.channels import guidance_for
from outreach_assistant.generator.prompts.variants import (
    SYSTEM_PROMPT,
    VARIANT_DEFINITIONS,
    describe_objective,
)
from outreach_assistant.models.context import EnrichmentResult, NOT_AVAILABLE_MARKER
from outreach_assistant.models.message import GenerationRequest

UNKNOWN = "Unknown"
NOT_PROVIDED = "Not provided"
COLD_OUTREACH_MARKER = (
    "No previous communications - this is cold outreach. "
    "Be extra compelling and earn their attention."
)
GENERIC_OFFERINGS = "General business solutions."
DEFAULT_PRODUCT_FOCUS = "Best match from our offerings"


def _or(value: Optional[str], placeholder: str) -> str:
    value = (value or "").strip()
    return value or placeholder


class PromptComposer:
    """Builds the drafting prompt.

    Every missing input is rendered as an explicit placeholder rather than
    left out, so the output depends only on the arguments.
    """

    def compose(
        self,
        request: GenerationRequest,
        contact_summary: Optional[EnrichmentResult] = None,
        seller_summary: Optional[EnrichmentResult] = None,
    ) -> tuple[str, str]:
        """
        Compose the drafting prompt.

        Returns:
            Tuple of (system_prompt, user_prompt).
        """
        sections = [
            "You are an expert B2B sales strategist. Analyze everything and create personalized outreach.",
            self._recipient_section(request, contact_summary),
            self._history_section(request),
            self._seller_section(request, seller_summary),
            self._task_section(request),
            self._requirements_section(request),
            self._variants_section(),
            self._format_section(),
        ]
        return SYSTEM_PROMPT, "\n\n".join(sections)

    def _recipient_section(
        self, request: GenerationRequest, summary: Optional[EnrichmentResult]
    ) -> str:
        contact = request.contact
        lines = [
            f"## BUYER ({_or(contact.name, UNKNOWN)} at {_or(contact.company, UNKNOWN)})",
            f"Name: {_or(contact.name, UNKNOWN)}",
            f"Title: {_or(contact.title, UNKNOWN)}",
            f"Company: {_or(contact.company, UNKNOWN)}",
            f"Website: {_or(contact.website, NOT_PROVIDED)}",
            f"LinkedIn: {_or(contact.linkedin_url, NOT_PROVIDED)}",
            f"Relationship stage: {_or(contact.funnel_stage, UNKNOWN)}",
            f"Relationship goal: {_or(contact.relationship_goal, UNKNOWN)}",
            f"Notes: {_or(contact.notes, NOT_PROVIDED)}",
            "",
        ]
        if summary is not None and summary.is_available:
            lines.append("Buyer business analysis:")
            lines.append(summary.summary)
        else:
            lines.append(f"Buyer business analysis: {NOT_AVAILABLE_MARKER} - infer from the company name and title.")
        return "\n".join(lines)

    def _history_section(self, request: GenerationRequest) -> str:
        if request.is_cold_outreach:
            body = COLD_OUTREACH_MARKER
        else:
            body = request.communications.strip()
        return f"## COMMUNICATION HISTORY\n{body}"

    def _seller_section(
        self, request: GenerationRequest, summary: Optional[EnrichmentResult]
    ) -> str:
        seller = request.seller
        lines = [
            f"## SELLER ({_or(seller.company, 'Our Company')})",
            f"Website: {_or(seller.website, NOT_PROVIDED)}",
            "",
        ]
        description = (seller.product_description or "").strip()
        if description:
            lines.append("Products/services available:")
            lines.append(description)
        elif summary is not None and summary.is_available:
            lines.append("Products/services available (from website analysis):")
            lines.append(summary.summary)
        else:
            if seller.products_url:
                lines.append(f"Offerings analysis: {NOT_AVAILABLE_MARKER}.")
            lines.append(GENERIC_OFFERINGS)
        return "\n".join(lines)

    def _task_section(self, request: GenerationRequest) -> str:
        return "\n".join([
            "## YOUR TASK",
            "1. MATCH: Based on the buyer's business, decide which seller offering(s) are most relevant.",
            "2. IDENTIFY PAIN: Name the specific problem we can solve for them.",
            "3. CRAFT MESSAGE: Show we understand THEIR business, connect our solution to THEIR needs,"
            " build on previous communications (if any), and move toward the objective below.",
        ])

    def _requirements_section(self, request: GenerationRequest) -> str:
        channel = request.channel.strip()
        return "\n".join([
            "## MESSAGE REQUIREMENTS",
            f"Channel: {channel} ({guidance_for(channel)})",
            f"Tone: {_or(request.tone, NOT_PROVIDED)}",
            f"Objective: {describe_objective(request.objective)}",
            f"Product focus: {_or(request.product, DEFAULT_PRODUCT_FOCUS)}",
        ])

    def _variants_section(self) -> str:
        lines = [f"Generate exactly {len(VARIANT_DEFINITIONS)} variants, one per approach:"]
        for tag, definition in VARIANT_DEFINITIONS.items():
            lines.append(f"- {tag.value}: {definition}")
        return "\n".join(lines)

    def _format_section(self) -> str:
        example = [
            {
                "variant": tag.value,
                "content": "message",
                "matchReason": "why this offering fits their needs",
            }
            for tag in VARIANT_DEFINITIONS
        ]
        return (
            "Return ONLY a JSON array (no markdown, no code fences, no surrounding text):\n"
            + json.dumps(example, indent=2)
        )
