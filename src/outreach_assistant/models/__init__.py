"""Data models for the outreach assistant."""

from outreach_assistant.models.contact import ContactProfile, SellerProfile
from outreach_assistant.models.context import (
    EnrichmentResult,
    EnrichmentStatus,
    FocusKind,
    WebsiteAnalysis,
)
from outreach_assistant.models.message import (
    GenerationRequest,
    GenerationResult,
    MessageRecord,
    MessageVariant,
    VariantTag,
)

__all__ = [
    "ContactProfile",
    "SellerProfile",
    "EnrichmentResult",
    "EnrichmentStatus",
    "FocusKind",
    "WebsiteAnalysis",
    "GenerationRequest",
    "GenerationResult",
    "MessageRecord",
    "MessageVariant",
    "VariantTag",
]
