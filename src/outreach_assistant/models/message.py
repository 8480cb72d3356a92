"""Generation request and message variant data models."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from outreach_assistant.errors import ValidationError
from outreach_assistant.models.contact import ContactProfile, SellerProfile


class VariantTag(Enum):
    """The four fixed rhetorical approaches requested per generation."""

    DIRECT = "direct"
    VALUE = "value"
    CURIOSITY = "curiosity"
    RELATIONSHIP = "relationship"

    @classmethod
    def parse(cls, value: object) -> Optional["VariantTag"]:
        """Return the tag for a raw value, or None if it is not one of ours."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class MessageVariant:
    """One generated message."""

    variant: VariantTag
    content: str
    match_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "variant": self.variant.value,
            "content": self.content,
            "match_reason": self.match_reason,
        }


@dataclass
class GenerationRequest:
    """Everything the generator needs to write one batch of variants."""

    contact: ContactProfile
    channel: str
    objective: str
    seller: SellerProfile = field(default_factory=SellerProfile)
    communications: str = ""
    tone: str = "professional"
    product: str = ""
    contact_id: Optional[str] = None

    @property
    def is_cold_outreach(self) -> bool:
        return not (self.communications or "").strip()

    def validate(self):
        """Reject requests that cannot produce a meaningful prompt."""
        missing = []
        if not (self.objective or "").strip():
            missing.append("objective")
        if not (self.channel or "").strip():
            missing.append("channel")
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")


@dataclass
class GenerationResult:
    """What a caller receives after a successful generation."""

    session_id: str
    variants: list[MessageVariant]
    dropped_count: int = 0
    persisted: bool = True

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "messages": [v.to_dict() for v in self.variants],
            "dropped_count": self.dropped_count,
            "persisted": self.persisted,
        }


@dataclass
class MessageRecord:
    """A persisted variant, linked to its contact, user and session."""

    session_id: str
    user_id: str
    contact_id: Optional[str]
    channel: str
    tone: str
    variant: str
    content: str
    product_pitched: str = ""
    match_reason: Optional[str] = None
    buyer_context: str = "{}"
    seller_context: str = "{}"
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_variant(
        cls,
        variant: MessageVariant,
        request: GenerationRequest,
        user_id: str,
        session_id: str,
    ) -> "MessageRecord":
        return cls(
            session_id=session_id,
            user_id=user_id,
            contact_id=request.contact_id or request.contact.id,
            channel=request.channel,
            tone=request.tone or "",
            variant=variant.variant.value,
            content=variant.content,
            product_pitched=request.product or "",
            match_reason=variant.match_reason,
            buyer_context=json.dumps(request.contact.to_dict()),
            seller_context=json.dumps(request.seller.to_dict()),
        )

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "contact_id": self.contact_id,
            "channel": self.channel,
            "tone": self.tone,
            "variant": self.variant,
            "content": self.content,
            "product_pitched": self.product_pitched,
            "match_reason": self.match_reason,
            "created_at": self.created_at.isoformat(),
        }
