"""Per-channel length and style guidance."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

FALLBACK_GUIDANCE = "Adapt length and tone appropriately for the platform."


class Channel(Enum):
    """Channels a message can be written for."""

    LINKEDIN_DM = "linkedin_dm"
    LINKEDIN_COMMENT = "linkedin_comment"
    LINKEDIN_CONNECTION = "linkedin_connection"
    EMAIL = "email"
    EMAIL_FOLLOWUP = "email_followup"
    WHATSAPP = "whatsapp"
    SMS = "sms"


@dataclass(frozen=True)
class ChannelPolicy:
    """Format and length constraints for one channel."""

    max_length: str
    register: str
    formatting: str

    @property
    def guidance(self) -> str:
        return f"{self.max_length}. {self.register}. {self.formatting}."


CHANNEL_POLICIES: dict[Channel, ChannelPolicy] = {
    Channel.LINKEDIN_DM: ChannelPolicy(
        max_length="Keep under 300 characters for best engagement",
        register="Be professional but warm",
        formatting="No formal salutations needed",
    ),
    Channel.LINKEDIN_COMMENT: ChannelPolicy(
        max_length="Keep brief (1-3 sentences)",
        register="Add value to their post",
        formatting="Reference something specific they said",
    ),
    Channel.LINKEDIN_CONNECTION: ChannelPolicy(
        max_length="MUST be under 300 characters",
        register="Give a compelling reason to connect",
        formatting="Be specific, not generic",
    ),
    Channel.EMAIL: ChannelPolicy(
        max_length="Can be longer (150-250 words)",
        register="Professional format but personable",
        formatting="Include a subject line suggestion at the start",
    ),
    Channel.EMAIL_FOLLOWUP: ChannelPolicy(
        max_length="Shorter than the initial email",
        register="Reference the previous touchpoint",
        formatting="Add new value or a new angle",
    ),
    Channel.WHATSAPP: ChannelPolicy(
        max_length="Keep it mobile-friendly",
        register="Casual and conversational, an occasional emoji is fine",
        formatting="Use line breaks for readability",
    ),
    Channel.SMS: ChannelPolicy(
        max_length="Very short (under 160 characters)",
        register="Get to the point immediately",
        formatting="Include your name",
    ),
}

# Generic identifiers that map onto a concrete channel
CHANNEL_ALIASES = {
    "direct-message": Channel.LINKEDIN_DM,
    "direct_message": Channel.LINKEDIN_DM,
    "dm": Channel.LINKEDIN_DM,
    "short-message": Channel.SMS,
    "short_message": Channel.SMS,
    "text": Channel.SMS,
}


def resolve_channel(channel: str) -> Optional[Channel]:
    """Map a channel identifier to a known Channel, or None."""
    key = (channel or "").strip().lower()
    if key in CHANNEL_ALIASES:
        return CHANNEL_ALIASES[key]
    try:
        return Channel(key)
    except ValueError:
        return None


def guidance_for(channel: str) -> str:
    """Get the policy text for a channel, falling back to generic guidance."""
    resolved = resolve_channel(channel)
    if resolved is None:
        return FALLBACK_GUIDANCE
    return CHANNEL_POLICIES[resolved].guidance


def get_all_channels() -> list[str]:
    """Get all channel identifiers."""
    return [channel.value for channel in Channel]
