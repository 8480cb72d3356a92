"""Turn raw backend output into validated message variants."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from outreach_assistant.errors import ParseError
from outreach_assistant.models.message import MessageVariant, VariantTag

logger = logging.getLogger(__name__)

# Leading fence with optional language tag, and trailing fence
_OPEN_FENCE = re.compile(r"^```[\w-]*\s*")
_CLOSE_FENCE = re.compile(r"\s*```$")

# Keys the backend has been seen to use for the rationale
_REASON_KEYS = ("matchReason", "match_reason", "rationale")


@dataclass
class ParsedVariants:
    """Variants that passed validation plus the number that did not."""

    variants: list[MessageVariant] = field(default_factory=list)
    dropped_count: int = 0


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the backend wraps around its output."""
    text = (text or "").strip()
    text = _OPEN_FENCE.sub("", text, count=1)
    return _CLOSE_FENCE.sub("", text, count=1).strip()


class ResponseParser:
    """Parse the JSON array of variants returned by the backend.

    Output that is not a JSON array fails the whole request. Individual
    entries with the wrong shape are dropped and counted; if nothing valid
    remains the request fails as well.
    """

    def parse(self, raw: str) -> ParsedVariants:
        cleaned = strip_code_fences(raw)
        if not cleaned:
            raise ParseError("Empty generation output", raw_output=raw or "")

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse generation output: {e}")
            raise ParseError(f"Unparsable generation output: {e}", raw_output=raw) from e

        if not isinstance(data, list):
            raise ParseError(
                f"Expected a JSON array of variants, got {type(data).__name__}",
                raw_output=raw,
            )

        result = ParsedVariants()
        for index, entry in enumerate(data):
            variant = self._to_variant(entry)
            if variant is None:
                logger.warning(f"Dropping malformed variant entry at index {index}")
                result.dropped_count += 1
                continue
            result.variants.append(variant)

        if not result.variants:
            raise ParseError(
                f"No valid variants in generation output ({result.dropped_count} dropped)",
                raw_output=raw,
            )

        return result

    def _to_variant(self, entry: object) -> Optional[MessageVariant]:
        if not isinstance(entry, dict):
            return None

        content = entry.get("content")
        if not isinstance(content, str) or not content.strip():
            return None

        tag = VariantTag.parse(entry.get("variant"))
        if tag is None:
            return None

        match_reason = None
        for key in _REASON_KEYS:
            value = entry.get(key)
            if isinstance(value, str) and value.strip():
                match_reason = value.strip()
                break

        return MessageVariant(variant=tag, content=content.strip(), match_reason=match_reason)
