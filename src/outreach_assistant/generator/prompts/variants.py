"""Fixed variant taxonomy and system instructions for message drafting."""

from outreach_assistant.models.message import VariantTag

# System instruction for drafting the four variants
SYSTEM_PROMPT = """You are an expert B2B sales copywriter. Return ONLY valid JSON arrays. No markdown code blocks, no explanations, no commentary."""

# System instruction for website summaries
ENRICHMENT_SYSTEM_PROMPT = "Be concise and direct. No fluff."

# System instruction for structured website analysis
ANALYSIS_SYSTEM_PROMPT = (
    "You analyze business websites and extract product/service information. "
    "Return ONLY valid JSON."
)

# Behavioral definition of each variant; order is the order requested
VARIANT_DEFINITIONS: dict[VariantTag, str] = {
    VariantTag.DIRECT: "Clear value prop + specific ask",
    VariantTag.VALUE: "Lead with insight about THEIR business challenge",
    VariantTag.CURIOSITY: "Thought-provoking question about their situation",
    VariantTag.RELATIONSHIP: "Connection-focused, softer approach",
}

# Extra guidance for well-known objective keys
OBJECTIVE_GUIDANCE = {
    "first_touch": "This is our first contact. Keep it warm, personalized, and non-salesy.",
    "follow_up": "Following up on a previous message that got no response. Be brief, add value.",
    "value_add": "Share something genuinely useful without asking for anything.",
    "pitch": "Present a specific service or idea. Lead with value, include soft CTA.",
    "advance": "Move the relationship forward. Goal is to get to the next stage.",
    "close": "Ask for the commitment. Be direct but not pushy.",
    "maintain": "Keep the relationship warm. Check in genuinely.",
    "reactivate": "Re-engage after silence. Acknowledge the gap, add value.",
    "thank": "Express genuine gratitude. Reinforce the relationship.",
}

CONTACT_BUSINESS_FOCUS = """Analyze this business website and extract:
1. What does this company do?
2. Who are their customers?
3. What problems do they solve?
4. What challenges might they face?
Be concise (under 150 words)."""

SELLER_OFFERINGS_FOCUS = """Extract products and services from this website. List each with a brief description. Be concise (under 150 words)."""

WEBSITE_ANALYSIS_TEMPLATE = """Analyze this website content and extract:
1. Company name
2. What products or services they offer
3. A brief description of their business (2-3 sentences)
4. List of specific products/services (as array)

Website URL: {url}

Website Content:
{content}

Return JSON format:
{{
  "company_name": "...",
  "description": "...",
  "products": ["Product 1", "Product 2"],
  "target_audience": "..."
}}"""


def describe_objective(objective: str) -> str:
    """Render an objective, appending guidance when it is a known key."""
    objective = objective.strip()
    guidance = OBJECTIVE_GUIDANCE.get(objective.lower())
    if guidance:
        return f"{objective} - {guidance}"
    return objective
